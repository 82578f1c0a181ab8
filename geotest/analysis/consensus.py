"""
Consensus Engine
================

Reduces the provider results of one analysis run into a single weighted
score (hybrid weighting of self-reported confidence and configured
provider authority), an average confidence and a reliability metric.
"""

import logging
from typing import Dict, List, Optional

from geotest.core.config import PROVIDERS
from geotest.core.errors import NoResultsError, NoSuccessfulResultsError
from geotest.core.logger import operation_logger
from geotest.core.schemas import (
    ConsensusMetadata,
    ConsensusResult,
    ProviderConfig,
    ProviderId,
    ProviderResult,
)
from geotest.core.utils import mean, round_half_up, round_to

logger = logging.getLogger(__name__)

CONSENSUS_METHOD = "3-AI Enhanced GEO Hybrid"
CONFIDENCE_SHARE = 0.7
AUTHORITY_SHARE = 0.3
DEFAULT_WEIGHT = 1 / 3
CONFLICT_THRESHOLD = 20
# variance at or above this discounts reliability
RELIABILITY_VARIANCE_LIMIT = 25
VARIANCE_PENALTY = 0.85

RECOMMENDED_ACTIONS = [
    "Implement GEO technical optimizations identified by Gemini Pro analysis for immediate AI discoverability gains",
    "Execute content strategy enhancements based on GPT-4 analysis for authority building and citation optimization",
    "Address E-E-A-T positioning gaps revealed through Claude analysis for enhanced AI system trust and credibility",
    "Capitalize on generative search opportunities identified through enhanced AI analysis for competitive advantage",
    "Monitor GEO performance improvements using 3-AI consensus benchmarks for continuous optimization and AI visibility tracking",
]


class ConsensusEngine:
    """
    Hybrid weighted consensus over provider results.

    Weights are resolved by provider id, so the outcome does not depend on
    the order in which results arrive.

    Example:
        >>> engine = ConsensusEngine()
        >>> consensus = engine.generate(results)
        >>> consensus.final_score
        71
    """

    def __init__(self, providers: Optional[Dict[ProviderId, ProviderConfig]] = None, enable_logging: bool = False):
        self.providers = providers if providers is not None else PROVIDERS
        self.op_log = operation_logger(enable_logging)

    def static_weight(self, provider: ProviderId) -> float:
        config = self.providers.get(provider)
        return config.static_weight if config is not None else DEFAULT_WEIGHT

    def combined_weight(self, result: ProviderResult) -> float:
        return CONFIDENCE_SHARE * result.confidence + AUTHORITY_SHARE * self.static_weight(result.provider)

    def generate(self, results: List[ProviderResult]) -> ConsensusResult:
        """
        Combine provider results.

        Args:
            results: One entry per provider, failed ones included

        Returns:
            ConsensusResult

        Raises:
            NoResultsError: If results is empty
            NoSuccessfulResultsError: If no result has success=True
        """
        if not results:
            raise NoResultsError()

        successful = [r for r in results if r.success]
        if not successful:
            raise NoSuccessfulResultsError(total=len(results))

        total_processing_time = sum(r.processing_time_ms for r in results)
        self.op_log.log(
            "3-AI GEO Consensus Generation",
            total_providers=len(results),
            successful_providers=len(successful),
            total_processing_time_ms=total_processing_time,
        )

        weights = [self.combined_weight(r) for r in successful]
        weighted_sum = sum(r.score * w for r, w in zip(successful, weights))
        final_score = round_half_up(weighted_sum / sum(weights))
        confidence = mean(r.confidence for r in successful)

        scores = [r.score for r in successful]
        score_variance = max(scores) - min(scores)
        conflicting_views = self._conflicting_views(score_variance)

        configured = len(self.providers) or len(results)
        agreement = 1.0 if score_variance < RELIABILITY_VARIANCE_LIMIT else VARIANCE_PENALTY
        reliability = min(1.0, (len(successful) / configured) * confidence * agreement)

        logger.info(
            f"✅ [Consensus] score={final_score} confidence={confidence:.2f} "
            f"variance={score_variance} providers={len(successful)}/{len(results)}"
        )

        return ConsensusResult(
            final_score=final_score,
            confidence=confidence,
            provider_results=list(results),
            consensus_insights=self._insights(len(successful)),
            conflicting_views=conflicting_views,
            recommended_actions=list(RECOMMENDED_ACTIONS),
            metadata=ConsensusMetadata(
                providers_used=len(successful),
                total_processing_time_ms=total_processing_time,
                method=CONSENSUS_METHOD,
                reliability=round_to(reliability, 2),
            ),
        )

    @staticmethod
    def _insights(successful_count: int) -> List[str]:
        return [
            f"Advanced 3-AI GEO consensus analysis from {successful_count} premium providers reveals comprehensive optimization roadmap",
            "GPT-4 content strategy combined with Gemini GEO technical analysis provides holistic AI discoverability foundation",
            "Claude E-E-A-T assessment integrated with content and technical analysis identifies unique authority positioning opportunities",
            "Multi-AI consensus confirms favorable GEO optimization potential with systematic enhancement framework for AI visibility",
        ]

    @staticmethod
    def _conflicting_views(score_variance: int) -> List[str]:
        if score_variance <= CONFLICT_THRESHOLD:
            return []
        return [
            f"Score variance of {score_variance} points indicates different AI perspectives on GEO optimization priorities and implementation strategies",
            "Multiple analysis approaches reveal both immediate technical GEO wins and long-term strategic content authority opportunities",
            "3-AI consensus building prioritizes high-confidence GEO recommendations with broad provider agreement for maximum AI visibility impact",
        ]


def generate_consensus(results: List[ProviderResult]) -> ConsensusResult:
    """Module-level shortcut using the default provider catalogue."""
    return ConsensusEngine().generate(results)
