"""
GEO Report
==========

Top-level analysis of one website: runs the AI visibility probe and the
multi-provider consensus side by side and folds both into a GeoReport.

When the live run fails (no provider succeeded, or anything else went
wrong) the caller still gets a report, explicitly flagged as fallback.
"""

import asyncio
import logging
from typing import List, Optional

from geotest.analysis.consensus import ConsensusEngine
from geotest.analysis.orchestrator import AnalysisOrchestrator
from geotest.analysis.visibility import VisibilityProbe
from geotest.core.cache import ResponseCache
from geotest.core.config import AIConfig
from geotest.core.schemas import AIVisibilityScores, ConsensusResult, GeoReport, VisibilityReport
from geotest.core.utils import round_half_up
from geotest.core.validation import validate_url

logger = logging.getLogger(__name__)

FALLBACK_NOTE = "Live AI analysis was unavailable"
STRUCTURE_TERMS = ("structure", "schema", "semantic")


def _any_contains(lines: List[str], *terms: str) -> bool:
    return any(term in line.lower() for line in lines for term in terms)


def accuracy_score(consensus: ConsensusResult) -> int:
    insights = consensus.consensus_insights
    if _any_contains(insights, "accurate"):
        return 85
    if _any_contains(insights, "correct"):
        return 75
    return 65


def structure_score(consensus: ConsensusResult) -> int:
    mentions = [
        action for action in consensus.recommended_actions
        if any(term in action.lower() for term in STRUCTURE_TERMS)
    ]
    return 85 if len(mentions) > 2 else 70


def competitive_score(consensus: ConsensusResult) -> int:
    insights = consensus.consensus_insights
    if _any_contains(insights, "competitive", "leader"):
        return 80
    if _any_contains(insights, "average"):
        return 60
    return 50


def build_report(url: str, visibility: VisibilityReport, consensus: ConsensusResult) -> GeoReport:
    """
    Derive component scores from a visibility report and a consensus.

    Returns:
        GeoReport with score = 0.3 vis + 0.2 acc + 0.2 struct + 0.15 comp + 0.15 consensus
    """
    vis = round_half_up(visibility.overall_visibility)
    acc = accuracy_score(consensus)
    struct = structure_score(consensus)
    comp = competitive_score(consensus)

    score = round_half_up(
        vis * 0.3 + acc * 0.2 + struct * 0.2 + comp * 0.15 + consensus.final_score * 0.15
    )

    platforms = {r.platform.lower().replace(" ", ""): r.is_visible for r in visibility.results}
    return GeoReport(
        url=url,
        score=score,
        ai_visibility=AIVisibilityScores(
            score=vis,
            chatgpt=platforms.get("chatgpt", False),
            claude=platforms.get("claude", False),
            perplexity=platforms.get("perplexity", False),
            gemini=platforms.get("gemini", False),
        ),
        accuracy_score=acc,
        structure_score=struct,
        competitive_score=comp,
        consensus=consensus,
        visibility=visibility,
    )


def build_fallback_report(url: str, reason: Optional[str] = None) -> GeoReport:
    """Static report returned when live analysis is unavailable."""
    notes = [FALLBACK_NOTE]
    if reason:
        notes.append(reason)
    return GeoReport(
        url=url,
        score=65,
        ai_visibility=AIVisibilityScores(score=60),
        accuracy_score=70,
        structure_score=65,
        competitive_score=55,
        is_fallback=True,
        notes=notes,
    )


class GeoAnalyzer:
    """
    Runs visibility probe + consensus for a URL and caches the report.

    Example:
        >>> analyzer = GeoAnalyzer(AIConfig.from_env())
        >>> report = await analyzer.analyze("example.com")
        >>> report.is_fallback
        False
    """

    def __init__(
        self,
        config: Optional[AIConfig] = None,
        orchestrator: Optional[AnalysisOrchestrator] = None,
        probe: Optional[VisibilityProbe] = None,
        cache: Optional[ResponseCache] = None,
    ):
        self.config = config or AIConfig.from_env()
        self.cache = cache or ResponseCache(ttl=self.config.cache_ttl_seconds)
        self.orchestrator = orchestrator or AnalysisOrchestrator(
            self.config,
            engine=ConsensusEngine(enable_logging=self.config.enable_logging),
        )
        self.probe = probe or VisibilityProbe(self.config, cache=self.cache)

    async def analyze(
        self,
        url: str,
        content: str = "",
        location: str = "United States",
        industry: str = "General Business",
    ) -> GeoReport:
        """
        Analyze a website.

        Reports are cached per URL; location and industry only shape the
        first report produced within the cache window.

        Raises:
            InvalidURLError: If the URL fails validation
        """
        target = validate_url(url)
        try:
            return await self.cache.get_or_fetch(
                f"geo-analysis-{target}",
                lambda: self._live_report(target, content, location, industry),
            )
        except Exception as e:
            logger.error(f"❌ [GeoAnalyzer] Live analysis failed for {target}, using fallback: {e}")
            return build_fallback_report(target, reason=str(e) or type(e).__name__)

    async def _live_report(self, url: str, content: str, location: str, industry: str) -> GeoReport:
        visibility, consensus = await asyncio.gather(
            self.probe.test_all_platforms(url),
            self.orchestrator.run(url, content=content, location=location, industry=industry),
        )
        report = build_report(url, visibility, consensus)
        logger.info(f"✅ [GeoAnalyzer] {url} scored {report.score}")
        return report


async def run_geo_analysis(url: str, config: Optional[AIConfig] = None) -> GeoReport:
    """One-shot analysis with a fresh analyzer."""
    return await GeoAnalyzer(config).analyze(url)
