"""
Analysis Orchestrator
=====================

Runs the provider clients concurrently for one URL, tracks cosmetic
progress, and hands every result (failed ones included) to the
consensus engine.

Progress state belongs to a single run. Each call builds its own tracker
(or uses the one passed in), so concurrent runs on one orchestrator keep
separate progress maps.
"""

import asyncio
import contextlib
import logging
import random
from typing import Awaitable, Callable, List, Optional

from geotest.analysis.consensus import ConsensusEngine
from geotest.analysis.content import ContentFetcher
from geotest.core.config import AIConfig
from geotest.core.logger import operation_logger
from geotest.core.progress import ProgressCallback, ProgressTracker
from geotest.core.schemas import AnalysisRequest, ConsensusResult, ProviderResult
from geotest.providers.client import ProviderClient, build_provider_clients

logger = logging.getLogger(__name__)

ContentFetchFn = Callable[[str], Awaitable[str]]


class AnalysisOrchestrator:
    """
    Parallel dispatch of provider clients with graceful degradation.

    Cancelling the consumer does not abort calls already dispatched; they
    run to completion (or timeout) on their own.

    Example:
        >>> orchestrator = AnalysisOrchestrator(AIConfig.from_env())
        >>> consensus = await orchestrator.run("https://example.com")
        >>> consensus.metadata.providers_used
        3
    """

    def __init__(
        self,
        config: Optional[AIConfig] = None,
        clients: Optional[List[ProviderClient]] = None,
        engine: Optional[ConsensusEngine] = None,
        content_fetcher: Optional[ContentFetchFn] = None,
        on_progress: Optional[ProgressCallback] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            config: Runtime configuration (defaults to AIConfig.from_env())
            clients: Provider clients (defaults to one per configured provider)
            engine: Consensus engine
            content_fetcher: Async url -> text function
            on_progress: Callback receiving (provider_id, progress) updates
            rng: Randomness source for mock scores and progress steps
        """
        self.config = config or AIConfig.from_env()
        self.rng = rng or random.Random()
        self.clients = clients if clients is not None else build_provider_clients(self.config, rng=self.rng)
        self.engine = engine or ConsensusEngine(enable_logging=self.config.enable_logging)
        self.content_fetcher = content_fetcher or ContentFetcher().fetch_content
        self.on_progress = on_progress
        self.op_log = operation_logger(self.config.enable_logging)

    def new_tracker(self) -> ProgressTracker:
        """Fresh progress map over this orchestrator's providers."""
        return ProgressTracker(
            [c.provider_id.value for c in self.clients],
            on_progress=self.on_progress,
            rng=self.rng,
        )

    async def run(
        self,
        url: str,
        content: str = "",
        location: str = "United States",
        industry: str = "General Business",
        tracker: Optional[ProgressTracker] = None,
    ) -> ConsensusResult:
        """
        Analyze one URL with every provider.

        Args:
            tracker: Progress map for this run (defaults to new_tracker())

        Returns:
            ConsensusResult with one provider entry per client

        Raises:
            ConsensusError: If no provider produced a successful result
        """
        valid = sum(1 for c in self.clients if c.has_valid_credential())
        self.op_log.log(
            "3-AI GEO Analysis Started",
            url=url,
            location=location,
            industry=industry,
            available_providers=valid,
        )
        logger.info(f"🚀 [Orchestrator] Analyzing {url} with {len(self.clients)} providers ({valid} live)")

        if not content:
            content = await self.content_fetcher(url)

        request = AnalysisRequest(url=url, content=content, location=location, industry=industry)

        if tracker is None:
            tracker = self.new_tracker()
        ticker = asyncio.create_task(tracker.run(self.config.progress_interval_ms / 1000.0))

        try:
            results = await asyncio.gather(
                *(self._run_provider(client, request, tracker) for client in self.clients)
            )
        finally:
            ticker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await ticker

        try:
            consensus = self.engine.generate(list(results))
        except Exception as e:
            self.op_log.log("3-AI GEO Analysis Failed", error=str(e), url=url)
            logger.error(f"❌ [Orchestrator] Consensus failed for {url}: {e}")
            raise

        self.op_log.log(
            "3-AI GEO Analysis Complete",
            final_score=consensus.final_score,
            confidence=consensus.confidence,
            reliability=consensus.metadata.reliability,
            providers_used=consensus.metadata.providers_used,
            processing_time_ms=consensus.metadata.total_processing_time_ms,
        )
        return consensus

    async def _run_provider(
        self,
        client: ProviderClient,
        request: AnalysisRequest,
        tracker: ProgressTracker,
    ) -> ProviderResult:
        """Run one client; any exception becomes a failed result."""
        try:
            result = await client.analyze(request)
            logger.info(f"✅ [Orchestrator] {client.name} scored {result.score}")
        except Exception as e:
            logger.error(f"❌ [Orchestrator] {client.name} failed: {e}")
            result = ProviderResult.failed(client.provider_id, client.name, str(e) or type(e).__name__)
        finally:
            tracker.complete(client.provider_id.value)
        return result
