"""
Provider Client
===============

One client per scoring provider. Combines a VendorAdapter with the shared
retry wrapper and the live/mock decision:

- valid credential -> live POST with timeout and linear-backoff retries
- no valid credential, or the live path exhausted its retries -> mock result
"""

import asyncio
import logging
import random
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from geotest.core.config import PROVIDERS, AIConfig
from geotest.core.credentials import validate_api_key
from geotest.core.errors import ProviderResponseError
from geotest.core.logger import operation_logger
from geotest.core.resilient_call import with_retry
from geotest.core.schemas import AnalysisRequest, ProviderId, ProviderResult
from geotest.providers.base import VendorAdapter
from geotest.providers.claude import ClaudeAdapter
from geotest.providers.gemini import GeminiAdapter
from geotest.providers.openai import OpenAIAdapter

logger = logging.getLogger(__name__)

ADAPTERS = {
    ProviderId.OPENAI: OpenAIAdapter,
    ProviderId.GEMINI: GeminiAdapter,
    ProviderId.CLAUDE: ClaudeAdapter,
}


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.monotonic() - start) * 1000))


class ProviderClient:
    """
    Produces exactly one ProviderResult per call.

    Example:
        >>> client = ProviderClient(OpenAIAdapter(PROVIDERS[ProviderId.OPENAI]), AIConfig.from_env())
        >>> result = await client.analyze(AnalysisRequest(url="https://example.com"))
    """

    def __init__(
        self,
        adapter: VendorAdapter,
        config: AIConfig,
        rng: Optional[random.Random] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        mock_fallback: bool = True,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize provider client.

        Args:
            adapter: Vendor request/response adapter
            config: Runtime configuration (timeout, retries, credentials)
            rng: Randomness source for mock scores; seed it for reproducible output
            transport: Optional httpx transport (tests use httpx.MockTransport)
            mock_fallback: Substitute a mock result when the live path fails;
                when False the final live error propagates to the caller
            sleep: Awaitable sleep used for backoff and mock latency
        """
        self.adapter = adapter
        self.config = config
        self.rng = rng or random.Random()
        self.transport = transport
        self.mock_fallback = mock_fallback
        self.sleep = sleep
        self.op_log = operation_logger(config.enable_logging)

    @property
    def provider_id(self) -> ProviderId:
        return self.adapter.provider_id

    @property
    def name(self) -> str:
        return self.adapter.name

    def has_valid_credential(self) -> bool:
        return validate_api_key(self.adapter.vendor, self.config.api_key(self.adapter.vendor))

    async def analyze(self, request: AnalysisRequest) -> ProviderResult:
        """
        Score one website.

        Returns:
            ProviderResult with success=True, either live or mock

        Raises:
            httpx.HTTPError / ProviderResponseError: only when mock_fallback is False
        """
        start = time.monotonic()

        if self.has_valid_credential():
            api_key = self.config.api_key(self.adapter.vendor)
            try:
                analysis = await with_retry(
                    lambda: self._call_live(request, api_key),
                    max_attempts=self.config.retry_attempts,
                    backoff_ms=self.config.backoff_ms,
                    op_logger=self.op_log,
                    label=self.name,
                    sleep=self.sleep,
                )
                elapsed = _elapsed_ms(start)
                self.op_log.log(f"{self.name} GEO Success", processing_time_ms=elapsed, url=request.url)
                return self.adapter.build_result(analysis, request, elapsed)
            except (httpx.HTTPError, ProviderResponseError) as e:
                logger.warning(f"⚠️ [{self.name}] Live analysis failed: {e}")
                self.op_log.log(f"{self.name} GEO Error", error=str(e), url=request.url)
                if not self.mock_fallback:
                    raise
        else:
            logger.info(f"🧪 [{self.name}] No valid credential, using mock analysis")

        if self.config.mock_delay:
            await self.sleep(self.adapter.mock_delay_seconds(self.rng))
        return self.adapter.generate_mock(request, self.rng, _elapsed_ms(start))

    async def _call_live(self, request: AnalysisRequest, api_key: str) -> Dict[str, Any]:
        """One live attempt: POST, envelope extraction, JSON parsing."""
        call = self.adapter.build_call(request, api_key)

        async with httpx.AsyncClient(timeout=self.config.timeout_seconds, transport=self.transport) as client:
            response = await client.post(
                call.url,
                json=call.payload,
                headers=call.headers,
                params=call.params or None,
            )

            if not response.is_success:
                logger.warning(f"{self.name} API error: {response.status_code} {response.text[:200]}")

            response.raise_for_status()

            try:
                data = response.json()
            except ValueError as e:
                raise ProviderResponseError(self.name, f"non-JSON body: {e}")

        text = self.adapter.extract_text(data)
        return self.adapter.parse_analysis(text)


def build_provider_clients(
    config: AIConfig,
    rng: Optional[random.Random] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **kwargs,
) -> List[ProviderClient]:
    """Create one client per configured provider, in catalogue order."""
    rng = rng or random.Random()
    return [
        ProviderClient(ADAPTERS[pid](provider), config, rng=rng, transport=transport, **kwargs)
        for pid, provider in PROVIDERS.items()
    ]
