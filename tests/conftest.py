"""
Shared fixtures: well-formed fake credentials, configs and result builders.
"""
import pytest

from geotest.core.config import AIConfig
from geotest.core.schemas import ProviderId, ProviderResult

# Format-valid, obviously fake credentials
OPENAI_KEY = "sk-" + "a" * 48
GEMINI_KEY = "AIza" + "b" * 35
CLAUDE_KEY = "sk-ant-" + "c" * 95
PERPLEXITY_KEY = "pplx-" + "d" * 56

ALL_KEYS = {
    "openai": OPENAI_KEY,
    "gemini": GEMINI_KEY,
    "claude": CLAUDE_KEY,
    "perplexity": PERPLEXITY_KEY,
}


async def no_sleep(seconds: float):
    return None


def make_result(provider: ProviderId, score: int, confidence: float, processing_time_ms: int = 100) -> ProviderResult:
    return ProviderResult(
        provider=provider,
        provider_name=provider.value,
        score=score,
        confidence=confidence,
        processing_time_ms=processing_time_ms,
    )


@pytest.fixture
def mock_config():
    """No credentials: every provider runs in mock mode."""
    return AIConfig(progress_interval_ms=5)


@pytest.fixture
def live_config():
    return AIConfig(api_keys=dict(ALL_KEYS), retry_attempts=2, backoff_ms=0, progress_interval_ms=5)
