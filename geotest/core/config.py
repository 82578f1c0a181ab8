"""
AI Configuration
================

Runtime settings for the multi-provider analysis, loaded from the
environment (a ``.env`` file is honoured via python-dotenv), plus the
static provider catalogue.
"""

import os
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from geotest.core.schemas import ProviderConfig, ProviderId


PROVIDERS: Dict[ProviderId, ProviderConfig] = {
    ProviderId.OPENAI: ProviderConfig(
        id=ProviderId.OPENAI,
        name="OpenAI GPT-4",
        endpoint="https://api.openai.com/v1/chat/completions",
        model="gpt-4o",
        specialty="Content Analysis & GEO Strategy",
        static_weight=0.35,
        max_tokens=1500,
        temperature=0.3,
    ),
    ProviderId.GEMINI: ProviderConfig(
        id=ProviderId.GEMINI,
        name="Google Gemini Pro",
        endpoint="https://generativelanguage.googleapis.com/v1beta/models/gemini-pro:generateContent",
        model="gemini-pro",
        specialty="GEO Technical Analysis & Market Research",
        static_weight=0.35,
        max_tokens=1000,
    ),
    ProviderId.CLAUDE: ProviderConfig(
        id=ProviderId.CLAUDE,
        name="Claude 3.5 Sonnet",
        endpoint="https://api.anthropic.com/v1/messages",
        model="claude-3-5-sonnet-20241022",
        specialty="Competitive Intelligence & E-E-A-T Assessment",
        static_weight=0.30,
        max_tokens=1200,
    ),
}

# Environment variable per credential; perplexity is only used by the visibility probe
API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "claude": "CLAUDE_API_KEY",
    "perplexity": "PERPLEXITY_API_KEY",
}


def _env_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


class AIConfig(BaseModel):
    """
    Settings shared by every component of one analysis.

    Example:
        >>> config = AIConfig.from_env()
        >>> config.timeout_seconds
        30.0
    """
    timeout_ms: int = Field(default=30000, gt=0, description="Per-request timeout")
    retry_attempts: int = Field(default=3, ge=1, description="Attempts per live provider call")
    backoff_ms: int = Field(default=1000, ge=0, description="Linear backoff unit between attempts")
    enable_logging: bool = Field(default=False, description="Emit per-operation analysis log lines")
    progress_interval_ms: int = Field(default=800, gt=0, description="Cosmetic progress tick")
    min_providers_required: int = Field(default=2, ge=1)
    cache_ttl_seconds: float = Field(default=300.0, gt=0)
    mock_delay: bool = Field(default=False, description="Simulate vendor latency in mock mode")
    api_keys: Dict[str, Optional[str]] = Field(default_factory=dict)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    def api_key(self, vendor: str) -> Optional[str]:
        return self.api_keys.get(vendor)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AIConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ after loading .env)

        Returns:
            AIConfig instance
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        return cls(
            timeout_ms=int(environ.get("GEOTEST_AI_TIMEOUT", "30000")),
            retry_attempts=int(environ.get("GEOTEST_AI_RETRY_ATTEMPTS", "3")),
            enable_logging=_env_bool(environ.get("GEOTEST_ENABLE_AI_LOGGING")),
            progress_interval_ms=int(environ.get("GEOTEST_PROGRESS_INTERVAL", "800")),
            min_providers_required=int(environ.get("GEOTEST_MIN_PROVIDERS", "2")),
            cache_ttl_seconds=float(environ.get("GEOTEST_CACHE_TTL", "300")),
            mock_delay=_env_bool(environ.get("GEOTEST_MOCK_DELAY")),
            api_keys={vendor: environ.get(var) for vendor, var in API_KEY_ENV.items()},
        )
