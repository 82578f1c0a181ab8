"""
Credential Validation
=====================

Format-only checks for vendor API keys. No network call is made; a key
that passes here is merely well-formed enough to attempt a live request.
"""

import re
from typing import Any, Dict, List, Mapping, Optional

from geotest.core.config import PROVIDERS, AIConfig

KEY_PATTERNS = {
    "openai": re.compile(r"^sk-[a-zA-Z0-9]{48}$"),
    "gemini": re.compile(r"^AIza[a-zA-Z0-9_-]{35}$"),
    "claude": re.compile(r"^sk-ant-[a-zA-Z0-9_-]{95}$"),
    "perplexity": re.compile(r"^pplx-[a-zA-Z0-9]{56}$"),
}


def validate_api_key(vendor: str, key: Optional[str]) -> bool:
    """
    Check whether a credential matches the vendor's key format.

    Args:
        vendor: Vendor name (openai, gemini, claude, perplexity)
        key: Raw credential, possibly None or empty

    Returns:
        True if the key is well-formed for this vendor
    """
    if not key or "placeholder" in key:
        return False
    pattern = KEY_PATTERNS.get(vendor)
    if pattern is None:
        return False
    return bool(pattern.match(key))


def get_valid_api_keys(api_keys: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """Filter a vendor->key mapping down to the well-formed keys."""
    return {
        vendor: key
        for vendor, key in api_keys.items()
        if validate_api_key(vendor, key)
    }


def check_production_readiness(config: AIConfig) -> Dict[str, Any]:
    """
    Summarize which vendors have usable credentials.

    Returns:
        Dict with 'ready', 'providers' (vendor -> bool) and 'issues'
    """
    providers = {
        vendor: validate_api_key(vendor, config.api_key(vendor))
        for vendor in KEY_PATTERNS
    }
    ready_count = sum(1 for valid in providers.values() if valid)

    issues: List[str] = []
    if ready_count == 0:
        issues.append("No valid API keys configured")
    for vendor, valid in providers.items():
        if not valid:
            issues.append(f"{vendor} API key invalid or placeholder")

    return {
        "ready": ready_count >= config.min_providers_required,
        "providers": providers,
        "issues": issues,
    }


def get_ai_status(config: AIConfig) -> Dict[str, Any]:
    """Provider availability overview for the scoring providers."""
    valid_keys = get_valid_api_keys(config.api_keys)
    scoring_available = [pid.value for pid in PROVIDERS if pid.value in valid_keys]
    return {
        "available_providers": len(scoring_available),
        "providers": [
            {
                "id": pid.value,
                "name": provider.name,
                "available": pid.value in valid_keys,
                "specialty": provider.specialty,
            }
            for pid, provider in PROVIDERS.items()
        ],
        "configuration": {
            "timeout_ms": config.timeout_ms,
            "retry_attempts": config.retry_attempts,
            "enable_logging": config.enable_logging,
            "min_providers_required": config.min_providers_required,
            "weighting_strategy": "hybrid",
        },
        "production_ready": len(scoring_available) >= config.min_providers_required,
    }
