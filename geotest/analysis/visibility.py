"""
AI Search Visibility Probe
==========================

Asks ChatGPT, Claude, Perplexity and Gemini what they know about a
website and heuristically classifies each answer as visible or not.

A probe never raises: missing credentials and transport errors are
reported on the VisibilityResult itself.
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import httpx

from geotest.core.cache import ResponseCache
from geotest.core.config import AIConfig
from geotest.core.credentials import validate_api_key
from geotest.core.schemas import VisibilityReport, VisibilityResult
from geotest.providers.base import HttpCall

logger = logging.getLogger(__name__)

SNIPPET_CHARS = 200
_TLD_SUFFIX = re.compile(r"\.(com|org|net|io|co|ai|dev|app).*$")


def parse_url_info(url: str) -> Tuple[str, str]:
    """
    Derive (domain, brand name) from a URL.

    Example:
        >>> parse_url_info("https://acme-tools.com/about")
        ('acme-tools.com', 'acme tools')
    """
    host = urlparse(url).hostname
    if not host:
        return url, url
    brand = _TLD_SUFFIX.sub("", host).replace("-", " ")
    return host, brand


def direct_prompt(url: str) -> str:
    return f"What can you tell me about {url}?"


@dataclass
class Indicators:
    knows: bool
    specific: bool
    negative: bool

    @property
    def visible(self) -> bool:
        return self.knows and self.specific and not self.negative


class VisibilityPlatform(ABC):
    """One AI platform probed for knowledge of a domain."""

    platform: str
    vendor: str
    model: str
    specific_terms: Tuple[str, ...] = ()
    negative_phrases: Tuple[str, ...] = ()
    # confidence when visible / when not visible
    visible_confidence: float = 0.85
    hidden_confidence: float = 0.8

    @abstractmethod
    def build_call(self, prompt: str, api_key: str) -> HttpCall:
        pass

    @abstractmethod
    def extract_text(self, data: Dict[str, Any]) -> str:
        pass

    def indicators(self, content: str, domain: str, brand: str) -> Indicators:
        return Indicators(
            knows=domain.lower() in content or bool(brand and brand.lower() in content),
            specific=any(term in content for term in self.specific_terms),
            negative=any(phrase in content for phrase in self.negative_phrases),
        )

    def confidence(self, indicators: Indicators) -> float:
        return self.visible_confidence if indicators.visible else self.hidden_confidence


class ChatGPTPlatform(VisibilityPlatform):
    platform = "ChatGPT"
    vendor = "openai"
    model = "gpt-4o"
    specific_terms = ("website", "service", "platform", "company")
    negative_phrases = ("i don't have", "i'm not aware", "no information", "cannot find")

    def build_call(self, prompt: str, api_key: str) -> HttpCall:
        return HttpCall(
            url="https://api.openai.com/v1/chat/completions",
            headers={"Content-Type": "application/json", "Authorization": f"Bearer {api_key}"},
            payload={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": "You are analyzing web presence. Be specific about what you know."},
                    {"role": "user", "content": prompt},
                ],
                "temperature": 0.3,
                "max_tokens": 500,
            },
        )

    def extract_text(self, data: Dict[str, Any]) -> str:
        return data["choices"][0]["message"]["content"]

    def confidence(self, indicators: Indicators) -> float:
        if indicators.visible:
            return 0.9
        return 0.9 if indicators.negative else 0.6


class ClaudePlatform(VisibilityPlatform):
    platform = "Claude"
    vendor = "claude"
    model = "claude-3-5-sonnet-20241022"
    specific_terms = ("website", "service", "platform", "company")
    negative_phrases = ("i don't have", "not familiar", "no information", "cannot provide")

    def build_call(self, prompt: str, api_key: str) -> HttpCall:
        return HttpCall(
            url="https://api.anthropic.com/v1/messages",
            headers={
                "Content-Type": "application/json",
                "x-api-key": api_key,
                "anthropic-version": "2023-06-01",
            },
            payload={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": 500,
                "temperature": 0.3,
            },
        )

    def extract_text(self, data: Dict[str, Any]) -> str:
        return data["content"][0]["text"]


class PerplexityPlatform(VisibilityPlatform):
    platform = "Perplexity"
    vendor = "perplexity"
    model = "llama-3.1-sonar-large-128k-online"
    # Perplexity cites sources, so attribution wording counts as specific
    specific_terms = ("website", "service", "according to", "source")
    negative_phrases = ("couldn't find", "no results", "no information available")
    visible_confidence = 0.9
    hidden_confidence = 0.85

    def build_call(self, prompt: str, api_key: str) -> HttpCall:
        return HttpCall(
            url="https://api.perplexity.ai/chat/completions",
            headers={"Content-Type": "application/json", "Authorization": f"Bearer {api_key}"},
            payload={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": 0.3,
                "max_tokens": 500,
            },
        )

    def extract_text(self, data: Dict[str, Any]) -> str:
        return data["choices"][0]["message"]["content"]


class GeminiPlatform(VisibilityPlatform):
    platform = "Gemini"
    vendor = "gemini"
    model = "gemini-1.5-flash"
    specific_terms = ("website", "online", "platform", "service")
    negative_phrases = ("i cannot find", "no information", "not aware")

    def build_call(self, prompt: str, api_key: str) -> HttpCall:
        return HttpCall(
            url=f"https://generativelanguage.googleapis.com/v1/models/{self.model}:generateContent",
            params={"key": api_key},
            headers={"Content-Type": "application/json"},
            payload={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"temperature": 0.3, "maxOutputTokens": 500},
            },
        )

    def extract_text(self, data: Dict[str, Any]) -> str:
        return data["candidates"][0]["content"]["parts"][0]["text"]


DEFAULT_PLATFORMS = (ChatGPTPlatform, ClaudePlatform, PerplexityPlatform, GeminiPlatform)

_VENDOR_LABELS = {"openai": "OpenAI", "claude": "Claude", "perplexity": "Perplexity", "gemini": "Gemini"}


class VisibilityProbe:
    """
    Runs the visibility test against every platform.

    Example:
        >>> probe = VisibilityProbe(AIConfig.from_env())
        >>> report = await probe.test_all_platforms("https://example.com")
        >>> report.overall_visibility
        50.0
    """

    def __init__(
        self,
        config: AIConfig,
        platforms: Optional[List[VisibilityPlatform]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        cache: Optional[ResponseCache] = None,
    ):
        self.config = config
        self.platforms = platforms if platforms is not None else [cls() for cls in DEFAULT_PLATFORMS]
        self.transport = transport
        self.cache = cache

    async def test_platform(self, platform: VisibilityPlatform, url: str) -> VisibilityResult:
        """Probe one platform. Never raises."""
        api_key = self.config.api_key(platform.vendor)
        if not validate_api_key(platform.vendor, api_key):
            return VisibilityResult(
                platform=platform.platform,
                is_visible=False,
                confidence=0.0,
                error=f"No valid {_VENDOR_LABELS.get(platform.vendor, platform.vendor)} API key",
            )

        domain, brand = parse_url_info(url)
        call = platform.build_call(direct_prompt(url), api_key)

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds, transport=self.transport) as client:
                response = await client.post(call.url, json=call.payload, headers=call.headers, params=call.params or None)
                if not response.is_success:
                    raise httpx.HTTPStatusError(
                        f"{platform.platform} API error: {response.status_code}",
                        request=response.request,
                        response=response,
                    )
                data = response.json()
            content = platform.extract_text(data).lower()
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            logger.warning(f"⚠️ [Visibility] {platform.platform} probe failed: {e}")
            return VisibilityResult(
                platform=platform.platform,
                is_visible=False,
                confidence=0.0,
                error=str(e) or type(e).__name__,
            )

        indicators = platform.indicators(content, domain, brand)
        logger.info(f"🔍 [Visibility] {platform.platform}: visible={indicators.visible}")
        return VisibilityResult(
            platform=platform.platform,
            is_visible=indicators.visible,
            confidence=platform.confidence(indicators),
            snippet=content[:SNIPPET_CHARS] + "...",
        )

    async def _probe(self, platform: VisibilityPlatform, url: str) -> VisibilityResult:
        if self.cache is None:
            return await self.test_platform(platform, url)
        key = f"{platform.platform.lower()}-{url}"
        return await self.cache.get_or_fetch(key, lambda: self.test_platform(platform, url))

    async def test_all_platforms(self, url: str) -> VisibilityReport:
        """Probe every platform concurrently and summarize."""
        results = await asyncio.gather(*(self._probe(p, url) for p in self.platforms))
        results = list(results)

        visible_count = sum(1 for r in results if r.is_visible)
        overall = (visible_count / len(results)) * 100 if results else 0.0

        return VisibilityReport(
            url=url,
            overall_visibility=overall,
            results=results,
            recommendations=visibility_recommendations(overall, results),
        )


def visibility_recommendations(overall: float, results: List[VisibilityResult]) -> List[str]:
    if overall < 25:
        recommendations = [
            "Critical: Your website has very low AI search visibility. Immediate action needed.",
            "Create comprehensive, authoritative content that AI systems can reference.",
            "Implement structured data markup to help AI understand your content.",
        ]
    elif overall < 50:
        recommendations = [
            "Your AI visibility is below average. Focus on building authority.",
            "Develop in-depth content on your core topics to establish expertise.",
            "Ensure your brand name and services are clearly defined on your website.",
        ]
    elif overall < 75:
        recommendations = [
            "Good AI visibility, but room for improvement.",
            "Create more citation-worthy content like guides, statistics, and research.",
            "Build topical authority through comprehensive content clusters.",
        ]
    else:
        recommendations = [
            "Excellent AI visibility! Maintain your current strategy.",
            "Continue creating high-quality, authoritative content.",
            "Monitor competitor strategies to maintain your advantage.",
        ]

    for result in results:
        if not result.is_visible and not result.error:
            recommendations.append(
                f"Improve visibility on {result.platform} by creating content that addresses common queries in your industry."
            )
    return recommendations
