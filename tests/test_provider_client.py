"""
Provider clients: live calls through httpx.MockTransport, retries and the
mock fallback.
"""
import asyncio
import json
import random

import httpx
import pytest

from geotest.core.config import PROVIDERS, AIConfig
from geotest.core.errors import ProviderResponseError
from geotest.core.schemas import AnalysisRequest, ProviderId
from geotest.providers import (
    ClaudeAdapter,
    GeminiAdapter,
    OpenAIAdapter,
    ProviderClient,
    build_provider_clients,
)

from conftest import CLAUDE_KEY, GEMINI_KEY, OPENAI_KEY, no_sleep

REQUEST = AnalysisRequest(url="https://example.com", content="Example content about widgets.")

OPENAI_ANALYSIS = {
    "content_quality": 90,
    "ai_readability": 80,
    "keyword_optimization": 70,
    "user_engagement": 85,
    "semantic_clarity": 75,
    "geo_insights": ["Clear product pages"],
    "geo_recommendations": ["Add FAQ schema"],
}


def openai_envelope(text: str) -> dict:
    return {"choices": [{"message": {"content": text}}]}


def make_client(adapter_cls, config, handler=None, **kwargs) -> ProviderClient:
    adapter = adapter_cls(PROVIDERS[adapter_cls.provider_id])
    transport = httpx.MockTransport(handler) if handler else None
    return ProviderClient(adapter, config, transport=transport, sleep=no_sleep, **kwargs)


# =============================================================================
# Mock mode
# =============================================================================

@pytest.mark.parametrize("adapter_cls", [OpenAIAdapter, GeminiAdapter, ClaudeAdapter])
def test_mock_without_credentials(adapter_cls):
    client = make_client(adapter_cls, AIConfig(), rng=random.Random(7))
    result = asyncio.run(client.analyze(REQUEST))

    assert result.success is True
    assert result.mock is True
    assert result.provider == adapter_cls.provider_id
    assert result.provider_name.endswith("(Mock GEO)")
    assert result.confidence == adapter_cls.mock_confidence
    assert 70 <= result.score <= 96
    assert result.insights and result.recommendations


def test_mock_is_reproducible_with_seed():
    first = asyncio.run(make_client(ClaudeAdapter, AIConfig(), rng=random.Random(42)).analyze(REQUEST))
    second = asyncio.run(make_client(ClaudeAdapter, AIConfig(), rng=random.Random(42)).analyze(REQUEST))
    assert first.score == second.score
    assert first.raw_data == second.raw_data


def test_mock_delay_uses_injected_sleep():
    delays = []

    async def sleep(seconds):
        delays.append(seconds)

    adapter = OpenAIAdapter(PROVIDERS[ProviderId.OPENAI])
    client = ProviderClient(adapter, AIConfig(mock_delay=True), rng=random.Random(1), sleep=sleep)
    asyncio.run(client.analyze(REQUEST))

    assert len(delays) == 1
    assert 1.2 <= delays[0] <= 2.0


def test_gemini_mock_keeps_content_sample():
    result = asyncio.run(make_client(GeminiAdapter, AIConfig(), rng=random.Random(3)).analyze(REQUEST))
    assert result.raw_data["scraped_content"] == REQUEST.content + "..."
    assert len(result.raw_data["topical_opportunities"]) == 3


# =============================================================================
# Live mode
# =============================================================================

def test_openai_live_call():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=openai_envelope(json.dumps(OPENAI_ANALYSIS)))

    config = AIConfig(api_keys={"openai": OPENAI_KEY})
    result = asyncio.run(make_client(OpenAIAdapter, config, handler).analyze(REQUEST))

    assert seen["auth"] == f"Bearer {OPENAI_KEY}"
    assert seen["body"]["model"] == "gpt-4o"
    assert seen["body"]["max_tokens"] == 1500
    assert result.mock is False
    assert result.score == 80
    assert result.confidence == 0.94
    assert result.insights == ["Clear product pages"]
    assert result.recommendations == ["Add FAQ schema"]


def test_gemini_live_call_strips_code_fences():
    analysis = {
        "citation_worthiness_score": 85,
        "eeat_signal_strength_score": 70,
        "structured_data_score": 90,
        "content_depth_score": 60,
        "topical_authority_score": 75,
        "analysis_summary_text": "Solid base.",
        "actionable_recommendations_text": "Publish research.",
        "topical_opportunities": ["Guides"],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["key"] == GEMINI_KEY
        text = "```json\n" + json.dumps(analysis) + "\n```"
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})

    config = AIConfig(api_keys={"gemini": GEMINI_KEY})
    result = asyncio.run(make_client(GeminiAdapter, config, handler).analyze(REQUEST))

    assert result.score == 76
    assert result.confidence == 0.96
    assert result.insights[0] == "Citation Worthiness Assessment: 85/100 - Excellent"
    assert result.insights[-1] == "Solid base."
    assert result.recommendations == ["Publish research.", "Topical Opportunity: Guides"]


def test_claude_live_call_headers():
    analysis = {
        "expertise_signals": 80,
        "experience_indicators": 70,
        "authoritativeness_score": 90,
        "trustworthiness_rating": 85,
        "competitive_advantage": 75,
        "geo_positioning": 80,
        "eeat_insights": ["Named authors"],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["x-api-key"] == CLAUDE_KEY
        assert request.headers["anthropic-version"] == "2023-06-01"
        return httpx.Response(200, json={"content": [{"text": json.dumps(analysis)}]})

    config = AIConfig(api_keys={"claude": CLAUDE_KEY})
    result = asyncio.run(make_client(ClaudeAdapter, config, handler).analyze(REQUEST))

    assert result.score == 80
    assert result.confidence == 0.89
    assert result.insights == ["Named authors"]
    assert result.recommendations == []


def test_malformed_answer_retries_then_mocks():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(200, json=openai_envelope("not json at all"))

    config = AIConfig(api_keys={"openai": OPENAI_KEY}, retry_attempts=2, backoff_ms=0)
    result = asyncio.run(make_client(OpenAIAdapter, config, handler, rng=random.Random(5)).analyze(REQUEST))

    assert len(calls) == 2
    assert result.success is True
    assert result.mock is True


def test_missing_score_field_is_malformed():
    partial = dict(OPENAI_ANALYSIS)
    del partial["semantic_clarity"]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=openai_envelope(json.dumps(partial)))

    config = AIConfig(api_keys={"openai": OPENAI_KEY}, retry_attempts=1)
    client = make_client(OpenAIAdapter, config, handler, mock_fallback=False)
    with pytest.raises(ProviderResponseError, match="semantic_clarity"):
        asyncio.run(client.analyze(REQUEST))


def test_non_list_insights_fall_back_to_mock():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=openai_envelope(json.dumps({**OPENAI_ANALYSIS, "geo_insights": 5})))

    config = AIConfig(api_keys={"openai": OPENAI_KEY}, retry_attempts=1)
    result = asyncio.run(make_client(OpenAIAdapter, config, handler, rng=random.Random(5)).analyze(REQUEST))

    assert result.success is True
    assert result.mock is True


@pytest.mark.parametrize("value", ["Strong headings", [1, 2], ["ok", None]])
def test_list_field_must_hold_strings(value):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=openai_envelope(json.dumps({**OPENAI_ANALYSIS, "geo_insights": value})))

    config = AIConfig(api_keys={"openai": OPENAI_KEY}, retry_attempts=1)
    client = make_client(OpenAIAdapter, config, handler, mock_fallback=False)
    with pytest.raises(ProviderResponseError, match="geo_insights"):
        asyncio.run(client.analyze(REQUEST))


def test_claude_null_list_field_is_accepted():
    answer = {
        "expertise_signals": 80,
        "experience_indicators": 70,
        "authoritativeness_score": 90,
        "trustworthiness_rating": 85,
        "competitive_advantage": 75,
        "geo_positioning": 80,
        "eeat_insights": None,
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"content": [{"type": "text", "text": json.dumps(answer)}]})

    config = AIConfig(api_keys={"claude": CLAUDE_KEY}, retry_attempts=1)
    result = asyncio.run(make_client(ClaudeAdapter, config, handler, mock_fallback=False).analyze(REQUEST))

    assert result.mock is False
    assert result.insights == []


def test_http_error_propagates_without_mock_fallback():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="upstream down")

    config = AIConfig(api_keys={"openai": OPENAI_KEY}, retry_attempts=2, backoff_ms=0)
    client = make_client(OpenAIAdapter, config, handler, mock_fallback=False)
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.analyze(REQUEST))


def test_unexpected_envelope_is_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "quota"})

    config = AIConfig(api_keys={"openai": OPENAI_KEY}, retry_attempts=1)
    client = make_client(OpenAIAdapter, config, handler, mock_fallback=False)
    with pytest.raises(ProviderResponseError):
        asyncio.run(client.analyze(REQUEST))


def test_build_provider_clients_in_catalogue_order():
    clients = build_provider_clients(AIConfig(api_keys={"claude": CLAUDE_KEY}))
    assert [c.provider_id for c in clients] == [ProviderId.OPENAI, ProviderId.GEMINI, ProviderId.CLAUDE]
    assert [c.has_valid_credential() for c in clients] == [False, False, True]
