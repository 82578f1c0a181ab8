"""
GEO report derivation, caching and fallback.
"""
import asyncio

import pytest

from geotest.analysis.consensus import generate_consensus
from geotest.analysis.report import (
    FALLBACK_NOTE,
    GeoAnalyzer,
    build_fallback_report,
    build_report,
)
from geotest.core.config import AIConfig
from geotest.core.errors import InvalidURLError, NoSuccessfulResultsError
from geotest.core.schemas import (
    ConsensusMetadata,
    ConsensusResult,
    ProviderId,
    VisibilityReport,
    VisibilityResult,
)

from conftest import make_result

PLATFORMS = ["ChatGPT", "Claude", "Perplexity", "Gemini"]


def visibility(url, visible):
    results = [
        VisibilityResult(platform=p, is_visible=p in visible, confidence=0.85)
        for p in PLATFORMS
    ]
    return VisibilityReport(
        url=url,
        overall_visibility=100.0 * len(visible) / len(PLATFORMS),
        results=results,
    )


def consensus(final_score=80, insights=None, actions=None):
    return ConsensusResult(
        final_score=final_score,
        confidence=0.9,
        provider_results=[make_result(ProviderId.OPENAI, final_score, 0.9)],
        consensus_insights=insights or [],
        recommended_actions=actions or [],
        metadata=ConsensusMetadata(
            providers_used=1,
            total_processing_time_ms=10,
            method="test",
            reliability=0.3,
        ),
    )


class FakeProbe:
    def __init__(self, visible=("ChatGPT", "Claude")):
        self.visible = visible
        self.calls = 0

    async def test_all_platforms(self, url):
        self.calls += 1
        return visibility(url, self.visible)


class FakeOrchestrator:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def run(self, url, content="", location="United States", industry="General Business"):
        self.calls.append((url, content, location, industry))
        if self.error is not None:
            raise self.error
        return self.result


def analyzer(orchestrator, probe=None):
    return GeoAnalyzer(AIConfig(), orchestrator=orchestrator, probe=probe or FakeProbe())


# =============================================================================
# Derived scores
# =============================================================================

def test_strong_signals():
    c = consensus(
        final_score=80,
        insights=["Content is accurate", "Clear market leader"],
        actions=["Fix heading structure", "Add FAQ schema", "Use semantic HTML", "Publish research"],
    )
    report = build_report("https://a.com", visibility("https://a.com", PLATFORMS), c)

    assert report.ai_visibility.score == 100
    assert report.ai_visibility.chatgpt and report.ai_visibility.gemini
    assert report.accuracy_score == 85
    assert report.structure_score == 85
    assert report.competitive_score == 80
    # 30 + 17 + 17 + 12 + 12
    assert report.score == 88
    assert report.is_fallback is False


def test_weak_signals():
    c = consensus(final_score=50, insights=["Answers are correct", "Average positioning"])
    report = build_report("https://a.com", visibility("https://a.com", ["Claude"]), c)

    assert report.ai_visibility.score == 25
    assert report.ai_visibility.claude is True
    assert report.ai_visibility.perplexity is False
    assert report.accuracy_score == 75
    assert report.structure_score == 70
    assert report.competitive_score == 60
    # 7.5 + 15 + 14 + 9 + 7.5
    assert report.score == 53


def test_default_consensus_text():
    c = generate_consensus([
        make_result(ProviderId.OPENAI, 80, 0.9),
        make_result(ProviderId.GEMINI, 70, 0.8),
        make_result(ProviderId.CLAUDE, 60, 0.7),
    ])
    report = build_report("https://a.com", visibility("https://a.com", ["ChatGPT", "Claude"]), c)

    assert report.accuracy_score == 65
    assert report.structure_score == 70
    assert report.competitive_score == 50


def test_fallback_report():
    report = build_fallback_report("https://a.com", reason="down")
    assert report.is_fallback is True
    assert report.score == 65
    assert report.notes == [FALLBACK_NOTE, "down"]
    assert report.consensus is None


# =============================================================================
# GeoAnalyzer
# =============================================================================

def test_analyze_builds_and_caches_report():
    orch = FakeOrchestrator(result=consensus(final_score=80))
    probe = FakeProbe()
    geo = analyzer(orch, probe)

    first = asyncio.run(geo.analyze("a.com", industry="Retail"))
    second = asyncio.run(geo.analyze("https://a.com"))

    assert first.url == "https://a.com"
    assert first.is_fallback is False
    assert first.consensus.final_score == 80
    assert orch.calls == [("https://a.com", "", "United States", "Retail")]
    assert probe.calls == 1
    assert second.score == first.score


def test_consensus_failure_yields_fallback():
    orch = FakeOrchestrator(error=NoSuccessfulResultsError(total=3))
    geo = analyzer(orch)

    report = asyncio.run(geo.analyze("https://a.com"))
    assert report.is_fallback is True
    assert report.notes[0] == FALLBACK_NOTE

    # fallbacks are not cached
    asyncio.run(geo.analyze("https://a.com"))
    assert len(orch.calls) == 2


def test_invalid_url_raises():
    with pytest.raises(InvalidURLError):
        asyncio.run(analyzer(FakeOrchestrator()).analyze("http://localhost"))
