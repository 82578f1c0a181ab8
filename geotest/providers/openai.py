"""
OpenAI Adapter - content quality and GEO strategy scoring via chat completions.
"""

from typing import Any, Dict

from geotest.core.schemas import AnalysisRequest, ProviderId, ProviderResult
from geotest.providers.base import HttpCall, VendorAdapter

SYSTEM_PROMPT = """You are an expert in Generative Engine Optimization (GEO) and content strategy. Analyze website content for AI discoverability and return a JSON response with numerical scores (0-100) and strategic insights for GEO optimization. Response format:
{
  "content_quality": number,
  "ai_readability": number,
  "keyword_optimization": number,
  "user_engagement": number,
  "semantic_clarity": number,
  "geo_insights": ["insight1", "insight2"],
  "geo_recommendations": ["rec1", "rec2"]
}"""

DEFAULT_RECOMMENDATIONS = [
    "Implement comprehensive GEO content strategy with AI-first approach and citation optimization",
    "Enhance semantic SEO with topic clusters designed for generative AI query patterns",
    "Optimize for conversational search and natural language processing compatibility",
    "Develop authoritative content calendar with AI discoverability and citation potential focus",
]

MOCK_RECOMMENDATIONS = [
    "Implement comprehensive GEO content authority strategy with AI-first positioning and citation optimization",
    "Enhance semantic SEO architecture with topic clusters designed for generative AI query patterns",
    "Optimize content for conversational search, voice queries, and natural language AI system compatibility",
    "Develop data-driven content calendar with AI discoverability and generative search optimization focus",
]


class OpenAIAdapter(VendorAdapter):
    provider_id = ProviderId.OPENAI
    score_fields = [
        "content_quality",
        "ai_readability",
        "keyword_optimization",
        "user_engagement",
        "semantic_clarity",
    ]
    list_fields = ["geo_insights", "geo_recommendations"]
    live_confidence = 0.94
    mock_confidence = 0.91
    mock_bands = {
        "content_quality": (78, 18),
        "ai_readability": (72, 23),
        "keyword_optimization": (69, 26),
        "user_engagement": (75, 20),
        "semantic_clarity": (81, 15),
    }
    mock_delay_ms = (1200, 800)
    content_limit = 2000

    def build_call(self, request: AnalysisRequest, api_key: str) -> HttpCall:
        user_content = (
            f"Analyze this website for comprehensive GEO (Generative Engine Optimization): {request.url}\n\n"
            f"Content: {self.prompt_content(request)}\n\n"
            "Focus on AI discoverability, citation potential, and generative search optimization."
        )
        return HttpCall(
            url=self.config.endpoint,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            payload={
                "model": self.config.model,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_content},
                ],
                "temperature": self.config.temperature,
                "max_tokens": self.config.max_tokens,
            },
        )

    def extract_text(self, data: Dict[str, Any]) -> str:
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise self._envelope_error(e)

    def build_result(self, analysis: Dict[str, Any], request: AnalysisRequest, elapsed_ms: int) -> ProviderResult:
        insights = analysis.get("geo_insights") or [
            f"Advanced GEO content analysis reveals {analysis['content_quality']}/100 quality score with AI optimization opportunities",
            f"AI readability optimization shows {analysis['ai_readability']}/100 compatibility for generative search engines",
            f"Keyword strategy achieves {analysis['keyword_optimization']}/100 optimization with semantic enhancement potential",
            f"User engagement signals indicate {analysis['user_engagement']}/100 retention capability for sustained visibility",
            f"Content structure provides {analysis['semantic_clarity']}/100 clarity for AI system understanding and citation",
        ]
        return ProviderResult(
            provider=self.provider_id,
            provider_name=self.name,
            score=self.compute_score(analysis),
            confidence=self.live_confidence,
            insights=[str(i) for i in insights],
            recommendations=[str(r) for r in analysis.get("geo_recommendations") or DEFAULT_RECOMMENDATIONS],
            raw_data=analysis,
            processing_time_ms=elapsed_ms,
        )

    def build_mock_result(self, scores: Dict[str, int], score: int, request: AnalysisRequest, elapsed_ms: int) -> ProviderResult:
        return ProviderResult(
            provider=self.provider_id,
            provider_name=f"{self.name} (Mock GEO)",
            score=score,
            confidence=self.mock_confidence,
            insights=[
                f"Advanced GEO content analysis reveals {scores['content_quality']}/100 quality with AI optimization opportunities",
                f"AI readability assessment shows {scores['ai_readability']}/100 compatibility for generative search systems",
                f"Keyword strategy achieves {scores['keyword_optimization']}/100 optimization with conversational search potential",
                f"User engagement analysis indicates {scores['user_engagement']}/100 retention capability for sustained AI visibility",
                f"Content architecture provides {scores['semantic_clarity']}/100 semantic clarity for enhanced AI understanding",
            ],
            recommendations=list(MOCK_RECOMMENDATIONS),
            raw_data=dict(scores),
            processing_time_ms=elapsed_ms,
            mock=True,
        )
