"""
Gemini Adapter - GEO technical analysis via generateContent.

Gemini tends to wrap JSON in markdown fences; parse_analysis strips them.
"""

from typing import Any, Dict

from geotest.core.schemas import AnalysisRequest, ProviderId, ProviderResult
from geotest.providers.base import HttpCall, VendorAdapter

GEO_PROMPT = """You are a world-class expert in Generative Engine Optimization (GEO) and a strategic digital marketing analyst. Your task is to analyze the provided website content and generate a comprehensive GEO report. You MUST provide your response strictly in the following JSON format. Do not add any text or markdown formatting before or after the JSON object.

JSON Format to use:
{{
  "citation_worthiness_score": <number 0-100>,
  "eeat_signal_strength_score": <number 0-100>,
  "structured_data_score": <number 0-100>,
  "content_depth_score": <number 0-100>,
  "topical_authority_score": <number 0-100>,
  "analysis_summary_text": "<comprehensive analysis summary>",
  "actionable_recommendations_text": "<detailed actionable recommendations>",
  "topical_opportunities": ["<opportunity 1>", "<opportunity 2>", "<opportunity 3>"]
}}

WEBSITE URL: {url}
LOCATION: {location}

WEBSITE CONTENT TO ANALYZE:
{content}

Analyze this content for Generative Engine Optimization potential, focusing on:
1. Citation worthiness - How likely is this content to be cited by AI systems
2. E-E-A-T signals - Expertise, Experience, Authoritativeness, Trustworthiness
3. Structured data implementation and opportunities
4. Content depth and comprehensiveness
5. Topical authority establishment

Provide specific, actionable insights and recommendations."""

MOCK_RECOMMENDATIONS = [
    "Implement comprehensive GEO strategy focusing on citation-worthy content creation and E-E-A-T signal enhancement",
    "Develop topic clusters targeting generative AI query patterns and natural language processing",
    "Optimize structured data markup for enhanced AI system understanding and content interpretation",
    "Create authoritative content hubs that establish domain expertise and topical relevance",
    "Build citation-worthy resources that AI systems will reference for accurate information delivery",
]

MOCK_OPPORTUNITIES = [
    "Industry thought leadership content creation",
    "Expert interview and case study development",
    "Comprehensive resource hub establishment",
]


def _grade(score: float, strong: str, weak: str, threshold: int = 80) -> str:
    return strong if score >= threshold else weak


def _content_sample(content: str) -> str:
    return content[:500] + "..."


class GeminiAdapter(VendorAdapter):
    provider_id = ProviderId.GEMINI
    score_fields = [
        "citation_worthiness_score",
        "eeat_signal_strength_score",
        "structured_data_score",
        "content_depth_score",
        "topical_authority_score",
    ]
    list_fields = ["topical_opportunities"]
    live_confidence = 0.96
    mock_confidence = 0.93
    mock_bands = {
        "citation_worthiness_score": (75, 20),
        "eeat_signal_strength_score": (68, 25),
        "structured_data_score": (82, 15),
        "content_depth_score": (71, 24),
        "topical_authority_score": (79, 18),
    }
    mock_delay_ms = (1000, 600)

    def build_call(self, request: AnalysisRequest, api_key: str) -> HttpCall:
        prompt = GEO_PROMPT.format(
            url=request.url,
            location=request.location,
            content=self.prompt_content(request),
        )
        return HttpCall(
            url=self.config.endpoint,
            params={"key": api_key},
            headers={"Content-Type": "application/json"},
            payload={"contents": [{"parts": [{"text": prompt}]}]},
        )

    def extract_text(self, data: Dict[str, Any]) -> str:
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise self._envelope_error(e)

    def build_result(self, analysis: Dict[str, Any], request: AnalysisRequest, elapsed_ms: int) -> ProviderResult:
        citation = analysis["citation_worthiness_score"]
        eeat = analysis["eeat_signal_strength_score"]
        structured = analysis["structured_data_score"]
        depth = analysis["content_depth_score"]
        authority = analysis["topical_authority_score"]

        if citation >= 80:
            citation_label = "Excellent"
        elif citation >= 60:
            citation_label = "Good"
        else:
            citation_label = "Needs Improvement"

        insights = [
            f"Citation Worthiness Assessment: {citation}/100 - {citation_label}",
            f"E-E-A-T Signal Strength: {eeat}/100 - {_grade(eeat, 'Strong authority signals', 'Authority building needed')}",
            f"Structured Data Optimization: {structured}/100 - {_grade(structured, 'Well implemented', 'Enhancement opportunities')}",
            f"Content Depth Analysis: {depth}/100 - {_grade(depth, 'Comprehensive coverage', 'Content expansion needed')}",
            f"Topical Authority Score: {authority}/100 - {_grade(authority, 'Strong expertise', 'Authority development required')}",
        ]
        summary = analysis.get("analysis_summary_text")
        if summary:
            insights.append(str(summary))

        recommendations = []
        if analysis.get("actionable_recommendations_text"):
            recommendations.append(str(analysis["actionable_recommendations_text"]))
        recommendations.extend(
            f"Topical Opportunity: {opp}" for opp in analysis.get("topical_opportunities") or []
        )

        return ProviderResult(
            provider=self.provider_id,
            provider_name=self.name,
            score=self.compute_score(analysis),
            confidence=self.live_confidence,
            insights=insights,
            recommendations=recommendations,
            raw_data={**analysis, "scraped_content": _content_sample(request.content)},
            processing_time_ms=elapsed_ms,
        )

    def build_mock_result(self, scores: Dict[str, int], score: int, request: AnalysisRequest, elapsed_ms: int) -> ProviderResult:
        eeat_strength = "strong" if scores["eeat_signal_strength_score"] >= 80 else "developing"
        citation_level = "excellent" if scores["citation_worthiness_score"] >= 75 else "good"
        raw_data: Dict[str, Any] = dict(scores)
        raw_data.update({
            "analysis_summary_text": (
                f"Comprehensive GEO analysis reveals {score}/100 optimization potential. "
                f"The website demonstrates {eeat_strength} E-E-A-T signals with {citation_level} citation worthiness. "
                "Key opportunities include enhanced structured data implementation and topical authority development."
            ),
            "actionable_recommendations_text": (
                "Priority actions: 1) Enhance E-E-A-T signals through expert content and authoritative backlinks, "
                "2) Implement comprehensive structured data markup for AI system understanding, "
                "3) Develop citation-worthy resources that establish topical authority, "
                "4) Create content clusters targeting generative AI query patterns, "
                "5) Optimize for natural language processing and conversational search queries."
            ),
            "topical_opportunities": list(MOCK_OPPORTUNITIES),
            "scraped_content": _content_sample(request.content),
        })

        return ProviderResult(
            provider=self.provider_id,
            provider_name=f"{self.name} (Mock GEO)",
            score=score,
            confidence=self.mock_confidence,
            insights=[
                f"Citation Worthiness Assessment: {scores['citation_worthiness_score']}/100 - Strong potential for AI system citations",
                f"E-E-A-T Signal Analysis: {scores['eeat_signal_strength_score']}/100 - Expertise and authority indicators present",
                f"Structured Data Optimization: {scores['structured_data_score']}/100 - Enhanced markup opportunities identified",
                f"Content Depth Evaluation: {scores['content_depth_score']}/100 - Comprehensive coverage with expansion potential",
                f"Topical Authority Assessment: {scores['topical_authority_score']}/100 - Domain expertise establishment in progress",
                "GEO analysis reveals significant opportunities for generative AI optimization and enhanced discoverability.",
            ],
            recommendations=list(MOCK_RECOMMENDATIONS),
            raw_data=raw_data,
            processing_time_ms=elapsed_ms,
            mock=True,
        )
