"""
Analysis Schemas
================

Typed result structures exchanged between provider clients, the consensus
engine, the visibility probe and the report layer.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProviderId(str, Enum):
    """Stable identifiers for the scoring providers."""
    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"


class ProviderConfig(BaseModel):
    """Static description of one scoring provider."""
    model_config = ConfigDict(frozen=True)

    id: ProviderId
    name: str = Field(..., description="Display name")
    endpoint: str = Field(..., description="Completion endpoint URL")
    model: str = Field(..., description="Vendor model identifier")
    specialty: str = Field(..., description="Facet this provider scores")
    static_weight: float = Field(..., ge=0.0, le=1.0, description="Configured authority weight")
    max_tokens: int = Field(default=1000, description="Completion token limit")
    temperature: float = Field(default=0.3, description="Sampling temperature")


class AnalysisRequest(BaseModel):
    """Input shared by every provider client for one analysis run."""
    url: str = Field(..., min_length=1, description="Target URL")
    content: str = Field(default="", description="Scraped page text")
    location: str = Field(default="United States", description="Market/locale hint")
    industry: str = Field(default="General Business", description="Industry hint")


class ProviderResult(BaseModel):
    """One provider's opinion about a website. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    provider: ProviderId
    provider_name: str
    score: int = Field(..., ge=0, le=100)
    confidence: float = Field(..., ge=0.0, le=1.0)
    insights: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    raw_data: Dict[str, Any] = Field(default_factory=dict)
    processing_time_ms: int = Field(default=0, ge=0)
    success: bool = True
    error: Optional[str] = None
    mock: bool = False

    @classmethod
    def failed(cls, provider: ProviderId, provider_name: str, error: str) -> "ProviderResult":
        """Build the placeholder entry recorded for a provider call that raised."""
        return cls(
            provider=provider,
            provider_name=provider_name,
            score=0,
            confidence=0.0,
            success=False,
            error=error,
        )


class ConsensusMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    providers_used: int
    total_processing_time_ms: int
    method: str
    reliability: float = Field(..., ge=0.0, le=1.0)


class ConsensusResult(BaseModel):
    """Weighted combination of all provider results."""
    model_config = ConfigDict(frozen=True)

    final_score: int = Field(..., ge=0, le=100)
    confidence: float = Field(..., ge=0.0, le=1.0)
    provider_results: List[ProviderResult]
    consensus_insights: List[str] = Field(default_factory=list)
    conflicting_views: List[str] = Field(default_factory=list)
    recommended_actions: List[str] = Field(default_factory=list)
    metadata: ConsensusMetadata

    def result_for(self, provider: ProviderId) -> Optional[ProviderResult]:
        """Look up a provider's entry by id."""
        for result in self.provider_results:
            if result.provider == provider:
                return result
        return None


class VisibilityResult(BaseModel):
    """Whether one AI platform appears to know about a website."""
    model_config = ConfigDict(frozen=True)

    platform: str
    is_visible: bool
    confidence: float = Field(..., ge=0.0, le=1.0)
    snippet: Optional[str] = None
    tested_at: datetime = Field(default_factory=datetime.now)
    error: Optional[str] = None


class VisibilityReport(BaseModel):
    url: str
    overall_visibility: float = Field(..., ge=0.0, le=100.0, description="Percent of platforms where visible")
    results: List[VisibilityResult]
    recommendations: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)


class AIVisibilityScores(BaseModel):
    score: int
    chatgpt: bool = False
    claude: bool = False
    perplexity: bool = False
    gemini: bool = False


class GeoReport(BaseModel):
    """Report object handed to the rendering layer."""
    url: str
    score: int = Field(..., ge=0, le=100)
    ai_visibility: AIVisibilityScores
    accuracy_score: int
    structure_score: int
    competitive_score: int
    consensus: Optional[ConsensusResult] = None
    visibility: Optional[VisibilityReport] = None
    is_fallback: bool = False
    notes: List[str] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=datetime.now)
