from pydantic import BaseModel, Field
from typing import Dict, Optional


class AnalyzeRequest(BaseModel):
    """Request for the analysis endpoints"""
    url: str = Field(..., min_length=1, description="Website to analyze")
    content: str = Field(default="", description="Pre-fetched page text; fetched when empty")
    location: str = Field(default="United States", description="Target market")
    industry: str = Field(default="General Business", description="Business vertical")


class StreamChunk(BaseModel):
    """One server-sent event of the streaming endpoint"""
    type: str = Field(..., description="Type: progress, report, error")
    content: str = Field(default="", description="Chunk content")
    metadata: Optional[dict] = Field(None, description="Additional metadata")


class HealthResponse(BaseModel):
    """Health check result"""
    status: str = Field(..., description="healthy or degraded")
    providers: Dict[str, bool] = Field(default_factory=dict, description="Credential status per vendor")
