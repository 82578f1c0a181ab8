"""
Multi-provider AI consensus scoring for Generative Engine Optimization
"""

__version__ = "1.0.0"

from .core.config import AIConfig
from .core.schemas import ConsensusResult, GeoReport, ProviderResult
from .analysis.orchestrator import AnalysisOrchestrator
from .analysis.report import GeoAnalyzer, run_geo_analysis

__all__ = [
    "AIConfig",
    "ConsensusResult",
    "GeoReport",
    "ProviderResult",
    "AnalysisOrchestrator",
    "GeoAnalyzer",
    "run_geo_analysis",
]
