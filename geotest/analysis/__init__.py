"""
Analysis pipeline: consensus, orchestration, visibility and reporting
"""
from .consensus import ConsensusEngine, generate_consensus
from .content import ContentFetcher
from .orchestrator import AnalysisOrchestrator
from .visibility import VisibilityProbe
from .report import GeoAnalyzer, build_fallback_report, run_geo_analysis

__all__ = [
    'ConsensusEngine',
    'generate_consensus',
    'ContentFetcher',
    'AnalysisOrchestrator',
    'VisibilityProbe',
    'GeoAnalyzer',
    'build_fallback_report',
    'run_geo_analysis',
]
