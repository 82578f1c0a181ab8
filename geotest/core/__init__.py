from .schemas import (
    ProviderId,
    ProviderConfig,
    AnalysisRequest,
    ProviderResult,
    ConsensusResult,
    VisibilityResult,
    VisibilityReport,
    GeoReport,
)
from .config import AIConfig, PROVIDERS
from .errors import GeoTestError, ConsensusError, NoResultsError, NoSuccessfulResultsError
from .cache import ResponseCache

__all__ = [
    "ProviderId",
    "ProviderConfig",
    "AnalysisRequest",
    "ProviderResult",
    "ConsensusResult",
    "VisibilityResult",
    "VisibilityReport",
    "GeoReport",
    "AIConfig",
    "PROVIDERS",
    "GeoTestError",
    "ConsensusError",
    "NoResultsError",
    "NoSuccessfulResultsError",
    "ResponseCache",
]
