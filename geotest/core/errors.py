"""
GeoTest Errors
==============

Exception hierarchy for the analysis engine.

Only ConsensusError is meant to cross the core boundary; provider level
failures are contained by the orchestrator.
"""


class GeoTestError(Exception):
    """Base class for all analysis engine errors."""
    pass


class ProviderResponseError(GeoTestError):
    """Raised when a vendor payload is malformed or misses expected fields."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider} response error: {message}")


class ConsensusError(GeoTestError):
    """Raised when a consensus cannot be computed for an analysis run."""
    pass


class NoResultsError(ConsensusError):
    """Raised when the consensus engine receives an empty result list."""

    def __init__(self):
        super().__init__("No AI analysis results to process")


class NoSuccessfulResultsError(ConsensusError):
    """Raised when every provider result failed."""

    def __init__(self, total: int = 0):
        self.total = total
        super().__init__(f"No successful AI analysis results (0/{total})")


class InvalidURLError(GeoTestError):
    """Raised when a target URL fails validation."""
    pass
