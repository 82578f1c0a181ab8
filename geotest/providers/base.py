"""
Vendor Adapters
===============

Base class for the vendor-specific halves of a provider client: how to
build the HTTP request, where the completion text lives in the response
envelope, how to turn the parsed JSON into a ProviderResult, and how to
synthesize a plausible mock result when no live call is possible.

The retry loop and the live/mock decision live in ``ProviderClient``;
adapters contain no I/O.
"""

import json
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from geotest.core.errors import ProviderResponseError
from geotest.core.schemas import AnalysisRequest, ProviderConfig, ProviderId, ProviderResult
from geotest.core.utils import clamp, mean, round_half_up, strip_code_fences


@dataclass
class HttpCall:
    """One POST request to a vendor API."""
    url: str
    payload: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)


class VendorAdapter(ABC):
    """
    Request/response adapter for one scoring vendor.

    Subclasses declare the score fields they ask for, their confidences and
    the mock score bands, and implement the envelope specifics.
    """

    provider_id: ProviderId
    # JSON keys averaged into the provider score
    score_fields: List[str] = []
    # JSON keys that, when present, must hold a list of strings
    list_fields: List[str] = []
    live_confidence: float = 0.9
    mock_confidence: float = 0.9
    # name -> (base, span); mock sub-score = base + U(0, 1) * span
    mock_bands: Dict[str, Tuple[float, float]] = {}
    # (base, jitter) in ms for simulated mock latency
    mock_delay_ms: Tuple[int, int] = (1000, 600)
    content_limit: int = 5000

    def __init__(self, config: ProviderConfig):
        self.config = config

    @property
    def vendor(self) -> str:
        """Credential name for this adapter."""
        return self.provider_id.value

    @property
    def name(self) -> str:
        return self.config.name

    @abstractmethod
    def build_call(self, request: AnalysisRequest, api_key: str) -> HttpCall:
        """Build the vendor request for one analysis."""

    @abstractmethod
    def extract_text(self, data: Dict[str, Any]) -> str:
        """Pull the completion text out of the vendor response envelope."""

    @abstractmethod
    def build_result(self, analysis: Dict[str, Any], request: AnalysisRequest, elapsed_ms: int) -> ProviderResult:
        """Map a parsed live analysis to a ProviderResult."""

    @abstractmethod
    def build_mock_result(
        self,
        scores: Dict[str, int],
        score: int,
        request: AnalysisRequest,
        elapsed_ms: int,
    ) -> ProviderResult:
        """Map synthetic sub-scores to a ProviderResult."""

    def _envelope_error(self, e: Exception) -> ProviderResponseError:
        return ProviderResponseError(self.name, f"unexpected response envelope ({type(e).__name__}: {e})")

    def parse_analysis(self, text: str) -> Dict[str, Any]:
        """
        Parse the structured JSON answer and check the score fields.

        Raises:
            ProviderResponseError: On invalid JSON, missing/non-numeric scores
                or list fields that are not lists of strings
        """
        try:
            analysis = json.loads(strip_code_fences(text))
        except (ValueError, TypeError) as e:
            raise ProviderResponseError(self.name, f"invalid JSON: {e}")

        if not isinstance(analysis, dict):
            raise ProviderResponseError(self.name, "expected a JSON object")

        missing = [
            key for key in self.score_fields
            if not isinstance(analysis.get(key), (int, float)) or isinstance(analysis.get(key), bool)
        ]
        if missing:
            raise ProviderResponseError(self.name, f"missing score fields: {', '.join(missing)}")

        malformed = [
            key for key in self.list_fields
            if analysis.get(key) is not None and not (
                isinstance(analysis[key], list) and all(isinstance(item, str) for item in analysis[key])
            )
        ]
        if malformed:
            raise ProviderResponseError(self.name, f"expected a list of strings for: {', '.join(malformed)}")
        return analysis

    def compute_score(self, analysis: Dict[str, Any]) -> int:
        return round_half_up(clamp(mean(analysis[key] for key in self.score_fields)))

    def prompt_content(self, request: AnalysisRequest) -> str:
        return request.content[: self.content_limit]

    def draw_mock_scores(self, rng: random.Random) -> Dict[str, float]:
        return {
            key: base + rng.random() * span
            for key, (base, span) in self.mock_bands.items()
        }

    def mock_delay_seconds(self, rng: random.Random) -> float:
        base, jitter = self.mock_delay_ms
        return (base + rng.random() * jitter) / 1000.0

    def generate_mock(self, request: AnalysisRequest, rng: random.Random, elapsed_ms: int) -> ProviderResult:
        """Synthesize a result from the provider's mock bands."""
        raw = self.draw_mock_scores(rng)
        score = round_half_up(mean(raw.values()))
        scores = {key: round_half_up(value) for key, value in raw.items()}
        return self.build_mock_result(scores, score, request, elapsed_ms)
