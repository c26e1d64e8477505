"""Heuristic tuning knobs for feature extraction and classification."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from domain.models import CommunicationState

DEFAULT_CHUNK_SIZE = 4096
DEFAULT_STABILITY_SCALE = 1000.0
DEFAULT_PAUSE_THRESHOLD = 0.5
DEFAULT_MIN_DURATION_MINUTES = 0.01

# Thresholds that only make sense as non-negative numbers.
NON_NEGATIVE_FIELDS = (
    "stability_scale",
    "pause_threshold_seconds",
    "min_segment_count",
    "confident_min_stability",
    "confident_max_pause_frequency",
    "confident_min_rate",
    "confident_max_rate",
    "hesitant_min_pause_frequency",
    "unclear_min_rate",
    "unclear_max_rate",
)


def _default_confidence_scores() -> dict:
    return {
        CommunicationState.CONFIDENT: 0.9,
        CommunicationState.NEUTRAL: 0.7,
        CommunicationState.HESITANT: 0.4,
        CommunicationState.UNCLEAR: 0.2,
    }


@dataclass(frozen=True)
class HeuristicSettings:
    """All thresholds used by the analyzer. Defaults are the tuned values.

    confidence_scores is copied into a read-only mapping, so a settings
    instance (DEFAULT_SETTINGS included) can be shared between analyses.
    """
    chunk_size: int = DEFAULT_CHUNK_SIZE
    stability_scale: float = DEFAULT_STABILITY_SCALE
    pause_threshold_seconds: float = DEFAULT_PAUSE_THRESHOLD
    min_duration_minutes: float = DEFAULT_MIN_DURATION_MINUTES

    min_segment_count: int = 5
    confident_min_stability: float = 0.6
    confident_max_pause_frequency: float = 8.0
    confident_min_rate: float = 100.0
    confident_max_rate: float = 160.0
    hesitant_min_pause_frequency: float = 15.0
    unclear_min_rate: float = 80.0
    unclear_max_rate: float = 200.0

    confidence_scores: Mapping[CommunicationState, float] = field(
        default_factory=_default_confidence_scores, hash=False,
    )

    def __post_init__(self):
        if not self.chunk_size > 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if not self.min_duration_minutes > 0:
            raise ValueError(f"min_duration_minutes must be positive, got {self.min_duration_minutes}")
        # "not >= 0" also rejects NaN
        for name in NON_NEGATIVE_FIELDS:
            if not getattr(self, name) >= 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if not self.confident_min_rate < self.confident_max_rate:
            raise ValueError(
                f"confident_min_rate ({self.confident_min_rate}) must be below "
                f"confident_max_rate ({self.confident_max_rate})"
            )
        if not self.unclear_min_rate < self.unclear_max_rate:
            raise ValueError(
                f"unclear_min_rate ({self.unclear_min_rate}) must be below "
                f"unclear_max_rate ({self.unclear_max_rate})"
            )

        missing = [s.value for s in CommunicationState if s not in self.confidence_scores]
        if missing:
            raise ValueError(f"confidence_scores missing states: {missing}")
        for state, score in self.confidence_scores.items():
            if not 0.0 <= score <= 1.0:
                raise ValueError(f"confidence score for {state.value} must be in [0, 1], got {score}")
        object.__setattr__(self, "confidence_scores", MappingProxyType(dict(self.confidence_scores)))


DEFAULT_SETTINGS = HeuristicSettings()
