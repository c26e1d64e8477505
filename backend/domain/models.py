"""Framework-agnostic domain models for Echo Voice Analyzer.

Processing logic depends only on these types. The pydantic DTOs in
models.py are the API response shape, with mappers at the boundary.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class TranscriptSegment:
    """One finalized span of recognized speech."""
    text: str
    start_time: float
    duration: float

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


@dataclass(frozen=True)
class Transcript:
    """Final recognition output for a recording.

    No segments means no speech was detected, which is not an error.
    """
    text: str
    segments: tuple[TranscriptSegment, ...] = ()


@dataclass(frozen=True, eq=False)
class PcmAudio:
    """Mono float32 samples at a fixed sample rate."""
    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        samples = np.array(self.samples, dtype=np.float32).reshape(-1)
        samples.setflags(write=False)
        object.__setattr__(self, "samples", samples)

    @property
    def duration_seconds(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return len(self.samples) / self.sample_rate


class CommunicationState(str, Enum):
    CONFIDENT = "Confident"
    NEUTRAL = "Neutral"
    HESITANT = "Hesitant"
    UNCLEAR = "Unclear"


@dataclass(frozen=True)
class TimingFeatures:
    """Features derived from transcript segment timings."""
    speech_rate_wpm: float
    pause_frequency_per_minute: float
    segment_count: int
    pause_count: int = 0


@dataclass(frozen=True)
class FeatureSet:
    """Combined timing and signal features fed to the classifier."""
    speech_rate_wpm: float
    pause_frequency_per_minute: float
    volume_stability: float
    segment_count: int
    mean_amplitude: float = 0.0
    pause_count: int = 0


@dataclass(frozen=True)
class AnalysisResult:
    speech_rate: float
    pause_frequency: float
    volume_stability: float
    communication_state: CommunicationState
    transcription: str
    confidence_score: float


@dataclass(frozen=True)
class Recording:
    """A finished recording with either an analysis or an error reason attached."""
    filename: str
    duration: float
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    analysis: Optional[AnalysisResult] = None
    analysis_error: Optional[str] = None

    def __post_init__(self):
        if self.analysis is not None and self.analysis_error is not None:
            raise ValueError("Recording cannot carry both an analysis and an analysis error")

    def with_analysis(self, result: AnalysisResult) -> "Recording":
        return replace(self, analysis=result, analysis_error=None)

    def with_error(self, reason: str) -> "Recording":
        return replace(self, analysis=None, analysis_error=reason)
