from typing import Optional

import numpy as np
import pytest

from domain.models import PcmAudio, Transcript, TranscriptSegment
from ports.audio import AudioDecodingPort
from ports.progress import ProgressPort
from ports.transcription import TranscriptionPort


def contiguous_segments(count: int, total_seconds: float) -> list[TranscriptSegment]:
    """count back-to-back segments exactly filling total_seconds."""
    step = total_seconds / count
    return [TranscriptSegment(text=f"w{i}", start_time=i * step, duration=step) for i in range(count)]


def spaced_segments(count: int, total_seconds: float, duration: float = 1.0) -> list[TranscriptSegment]:
    """count equal segments spread so the last one ends at total_seconds."""
    step = (total_seconds - duration) / (count - 1)
    return [TranscriptSegment(text=f"w{i}", start_time=i * step, duration=duration) for i in range(count)]


class FakeTranscription(TranscriptionPort):
    def __init__(self, transcript: Optional[Transcript] = None, available: bool = True, error: Optional[Exception] = None):
        self.transcript = transcript or Transcript(text="")
        self.available = available
        self.error = error
        self.calls: list[tuple[str, bool]] = []

    def load(self, model_id: str, device: str = "cpu") -> None:
        self.available = True

    def is_available(self) -> bool:
        return self.available

    def transcribe(self, audio_path: str, on_device_only: bool = True) -> Transcript:
        self.calls.append((audio_path, on_device_only))
        if self.error:
            raise self.error
        return self.transcript

    def model_name(self) -> str:
        return "fake-asr"


class FakeAudio(AudioDecodingPort):
    def __init__(self, pcm: Optional[PcmAudio] = None, error: Optional[Exception] = None):
        self.pcm = pcm if pcm is not None else PcmAudio(np.full(16000, 0.3), 16000)
        self.error = error
        self.calls: list[str] = []

    def decode(self, audio_path: str, sample_rate: Optional[int] = None) -> PcmAudio:
        self.calls.append(audio_path)
        if self.error:
            raise self.error
        return self.pcm


class RecordingProgress(ProgressPort):
    def __init__(self):
        self.events: list[tuple[str, str]] = []

    def report(self, job_id: str, stage: str, progress: float = 0.0, detail: Optional[str] = None) -> None:
        self.events.append((job_id, stage))

    def stages(self) -> list[str]:
        return [stage for _, stage in self.events]


@pytest.fixture
def progress():
    return RecordingProgress()


@pytest.fixture
def confident_transcript():
    segments = contiguous_segments(20, 10.0)
    return Transcript(text=" ".join(s.text for s in segments), segments=tuple(segments))
