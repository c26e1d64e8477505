"""Typed failures for a single analysis call. All of them are terminal."""

from enum import Enum


class AnalysisErrorKind(str, Enum):
    RECOGNIZER_UNAVAILABLE = "RecognizerUnavailable"
    TRANSCRIPTION_FAILED = "TranscriptionFailed"
    AUDIO_DECODE_FAILED = "AudioDecodeFailed"
    INSUFFICIENT_AUDIO_DATA = "InsufficientAudioData"


class AnalysisError(Exception):
    kind: AnalysisErrorKind

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value)

    @property
    def reason(self) -> str:
        return f"{self.kind.value}: {self}"


class RecognizerUnavailable(AnalysisError):
    """On-device recognition is not possible on this host or build."""
    kind = AnalysisErrorKind.RECOGNIZER_UNAVAILABLE


class TranscriptionFailed(AnalysisError):
    kind = AnalysisErrorKind.TRANSCRIPTION_FAILED


class AudioDecodeFailed(AnalysisError):
    kind = AnalysisErrorKind.AUDIO_DECODE_FAILED


class InsufficientAudioData(AnalysisError):
    """No decodable samples, so no RMS chunks to measure."""
    kind = AnalysisErrorKind.INSUFFICIENT_AUDIO_DATA
