"""Sherpa-ONNX adapter for offline on-device transcription."""

from .transcription import SherpaTranscriptionAdapter, group_tokens_into_words

__all__ = ["SherpaTranscriptionAdapter", "group_tokens_into_words"]
