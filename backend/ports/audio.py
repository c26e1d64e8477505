"""AudioDecodingPort: abstract interface for decoding recordings to PCM."""

from abc import ABC, abstractmethod
from typing import Optional

from domain.models import PcmAudio


class AudioDecodingPort(ABC):
    @abstractmethod
    def decode(self, audio_path: str, sample_rate: Optional[int] = None) -> PcmAudio:
        """Decode to mono float32 PCM. sample_rate=None keeps the source rate.

        Raises AudioDecodeFailed if the file cannot be decoded.
        """
