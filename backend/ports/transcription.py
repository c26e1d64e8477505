"""TranscriptionPort: abstract interface for on-device speech recognizers."""

from abc import ABC, abstractmethod

from domain.models import Transcript


class TranscriptionPort(ABC):
    @abstractmethod
    def load(self, model_id: str, device: str = "cpu") -> None:
        """Load the recognition model onto the specified device."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether offline recognition can run right now."""

    @abstractmethod
    def transcribe(self, audio_path: str, on_device_only: bool = True) -> Transcript:
        """Recognize a finished recording and return only the final transcript.

        Raises RecognizerUnavailable if on-device recognition cannot be
        honoured, TranscriptionFailed if recognition errors out. No speech
        yields an empty Transcript, not an error.
        """

    @abstractmethod
    def model_name(self) -> str:
        """Return the human-readable model name for API responses."""
