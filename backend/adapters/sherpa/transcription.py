"""SherpaTranscriptionAdapter: offline on-device ASR with token timestamps.

Sherpa-ONNX runs entirely locally, so every request satisfies the
on-device requirement. Audio is decoded to 16kHz mono through the injected
AudioDecodingPort, split into sub-chunks that fit the encoder's attention
window and batch-decoded. Only the final result of each stream is read;
there are no partial hypotheses. Token timestamps are offset-corrected and
grouped into word segments.
"""

import logging
import os
from typing import Optional

import numpy as np

from domain.errors import RecognizerUnavailable, TranscriptionFailed
from domain.models import Transcript, TranscriptSegment
from ports.audio import AudioDecodingPort
from ports.transcription import TranscriptionPort

logger = logging.getLogger(__name__)

REQUIRED_FILES = ["encoder.int8.onnx", "decoder.int8.onnx", "joiner.int8.onnx", "tokens.txt"]

DEFAULT_MODEL_DIR = "/models/sherpa-onnx"

SAMPLE_RATE = 16000

# Parakeet TDT's self-attention supports ~100s; 80s leaves a margin.
MAX_CHUNK_SECONDS = 80

# Tokens carry a start timestamp only; the last token of a word is assumed
# to last this long.
TOKEN_DURATION = 0.1

# Markers that open a new word in BPE token output.
WORD_BOUNDARY_PREFIXES = (" ", "▁")


def group_tokens_into_words(
    tokens: list[str],
    timestamps: list[float],
    audio_duration: Optional[float] = None,
) -> list[TranscriptSegment]:
    """Group BPE tokens into one segment per word.

    A token beginning with a space or the sentencepiece marker starts a new
    word. Word start is its first token's timestamp; word end is its last
    token's timestamp plus TOKEN_DURATION, capped at audio_duration.
    """
    words: list[TranscriptSegment] = []
    current: list[str] = []
    start = last = 0.0

    def flush():
        text = "".join(current).replace("▁", " ").strip()
        if not text:
            return
        end = last + TOKEN_DURATION
        if audio_duration is not None:
            end = min(end, audio_duration)
        words.append(TranscriptSegment(text=text, start_time=start, duration=max(end - start, 0.0)))

    for token, ts in zip(tokens, timestamps):
        if current and token.startswith(WORD_BOUNDARY_PREFIXES):
            flush()
            current = []
        if not current:
            start = ts
        current.append(token)
        last = ts
    if current:
        flush()

    return words


class SherpaTranscriptionAdapter(TranscriptionPort):
    def __init__(self, audio: AudioDecodingPort):
        self._audio = audio
        self._model_dir = DEFAULT_MODEL_DIR
        self._recognizer = None
        self._ready = False

    def load(self, model_id: str = DEFAULT_MODEL_DIR, device: str = "cpu") -> None:
        """Load the ASR model."""
        import sherpa_onnx

        self._model_dir = model_id
        self._ensure_models()

        logger.info(f"Loading Sherpa-ONNX ASR model (provider={device})...")
        self._recognizer = sherpa_onnx.OfflineRecognizer.from_transducer(
            encoder=os.path.join(self._model_dir, "encoder.int8.onnx"),
            decoder=os.path.join(self._model_dir, "decoder.int8.onnx"),
            joiner=os.path.join(self._model_dir, "joiner.int8.onnx"),
            tokens=os.path.join(self._model_dir, "tokens.txt"),
            model_type="nemo_transducer",
            provider=device,
            num_threads=4,
        )
        self._ready = True
        logger.info(f"Sherpa transcription adapter ready: {self._model_dir}")

    def is_available(self) -> bool:
        return self._ready

    def transcribe(self, audio_path: str, on_device_only: bool = True) -> Transcript:
        """Batch ASR: decode audio → sub-chunk streams → batch decode → word segments."""
        if not self._ready:
            raise RecognizerUnavailable("Sherpa recognizer not loaded")

        # Decode failures propagate as AudioDecodeFailed
        pcm = self._audio.decode(audio_path, sample_rate=SAMPLE_RATE)

        audio = pcm.samples
        sample_rate = pcm.sample_rate
        if sample_rate != SAMPLE_RATE and len(audio):
            logger.warning(f"Audio is {sample_rate}Hz, expected {SAMPLE_RATE}Hz")
            target_len = int(len(audio) * SAMPLE_RATE / sample_rate)
            indices = np.linspace(0, len(audio) - 1, target_len)
            audio = np.interp(indices, np.arange(len(audio)), audio).astype(np.float32)
            sample_rate = SAMPLE_RATE
        duration = len(audio) / sample_rate

        try:
            chunk_samples = MAX_CHUNK_SECONDS * sample_rate
            num_chunks = max(1, int(np.ceil(len(audio) / chunk_samples)))

            streams = []
            offsets = []
            for i in range(num_chunks):
                chunk = audio[i * chunk_samples:(i + 1) * chunk_samples]
                stream = self._recognizer.create_stream()
                stream.accept_waveform(sample_rate, chunk)
                streams.append(stream)
                offsets.append(i * chunk_samples / sample_rate)

            logger.info(f"Decoding {num_chunks} streams ({MAX_CHUNK_SECONDS}s sub-chunks)")
            self._recognizer.decode_streams(streams)

            tokens: list[str] = []
            timestamps: list[float] = []
            for stream, offset in zip(streams, offsets):
                result = stream.result
                tokens.extend(result.tokens)
                timestamps.extend(t + offset for t in result.timestamps)

        except Exception as e:
            logger.error(f"Sherpa transcription error: {e}", exc_info=True)
            raise TranscriptionFailed(str(e)) from e

        words = group_tokens_into_words(tokens, timestamps, duration)
        if not words:
            logger.warning("No speech detected")
            return Transcript(text="")

        text = " ".join(w.text for w in words)
        logger.info(f"Recognized {len(words)} words, {len(text)} characters")
        return Transcript(text=text, segments=tuple(words))

    def model_name(self) -> str:
        return "parakeet-tdt-0.6b-v2-int8"

    def _ensure_models(self):
        """Verify all required model files are present."""
        missing = []
        for f in REQUIRED_FILES:
            path = os.path.join(self._model_dir, f)
            if os.path.exists(path):
                size_mb = os.path.getsize(path) / (1024 * 1024)
                logger.info(f"  asr: {f} ({size_mb:.1f} MB)")
            else:
                missing.append(f)
                logger.error(f"  asr: {f} MISSING")

        if missing:
            raise FileNotFoundError(f"Missing model files in {self._model_dir}: {missing}")
