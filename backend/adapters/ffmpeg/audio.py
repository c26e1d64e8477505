"""FFmpegAudioAdapter: decodes any ffmpeg-readable recording to mono float PCM."""

import os
import logging
import tempfile
import subprocess
from typing import Optional

import numpy as np
import soundfile

from domain.errors import AudioDecodeFailed
from domain.models import PcmAudio
from ports.audio import AudioDecodingPort

logger = logging.getLogger(__name__)


class FFmpegAudioAdapter(AudioDecodingPort):
    def __init__(self, ffmpeg_binary: str = "ffmpeg"):
        self._ffmpeg = ffmpeg_binary

    def convert_to_wav(self, input_path: str, sample_rate: Optional[int] = None) -> str:
        """Convert audio to mono float WAV. Returns path to a temp file the caller owns."""
        temp_file = tempfile.NamedTemporaryFile(suffix=".wav", delete=False)
        temp_file.close()
        output_path = temp_file.name

        cmd = [self._ffmpeg, "-y", "-i", input_path, "-c:a", "pcm_f32le", "-ac", "1"]
        if sample_rate:
            cmd += ["-ar", str(sample_rate)]
        cmd.append(output_path)

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            os.unlink(output_path)
            logger.error(f"Could not run {self._ffmpeg}: {e}")
            raise AudioDecodeFailed(f"Could not run {self._ffmpeg}: {e}") from e

        if result.returncode != 0:
            os.unlink(output_path)
            logger.error(f"Error converting audio: {result.stderr}")
            raise AudioDecodeFailed(f"Failed to convert audio: {result.stderr.strip()[-500:]}")
        return output_path

    def decode(self, audio_path: str, sample_rate: Optional[int] = None) -> PcmAudio:
        if not os.path.exists(audio_path):
            raise AudioDecodeFailed(f"Audio file not found: {audio_path}")

        wav_path = self.convert_to_wav(audio_path, sample_rate)
        try:
            samples, rate = soundfile.read(wav_path, dtype="float32")
        except RuntimeError as e:
            logger.error(f"Error reading converted audio: {e}")
            raise AudioDecodeFailed(f"Failed to read decoded audio: {e}") from e
        finally:
            if os.path.exists(wav_path):
                os.unlink(wav_path)

        if samples.ndim > 1:
            samples = samples.mean(axis=1)

        samples = np.nan_to_num(samples, nan=0.0, posinf=1.0, neginf=-1.0)
        pcm = PcmAudio(samples=np.clip(samples, -1.0, 1.0), sample_rate=int(rate))
        logger.info(f"Audio decoded: {pcm.duration_seconds:.2f}s @ {pcm.sample_rate}Hz")
        return pcm
