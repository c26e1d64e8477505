"""AnalyzeRecordingUseCase: orchestrates speech analysis of one recording.

Accepts all ports via dependency injection. Every call takes its inputs as
explicit parameters and returns a fresh result, so concurrent analyses of
different recordings never share state.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from analysis.classifier import classify
from analysis.signal_stats import compute_volume_stability
from analysis.timing import compute_timing_features
from domain.errors import (
    AnalysisError, AudioDecodeFailed, RecognizerUnavailable, TranscriptionFailed,
)
from domain.models import AnalysisResult, FeatureSet, PcmAudio, Recording, Transcript
from domain.settings import DEFAULT_SETTINGS, HeuristicSettings
from ports.audio import AudioDecodingPort
from ports.progress import ProgressPort
from ports.transcription import TranscriptionPort

logger = logging.getLogger(__name__)


@dataclass
class AnalyzeRequest:
    """Parameters for analyzing one finished recording."""
    audio_path: str
    job_id: Optional[str] = None


class AnalyzeRecordingUseCase:
    def __init__(
        self,
        transcription: TranscriptionPort,
        audio: AudioDecodingPort,
        progress: ProgressPort,
        settings: Optional[HeuristicSettings] = None,
    ):
        self._transcription = transcription
        self._audio = audio
        self._progress = progress
        self._settings = settings or DEFAULT_SETTINGS

    async def execute(self, req: AnalyzeRequest) -> AnalysisResult:
        """Run the full analysis. Raises an AnalysisError subclass on failure."""
        job_id = req.job_id or uuid.uuid4().hex[:12]
        try:
            result = await self._run(job_id, req.audio_path)
        except AnalysisError as e:
            self._progress.report(job_id, "failed", detail=e.reason)
            raise
        except BaseException as e:
            # Cancellation or a bug: still close the job out
            self._progress.report(job_id, "failed", detail=type(e).__name__)
            raise
        self._progress.report(job_id, "done")
        return result

    async def _run(self, job_id: str, audio_path: str) -> AnalysisResult:
        # 1. Final transcript, on-device only
        if not self._transcription.is_available():
            logger.warning(f"[{job_id}] Offline recognizer unavailable")
            raise RecognizerUnavailable("Offline speech recognizer is not available")

        self._progress.report(job_id, "transcribing")
        transcript = await self._transcribe(audio_path)
        logger.info(f"[{job_id}] Transcript: {len(transcript.segments)} segments")

        # 2. Decode PCM
        self._progress.report(job_id, "decoding")
        pcm = await self._decode(audio_path)
        logger.info(f"[{job_id}] Decoded {pcm.duration_seconds:.2f}s @ {pcm.sample_rate}Hz")

        # 3. Features and classification
        self._progress.report(job_id, "analyzing")
        features = self.extract_features(transcript, pcm)
        state, confidence = classify(features, self._settings)
        logger.info(
            f"[{job_id}] {state.value} (confidence {confidence:.1f}): "
            f"{features.speech_rate_wpm:.1f} wpm, "
            f"{features.pause_frequency_per_minute:.1f} pauses/min, "
            f"stability {features.volume_stability:.2f}"
        )

        return AnalysisResult(
            speech_rate=features.speech_rate_wpm,
            pause_frequency=features.pause_frequency_per_minute,
            volume_stability=features.volume_stability,
            communication_state=state,
            transcription=transcript.text,
            confidence_score=confidence,
        )

    async def annotate(self, recording: Recording, audio_path: str) -> Recording:
        """Analyze a recording and attach either the result or the failure reason."""
        try:
            result = await self.execute(AnalyzeRequest(audio_path=audio_path))
        except AnalysisError as e:
            logger.warning(f"Analysis of {recording.filename} failed: {e.reason}")
            return recording.with_error(e.reason)
        return recording.with_analysis(result)

    def extract_features(self, transcript: Transcript, pcm: PcmAudio) -> FeatureSet:
        timing = compute_timing_features(transcript.segments, self._settings)
        stability, mean_amplitude = compute_volume_stability(pcm.samples, self._settings)
        return FeatureSet(
            speech_rate_wpm=timing.speech_rate_wpm,
            pause_frequency_per_minute=timing.pause_frequency_per_minute,
            volume_stability=stability,
            segment_count=timing.segment_count,
            mean_amplitude=mean_amplitude,
            pause_count=timing.pause_count,
        )

    async def _transcribe(self, audio_path: str) -> Transcript:
        try:
            return await asyncio.to_thread(
                self._transcription.transcribe, audio_path, on_device_only=True,
            )
        except AnalysisError:
            raise
        except Exception as e:
            logger.error(f"Transcription error: {e}", exc_info=True)
            raise TranscriptionFailed(str(e)) from e

    async def _decode(self, audio_path: str) -> PcmAudio:
        try:
            return await asyncio.to_thread(self._audio.decode, audio_path)
        except AnalysisError:
            raise
        except Exception as e:
            logger.error(f"Audio decode error: {e}", exc_info=True)
            raise AudioDecodeFailed(str(e)) from e
