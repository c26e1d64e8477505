"""FastAPI application: upload a finished recording, get one analysis or one error."""

import asyncio
import os
import shutil
import uuid
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import BinaryIO, Optional

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from config import (
    get_config, create_audio_adapter, create_transcription_adapter, create_progress_adapter,
)
from domain.errors import AnalysisError, AnalysisErrorKind
from domain.models import Recording
from domain.settings import HeuristicSettings
from mappers import error_to_dto, recording_to_dto, result_to_dto
from models import AnalysisResponse, HealthResponse, RecordingResponse
from ports.audio import AudioDecodingPort
from ports.progress import ProgressPort
from ports.transcription import TranscriptionPort
from use_cases.analyze import AnalyzeRecordingUseCase, AnalyzeRequest

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    AnalysisErrorKind.RECOGNIZER_UNAVAILABLE: 503,
    AnalysisErrorKind.TRANSCRIPTION_FAILED: 502,
    AnalysisErrorKind.AUDIO_DECODE_FAILED: 422,
    AnalysisErrorKind.INSUFFICIENT_AUDIO_DATA: 422,
}


def create_app(
    transcription: Optional[TranscriptionPort] = None,
    audio: Optional[AudioDecodingPort] = None,
    progress: Optional[ProgressPort] = None,
    settings: Optional[HeuristicSettings] = None,
) -> FastAPI:
    """Build the app. Ports not passed in are created from config at startup."""
    cfg = get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        audio_port = audio or create_audio_adapter()
        transcription_port = transcription
        if transcription_port is None:
            transcription_port = create_transcription_adapter(cfg, audio_port)
            try:
                transcription_port.load(cfg.model_id, device=cfg.device)
            except Exception as e:
                # Keep serving; requests fail with RecognizerUnavailable.
                logger.error(f"Failed to load recognizer: {e}")

        app.state.transcription = transcription_port
        app.state.use_case = AnalyzeRecordingUseCase(
            transcription=transcription_port,
            audio=audio_port,
            progress=progress or create_progress_adapter(),
            settings=settings or cfg.heuristics,
        )
        logger.info(f"Analyzer ready: {cfg.as_dict()}")
        yield

    app = FastAPI(title="Echo Voice Analyzer", version="0.1.0", lifespan=lifespan)

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(request: Request, exc: AnalysisError):
        return JSONResponse(
            status_code=ERROR_STATUS[exc.kind],
            content=error_to_dto(exc).model_dump(),
        )

    @app.get("/health", response_model=HealthResponse)
    async def health(request: Request):
        port: TranscriptionPort = request.app.state.transcription
        return HealthResponse(
            status="ok",
            model=port.model_name(),
            recognizer_available=port.is_available(),
        )

    @app.post("/v1/audio/analysis", response_model=AnalysisResponse)
    async def analyze(request: Request, file: UploadFile = File(...)):
        path = await _save_upload(file, cfg.temp_dir)
        try:
            result = await request.app.state.use_case.execute(AnalyzeRequest(audio_path=path))
        finally:
            _remove(path)
        return result_to_dto(result, model=request.app.state.transcription.model_name())

    @app.post("/v1/recordings/analysis", response_model=RecordingResponse)
    async def analyze_recording(
        request: Request,
        file: UploadFile = File(...),
        duration: float = Form(0.0),
    ):
        """Analyze and return the recording with its result or failure reason attached."""
        recording = Recording(filename=file.filename or "recording", duration=duration)
        path = await _save_upload(file, cfg.temp_dir)
        try:
            recording = await request.app.state.use_case.annotate(recording, path)
        finally:
            _remove(path)
        return recording_to_dto(recording, model=request.app.state.transcription.model_name())

    return app


async def _save_upload(file: UploadFile, temp_dir: str) -> str:
    suffix = Path(file.filename or "").suffix or ".wav"
    path = os.path.join(temp_dir, f"{uuid.uuid4().hex}{suffix}")
    await asyncio.to_thread(_copy_to_disk, file.file, path)
    return path


def _copy_to_disk(source: BinaryIO, path: str) -> None:
    with open(path, "wb") as f:
        shutil.copyfileobj(source, f)


def _remove(path: str) -> None:
    try:
        if os.path.exists(path):
            os.unlink(path)
    except OSError as e:
        logger.warning(f"Cleanup error: {e}")
