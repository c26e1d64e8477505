"""Domain <-> DTO mappers.

Converts AnalysisResult and Recording (domain) to their pydantic response
models. Domain types never import pydantic.
"""

from typing import Optional

from domain.errors import AnalysisError
from domain.models import AnalysisResult, Recording
from models import AnalysisResponse, ErrorResponse, RecordingResponse


def result_to_dto(result: AnalysisResult, model: Optional[str] = None) -> AnalysisResponse:
    """Convert a domain AnalysisResult to an AnalysisResponse DTO."""
    return AnalysisResponse(
        speech_rate=result.speech_rate,
        pause_frequency=result.pause_frequency,
        volume_stability=result.volume_stability,
        communication_state=result.communication_state.value,
        transcription=result.transcription,
        confidence_score=result.confidence_score,
        model=model,
    )


def recording_to_dto(recording: Recording, model: Optional[str] = None) -> RecordingResponse:
    """Convert a Recording, carrying exactly one of analysis or error, to a DTO."""
    return RecordingResponse(
        id=recording.id,
        filename=recording.filename,
        created_at=recording.created_at,
        duration=recording.duration,
        analysis=result_to_dto(recording.analysis, model) if recording.analysis else None,
        analysis_error=recording.analysis_error,
    )


def error_to_dto(error: AnalysisError) -> ErrorResponse:
    return ErrorResponse(error=error.kind.value, detail=str(error))
