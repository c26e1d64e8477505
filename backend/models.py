from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class AnalysisResponse(BaseModel):
    """Speech assessment for one recording"""
    speech_rate: float = Field(ge=0.0, description="Segments per minute, a proxy for words per minute")
    pause_frequency: float = Field(ge=0.0, description="Gaps longer than the pause threshold per minute")
    volume_stability: float = Field(ge=0.0, le=1.0)
    communication_state: str
    transcription: str
    confidence_score: float = Field(ge=0.0, le=1.0)
    model: Optional[str] = None


class RecordingResponse(BaseModel):
    """A recording with either its analysis or the reason analysis failed"""
    id: UUID
    filename: str
    created_at: datetime
    duration: float
    analysis: Optional[AnalysisResponse] = None
    analysis_error: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    detail: str


class HealthResponse(BaseModel):
    status: str
    model: Optional[str] = None
    recognizer_available: bool
