import os
import logging
from typing import Dict, Any, Mapping
from pathlib import Path

from dotenv import load_dotenv

from domain.settings import HeuristicSettings

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8001
DEFAULT_ENGINE = "sherpa"
DEFAULT_MODEL_ID_SHERPA = "/models/sherpa-onnx"
DEFAULT_DEVICE = "cpu"

# Environment variable -> (HeuristicSettings field, type)
HEURISTIC_ENV_VARS = {
    "ANALYSIS_CHUNK_SIZE": ("chunk_size", int),
    "ANALYSIS_STABILITY_SCALE": ("stability_scale", float),
    "ANALYSIS_PAUSE_THRESHOLD": ("pause_threshold_seconds", float),
    "ANALYSIS_MIN_SEGMENTS": ("min_segment_count", int),
    "ANALYSIS_CONFIDENT_MIN_STABILITY": ("confident_min_stability", float),
    "ANALYSIS_CONFIDENT_MAX_PAUSES": ("confident_max_pause_frequency", float),
    "ANALYSIS_CONFIDENT_MIN_RATE": ("confident_min_rate", float),
    "ANALYSIS_CONFIDENT_MAX_RATE": ("confident_max_rate", float),
    "ANALYSIS_HESITANT_MIN_PAUSES": ("hesitant_min_pause_frequency", float),
    "ANALYSIS_UNCLEAR_MIN_RATE": ("unclear_min_rate", float),
    "ANALYSIS_UNCLEAR_MAX_RATE": ("unclear_max_rate", float),
}


def heuristics_from_env(env: Mapping[str, str]) -> HeuristicSettings:
    """Build HeuristicSettings, overriding defaults with any ANALYSIS_* variables set."""
    overrides: Dict[str, Any] = {}
    for var, (field_name, cast) in HEURISTIC_ENV_VARS.items():
        raw = env.get(var, "").strip()
        if raw:
            try:
                overrides[field_name] = cast(raw)
            except ValueError:
                raise ValueError(f"Invalid value for {var}: {raw!r}") from None
    if overrides:
        logger.info(f"Heuristic overrides: {overrides}")
    return HeuristicSettings(**overrides)


class Config:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self.host = os.environ.get("HOST", DEFAULT_HOST)
        self.port = int(os.environ.get("PORT", DEFAULT_PORT))
        self.debug = os.environ.get("DEBUG", "0") == "1"
        self.engine = os.environ.get("ENGINE", DEFAULT_ENGINE).lower()
        self.model_id = os.environ.get("MODEL_ID", "").strip() or DEFAULT_MODEL_ID_SHERPA
        self.device = os.environ.get("DEVICE", DEFAULT_DEVICE).lower()
        self.temp_dir = os.environ.get("TEMP_DIR", "/tmp/echo-analyzer")
        self.heuristics = heuristics_from_env(os.environ)
        Path(self.temp_dir).mkdir(parents=True, exist_ok=True)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "engine": self.engine,
            "model_id": self.model_id,
            "device": self.device,
            "chunk_size": self.heuristics.chunk_size,
            "pause_threshold_seconds": self.heuristics.pause_threshold_seconds,
            "stability_scale": self.heuristics.stability_scale,
        }


config = Config()


def get_config() -> Config:
    return config


def create_audio_adapter():
    """Create the audio decoding adapter (always FFmpeg)."""
    from adapters.ffmpeg.audio import FFmpegAudioAdapter
    return FFmpegAudioAdapter()


def create_transcription_adapter(cfg: Config, audio=None):
    """Create the transcription adapter based on ENGINE env var.

    Uses lazy imports so unused frameworks are never loaded. The adapter is
    returned unloaded; call load() before use.
    """
    engine = cfg.engine

    if engine == "sherpa":
        from adapters.sherpa.transcription import SherpaTranscriptionAdapter
        transcription = SherpaTranscriptionAdapter(audio or create_audio_adapter())
    else:
        raise ValueError(f"Unknown ENGINE: {engine!r}. Valid options: sherpa")

    logger.info(f"Transcription adapter: engine={engine}, {type(transcription).__name__}")
    return transcription


def create_progress_adapter():
    """Create the progress adapter (logging)."""
    from adapters.local.log_progress import LogProgressAdapter
    return LogProgressAdapter()
