"""Signal statistics: per-chunk RMS energy and volume stability."""

import logging
from typing import Optional

import numpy as np

from domain.errors import InsufficientAudioData
from domain.settings import DEFAULT_SETTINGS, HeuristicSettings

logger = logging.getLogger(__name__)


def chunk_rms(samples: np.ndarray, chunk_size: int) -> np.ndarray:
    """RMS amplitude of consecutive non-overlapping chunks.

    The final chunk may be shorter than chunk_size.
    """
    samples = np.asarray(samples, dtype=np.float64).reshape(-1)
    if samples.size == 0:
        return np.array([], dtype=np.float64)
    starts = range(0, samples.size, chunk_size)
    return np.array(
        [np.sqrt(np.mean(samples[i:i + chunk_size] ** 2)) for i in starts],
        dtype=np.float64,
    )


def compute_volume_stability(
    samples: np.ndarray,
    settings: Optional[HeuristicSettings] = None,
) -> tuple[float, float]:
    """Map the variance of per-chunk RMS to a stability score in (0, 1].

    stability = 1 / (1 + variance * stability_scale), so 1.0 means every
    chunk had the same loudness. A recording shorter than two chunks has
    zero variance and is reported as perfectly stable.

    Returns:
        (stability, mean_amplitude) where mean_amplitude is the mean chunk RMS.

    Raises:
        InsufficientAudioData: if there are no samples.
    """
    cfg = settings or DEFAULT_SETTINGS
    rms_values = chunk_rms(samples, cfg.chunk_size)
    if rms_values.size == 0:
        raise InsufficientAudioData("No decodable audio samples")

    mean_rms = float(np.mean(rms_values))
    variance = float(np.var(rms_values))
    stability = 1.0 / (1.0 + variance * cfg.stability_scale)

    logger.debug(
        f"Volume stability: {rms_values.size} chunks, mean RMS {mean_rms:.5f}, "
        f"variance {variance:.6f} -> {stability:.3f}"
    )
    return stability, mean_rms
