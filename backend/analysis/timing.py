"""Timing features from transcript segments: speech rate and pause frequency.

Segment count stands in for word count. Recognizers that emit coarser
segments than words will under-report speech rate; this approximation is
kept on purpose so results stay comparable across versions.
"""

import logging
from typing import Optional, Sequence

from domain.models import TimingFeatures, TranscriptSegment
from domain.settings import DEFAULT_SETTINGS, HeuristicSettings

logger = logging.getLogger(__name__)


def spoken_duration(segments: Sequence[TranscriptSegment]) -> float:
    """Seconds from the start of the audio to the end of the last segment."""
    if not segments:
        return 0.0
    return segments[-1].end_time


def count_pauses(segments: Sequence[TranscriptSegment], threshold: float) -> int:
    """Count adjacent segment pairs separated by a gap strictly above threshold.

    Overlapping or unordered segments give negative gaps and never count.
    """
    pauses = 0
    for current, following in zip(segments, segments[1:]):
        if following.start_time - current.end_time > threshold:
            pauses += 1
    return pauses


def compute_timing_features(
    segments: Sequence[TranscriptSegment],
    settings: Optional[HeuristicSettings] = None,
) -> TimingFeatures:
    cfg = settings or DEFAULT_SETTINGS
    segments = list(segments)

    minutes = max(spoken_duration(segments) / 60.0, cfg.min_duration_minutes)
    pause_count = count_pauses(segments, cfg.pause_threshold_seconds)

    features = TimingFeatures(
        speech_rate_wpm=len(segments) / minutes,
        pause_frequency_per_minute=pause_count / minutes,
        segment_count=len(segments),
        pause_count=pause_count,
    )
    logger.debug(
        f"Timing: {features.segment_count} segments, {pause_count} pauses over "
        f"{minutes:.2f} min -> {features.speech_rate_wpm:.1f} wpm"
    )
    return features
