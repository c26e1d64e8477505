"""Communication state classifier.

An ordered decision list over the extracted features; the first matching
rule wins. Confidence reflects the rule tier only, not feature magnitude.
"""

from typing import Optional

from domain.models import CommunicationState, FeatureSet
from domain.settings import DEFAULT_SETTINGS, HeuristicSettings


def confidence_for(state: CommunicationState, settings: Optional[HeuristicSettings] = None) -> float:
    cfg = settings or DEFAULT_SETTINGS
    return cfg.confidence_scores[state]


def infer_state(features: FeatureSet, settings: Optional[HeuristicSettings] = None) -> CommunicationState:
    cfg = settings or DEFAULT_SETTINGS
    rate = features.speech_rate_wpm
    pauses = features.pause_frequency_per_minute

    # Too little speech to judge anything else
    if features.segment_count < cfg.min_segment_count:
        return CommunicationState.UNCLEAR

    steady = features.volume_stability > cfg.confident_min_stability
    fluid = pauses < cfg.confident_max_pause_frequency
    proper_pace = cfg.confident_min_rate < rate < cfg.confident_max_rate
    if steady and fluid and proper_pace:
        return CommunicationState.CONFIDENT

    if pauses > cfg.hesitant_min_pause_frequency:
        return CommunicationState.HESITANT

    if rate < cfg.unclear_min_rate or rate > cfg.unclear_max_rate:
        return CommunicationState.UNCLEAR

    return CommunicationState.NEUTRAL


def classify(
    features: FeatureSet,
    settings: Optional[HeuristicSettings] = None,
) -> tuple[CommunicationState, float]:
    """Return (state, confidence_score) for a feature set."""
    state = infer_state(features, settings)
    return state, confidence_for(state, settings)
