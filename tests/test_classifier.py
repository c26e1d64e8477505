import pytest

from analysis.classifier import classify, confidence_for, infer_state
from domain.models import CommunicationState, FeatureSet
from domain.settings import HeuristicSettings


def features(rate=130.0, pauses=2.0, stability=0.9, segments=20):
    return FeatureSet(
        speech_rate_wpm=rate,
        pause_frequency_per_minute=pauses,
        volume_stability=stability,
        segment_count=segments,
    )


def test_too_few_segments_is_unclear():
    assert classify(features(segments=3)) == (CommunicationState.UNCLEAR, 0.2)


@pytest.mark.parametrize("extreme", [
    features(rate=130.0, pauses=0.0, stability=1.0, segments=4),
    features(rate=500.0, pauses=50.0, stability=0.0, segments=0),
    features(rate=0.0, pauses=0.0, stability=0.5, segments=4),
])
def test_segment_floor_takes_precedence(extreme):
    assert infer_state(extreme) == CommunicationState.UNCLEAR


def test_steady_fluid_proper_pace_is_confident():
    assert classify(features(rate=120.0, pauses=0.0, stability=0.8)) == (CommunicationState.CONFIDENT, 0.9)


def test_many_pauses_is_hesitant_even_when_stable():
    assert classify(features(rate=21.0, pauses=20.0, stability=1.0)) == (CommunicationState.HESITANT, 0.4)


def test_fast_speech_outside_confident_band_is_unclear():
    assert classify(features(rate=250.0, pauses=2.0, stability=0.9)) == (CommunicationState.UNCLEAR, 0.2)


def test_slow_speech_is_unclear():
    assert infer_state(features(rate=70.0, pauses=2.0, stability=0.9)) == CommunicationState.UNCLEAR


@pytest.mark.parametrize("kwargs", [
    dict(rate=130.0, pauses=2.0, stability=0.5),   # unsteady
    dict(rate=130.0, pauses=10.0, stability=0.9),  # too many pauses for confident
    dict(rate=170.0, pauses=2.0, stability=0.9),   # fast but under 200
    dict(rate=90.0, pauses=2.0, stability=0.9),    # slow but over 80
])
def test_everything_else_is_neutral(kwargs):
    assert classify(features(**kwargs)) == (CommunicationState.NEUTRAL, 0.7)


def test_band_edges_are_exclusive():
    assert infer_state(features(rate=100.0)) == CommunicationState.NEUTRAL
    assert infer_state(features(rate=160.0)) == CommunicationState.NEUTRAL
    assert infer_state(features(stability=0.6)) == CommunicationState.NEUTRAL
    assert infer_state(features(pauses=8.0)) == CommunicationState.NEUTRAL
    assert infer_state(features(rate=200.0, pauses=15.0)) == CommunicationState.NEUTRAL


def test_classify_is_deterministic():
    f = features(rate=142.0, pauses=5.5, stability=0.71, segments=33)
    assert {classify(f) for _ in range(10)} == {classify(f)}


def test_confidence_depends_on_state_only():
    assert [confidence_for(s) for s in CommunicationState] == [0.9, 0.7, 0.4, 0.2]


def test_thresholds_are_configurable():
    lenient = HeuristicSettings(min_segment_count=2, confident_min_rate=50.0)
    f = features(rate=60.0, pauses=1.0, stability=0.9, segments=3)
    assert infer_state(f) == CommunicationState.UNCLEAR
    assert infer_state(f, lenient) == CommunicationState.CONFIDENT


def test_custom_confidence_scores():
    scores = {
        CommunicationState.CONFIDENT: 1.0,
        CommunicationState.NEUTRAL: 0.5,
        CommunicationState.HESITANT: 0.25,
        CommunicationState.UNCLEAR: 0.0,
    }
    settings = HeuristicSettings(confidence_scores=scores)
    assert classify(features(segments=1), settings) == (CommunicationState.UNCLEAR, 0.0)
