import numpy as np
import pytest

from analysis.signal_stats import chunk_rms, compute_volume_stability
from domain.errors import InsufficientAudioData
from domain.settings import HeuristicSettings


def chunks_with_levels(levels, chunk_size=4096):
    """Concatenate constant-valued chunks; a constant chunk's RMS is its level."""
    return np.concatenate([np.full(chunk_size, level, dtype=np.float32) for level in levels])


def test_identical_chunk_rms_is_perfectly_stable():
    stability, mean_amp = compute_volume_stability(chunks_with_levels([0.5] * 6))
    assert stability == 1.0
    assert mean_amp == pytest.approx(0.5)


def test_sign_does_not_change_rms():
    samples = chunks_with_levels([0.25, -0.25, 0.25, -0.25])
    stability, _ = compute_volume_stability(samples)
    assert stability == 1.0


def test_stability_formula():
    # RMS values 0.4 and 0.6: population variance 0.01 -> 1 / (1 + 10)
    stability, mean_amp = compute_volume_stability(chunks_with_levels([0.4, 0.6]))
    assert stability == pytest.approx(1.0 / 11.0, rel=1e-4)
    assert mean_amp == pytest.approx(0.5, rel=1e-6)


def test_stability_in_unit_interval_for_noise():
    rng = np.random.default_rng(7)
    samples = rng.normal(0.0, 0.3, 4096 * 20) * np.repeat(rng.uniform(0.1, 1.0, 20), 4096)
    stability, _ = compute_volume_stability(samples)
    assert 0.0 < stability <= 1.0


def test_stability_non_increasing_as_variance_grows():
    previous = None
    for spread in [0.0, 0.01, 0.05, 0.1, 0.2, 0.4]:
        samples = chunks_with_levels([0.5 - spread, 0.5 + spread] * 4)
        stability, mean_amp = compute_volume_stability(samples)
        assert mean_amp == pytest.approx(0.5, rel=1e-5)
        if previous is not None:
            assert stability <= previous
        previous = stability


def test_empty_samples_raise():
    with pytest.raises(InsufficientAudioData):
        compute_volume_stability(np.array([], dtype=np.float32))


def test_single_short_chunk_is_reported_stable():
    samples = np.linspace(-1.0, 1.0, 1000, dtype=np.float32)
    stability, mean_amp = compute_volume_stability(samples)
    assert stability == 1.0
    assert mean_amp > 0.0


def test_final_chunk_may_be_shorter():
    rms = chunk_rms(np.ones(4096 + 10), 4096)
    assert len(rms) == 2
    assert rms == pytest.approx([1.0, 1.0])


def test_chunk_size_and_scale_are_configurable():
    samples = chunks_with_levels([0.4, 0.6], chunk_size=100)
    settings = HeuristicSettings(chunk_size=100, stability_scale=100.0)
    stability, _ = compute_volume_stability(samples, settings)
    assert stability == pytest.approx(1.0 / 2.0, rel=1e-4)

    # With the default 4096 window both levels fall in one chunk
    stability, _ = compute_volume_stability(samples)
    assert stability == 1.0
