import numpy as np
import pytest

from energy_bpm.audio.energy import (
    BlockCursor,
    aggregate_blocks,
    beat_threshold,
    block_span,
    compute_energy,
    sensitivity_constant,
    window_mean,
    window_variance,
)


def test_compute_energy_squares_and_doubles():
    samples = np.array([1.0, -2.0, 0.5, 0.0])
    energy = compute_energy(samples)
    np.testing.assert_allclose(energy, [2.0, 8.0, 0.5, 0.0])


def test_compute_energy_does_not_touch_input():
    samples = np.array([0.25, -0.75])
    compute_energy(samples)
    compute_energy(samples)
    np.testing.assert_array_equal(samples, [0.25, -0.75])


def test_compute_energy_custom_gain_and_list_input():
    np.testing.assert_allclose(compute_energy([3.0], gain=1.0), [9.0])


def test_aggregate_blocks_full_second_of_ones():
    energy = compute_energy(np.ones(44100))
    ej = aggregate_blocks(energy, 0)
    assert ej.shape == (43,)
    np.testing.assert_array_equal(ej, np.full(43, 2048.0))


def test_aggregate_blocks_uses_consecutive_spans():
    energy = np.arange(12, dtype=np.float64)
    ej = aggregate_blocks(energy, 2, block_count=3, block_size=3)
    # [2,3,4], [5,6,7], [8,9,10]
    np.testing.assert_array_equal(ej, [9.0, 18.0, 27.0])


def test_aggregate_blocks_truncates_at_end_of_samples():
    energy = np.full(2000, 2.0)
    ej = aggregate_blocks(energy, 0, block_count=3, block_size=1024)
    np.testing.assert_array_equal(ej, [2048.0, 976 * 2.0, 0.0])


def test_aggregate_blocks_past_the_end_is_zero():
    energy = np.ones(100)
    ej = aggregate_blocks(energy, 500, block_count=4, block_size=10)
    np.testing.assert_array_equal(ej, np.zeros(4))


def test_aggregate_blocks_rejects_negative_start():
    with pytest.raises(ValueError):
        aggregate_blocks(np.ones(10), -1, block_count=1, block_size=1)


def test_block_span_is_clamped():
    assert block_span(0, 100000) == (0, 44032)
    assert block_span(44100, 50000) == (44100, 50000)
    assert block_span(60000, 50000) == (50000, 50000)


def test_block_cursor_marches_forward_by_stride():
    cursor = BlockCursor()
    assert cursor.position == 0
    assert cursor.advance() == 44100
    assert cursor.advance() == 88200
    assert cursor.window_index == 2


def test_block_cursor_drift_between_windows():
    # 44100 - 43 * 1024: samples skipped before the next window's blocks
    assert BlockCursor().drift() == 68
    assert BlockCursor(stride=43 * 1024).drift() == 0


def test_block_cursor_rejects_non_positive_stride():
    with pytest.raises(ValueError):
        BlockCursor(stride=0)


def test_window_mean_and_variance():
    ej = np.array([1.0, 2.0, 3.0, 4.0])
    avg = window_mean(ej)
    assert avg == pytest.approx(2.5)
    assert window_variance(ej, avg) == pytest.approx(1.25)


def test_constant_window_has_zero_variance():
    ej = np.full(43, 2048.0)
    avg = window_mean(ej)
    assert avg == 2048.0
    assert window_variance(ej, avg) == 0.0


def test_sensitivity_constant_at_zero_variance():
    assert sensitivity_constant(0.0) == pytest.approx(1.5142857)


def test_sensitivity_constant_is_not_clamped():
    # slope * 2e6 = -3.0
    assert sensitivity_constant(2e6) == pytest.approx(-1.4857143)


def test_beat_threshold_is_constant_times_mean():
    assert beat_threshold(2048.0, 0.0) == pytest.approx(1.5142857 * 2048.0)
    assert beat_threshold(0.0, 0.0) == 0.0
    assert beat_threshold(10.0, 1000.0, slope=-0.001, intercept=2.0) == pytest.approx(10.0)
