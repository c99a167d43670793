"""Block Energy Functions for Variance-Threshold Beat Detection.

This module turns raw samples into the per-window statistics the beat
counter works on:

- compute_energy: instantaneous energy (gain * sample ** 2) of every sample
- aggregate_blocks: sum energy into a fixed number of fixed-size blocks
- window_mean / window_variance: statistics of one window of block energies
- sensitivity_constant / beat_threshold: the adaptive trigger level

The block position for successive windows is tracked by BlockCursor, which
advances by a fixed stride instead of re-aligning blocks to the window start.
"""

from typing import Union, Sequence

import numpy as np

from energy_bpm.config.detector_config import (
    BLOCK_COUNT,
    BLOCK_SIZE,
    ENERGY_GAIN,
    SENSITIVITY_INTERCEPT,
    SENSITIVITY_SLOPE,
    WINDOW_STRIDE,
)


def compute_energy(samples: Union[np.ndarray, Sequence[float]], gain: float = ENERGY_GAIN) -> np.ndarray:
    """Compute the instantaneous energy of every sample.

    The input is left untouched; a new float64 array is returned, so energy
    can never be applied twice to the same sample.

    Args:
        samples (np.ndarray or sequence): Amplitude values
        gain (float, optional): Multiplier applied to the squared sample. Defaults to 2.0.

    Returns:
        np.ndarray: gain * samples ** 2
    """
    y = np.asarray(samples, dtype=np.float64)
    return gain * y * y


def aggregate_blocks(
    energy: np.ndarray,
    start: int,
    block_count: int = BLOCK_COUNT,
    block_size: int = BLOCK_SIZE,
) -> np.ndarray:
    """Sum consecutive energy values into blocks.

    Block j covers energy[start + j * block_size : start + (j + 1) * block_size].
    Reads are clamped to the end of the array: a block running past the last
    sample is truncated and a block starting past it sums to 0.

    Args:
        energy (np.ndarray): Energy values for the whole sequence
        start (int): Absolute index where the first block begins
        block_count (int, optional): Number of blocks. Defaults to 43.
        block_size (int, optional): Samples per block. Defaults to 1024.

    Returns:
        np.ndarray: Array of block_count block energies
    """
    if start < 0:
        raise ValueError(f"Block start must be non-negative, got {start}")

    end = min(start + block_count * block_size, len(energy))
    span = energy[start:end] if start < end else energy[:0]

    # Pad to full length so every block sums exactly block_size values
    padded = np.zeros(block_count * block_size, dtype=np.float64)
    padded[:len(span)] = span
    return padded.reshape(block_count, block_size).sum(axis=1)


def block_span(start: int, total_samples: int, block_count: int = BLOCK_COUNT, block_size: int = BLOCK_SIZE):
    """Return the (first, last exclusive) sample indices aggregate_blocks reads."""
    first = min(start, total_samples)
    last = min(start + block_count * block_size, total_samples)
    return first, last


class BlockCursor:
    """Absolute position of the first block of the current window.

    The cursor only moves forward, by a fixed stride per window, so each
    window's blocks start at window_index * stride regardless of how many
    samples the blocks themselves cover. With the default stride of one
    second (44100) and 43 blocks of 1024 (44032) every window leaves a
    68-sample gap before the next one.
    """

    def __init__(self, stride: int = WINDOW_STRIDE, position: int = 0):
        if stride <= 0:
            raise ValueError(f"Cursor stride must be positive, got {stride}")
        self.stride = stride
        self.position = position
        self.window_index = 0

    def advance(self) -> int:
        self.position += self.stride
        self.window_index += 1
        return self.position

    def drift(self, block_count: int = BLOCK_COUNT, block_size: int = BLOCK_SIZE) -> int:
        """Samples skipped (positive) or re-read (negative) between two windows."""
        return self.stride - block_count * block_size

    def __repr__(self):
        return f"BlockCursor(stride={self.stride}, position={self.position}, window_index={self.window_index})"


def window_mean(block_energies: np.ndarray) -> float:
    """Average block energy of a window."""
    return float(np.sum(block_energies) / len(block_energies))


def window_variance(block_energies: np.ndarray, mean: float) -> float:
    """Variance of the block energies around the given window mean."""
    deviations = mean - np.asarray(block_energies, dtype=np.float64)
    return float(np.sum(deviations * deviations) / len(deviations))


def sensitivity_constant(
    variance: float,
    slope: float = SENSITIVITY_SLOPE,
    intercept: float = SENSITIVITY_INTERCEPT,
) -> float:
    """Linear model mapping window variance to the threshold multiplier.

    No clamping: very large variances give a negative constant.
    """
    return slope * variance + intercept


def beat_threshold(
    mean: float,
    variance: float,
    slope: float = SENSITIVITY_SLOPE,
    intercept: float = SENSITIVITY_INTERCEPT,
) -> float:
    """Block energy a block must exceed to count toward a beat."""
    return sensitivity_constant(variance, slope, intercept) * mean
