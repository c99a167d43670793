import logging
from dataclasses import dataclass, field

import numpy as np

from energy_bpm.audio.audio_utils import load_samples
from energy_bpm.audio.beat_detection import BeatState, count_beats, get_detector_params
from energy_bpm.audio.energy import (
    BlockCursor,
    aggregate_blocks,
    block_span,
    compute_energy,
    sensitivity_constant,
    window_mean,
    window_variance,
)
from energy_bpm.audio.errors import InsufficientSamplesError, InvalidInputError

logger = logging.getLogger(__name__)


@dataclass
class WindowReport:
    """Statistics of one analysed window."""
    index: int
    start: int  # first sample summed into a block
    end: int  # one past the last sample summed
    mean: float
    variance: float
    sensitivity: float  # threshold multiplier c
    threshold: float
    beats: int  # beats completed inside this window
    block_energies: np.ndarray = field(repr=False)


@dataclass
class BpmResult:
    """Tempo estimate for a whole sample sequence."""
    bpm: int
    beats: int
    total_samples: int
    sample_rate: int
    windows: list = field(default_factory=list)

    @property
    def window_count(self):
        return len(self.windows)


def compute_bpm(beats, total_samples, sample_rate):
    """
    Convert a beat count into beats per minute.

    Uses integer floor division: bpm = beats * sample_rate * 60 // total_samples.

    Raises:
        InvalidInputError: total_samples is not positive or beats is negative
    """
    if total_samples <= 0:
        raise InvalidInputError(f"Cannot compute BPM over {total_samples} samples")
    if beats < 0:
        raise InvalidInputError(f"Beat count cannot be negative, got {beats}")
    return (int(beats) * int(sample_rate) * 60) // int(total_samples)


def _as_samples(samples):
    y = np.asarray(samples, dtype=np.float64)
    if y.ndim != 1:
        raise InvalidInputError(f"Expected a single channel of samples, got shape {y.shape}")
    if len(y) == 0:
        raise InvalidInputError("Sample sequence is empty")
    if not np.all(np.isfinite(y)):
        raise InvalidInputError("Sample sequence contains NaN or infinite values")
    return y


def detect_bpm(samples, **kwargs):
    """
    Estimate BPM with the windowed energy-variance beat detector.

    Each complete window of sample_rate samples is summed into block_count
    blocks of block_size energies. The window mean and variance set the
    threshold and runs of run_length blocks above it count as beats. Samples
    after the last complete window are not analysed but still count toward
    the total used in the BPM formula.

    Args:
        samples: One channel of amplitude values
        **kwargs: Override any default detector parameters

    Returns:
        BpmResult: BPM estimate with per-window reports

    Raises:
        InvalidInputError: Empty, multi-channel or non-finite input, or bad parameters
        InsufficientSamplesError: Less than one full window of samples
    """
    params = get_detector_params(**kwargs)
    sample_rate = params['sample_rate']
    block_size = params['block_size']
    block_count = params['block_count']
    run_length = params['run_length']
    slope = params['sensitivity_slope']
    intercept = params['sensitivity_intercept']

    y = _as_samples(samples)
    total_samples = len(y)

    window_total = total_samples // sample_rate
    if window_total == 0:
        logger.warning(f"Only {total_samples} samples, need {sample_rate} for one window")
        raise InsufficientSamplesError(total_samples, sample_rate)

    energy = compute_energy(y, gain=params['energy_gain'])
    cursor = BlockCursor(stride=params['window_stride'])
    state = BeatState()
    windows = []

    logger.debug(
        f"Analysing {window_total} windows, block span {block_count * block_size}, "
        f"stride {cursor.stride} (drift {cursor.drift(block_count, block_size)} samples per window)"
    )

    for index in range(window_total):
        start, end = block_span(cursor.position, total_samples, block_count, block_size)
        ej = aggregate_blocks(energy, cursor.position, block_count, block_size)

        avg = window_mean(ej)
        variance = window_variance(ej, avg)
        c = sensitivity_constant(variance, slope, intercept)
        threshold = c * avg

        found = count_beats(ej, threshold, state, run_length)
        windows.append(WindowReport(
            index=index,
            start=start,
            end=end,
            mean=avg,
            variance=variance,
            sensitivity=c,
            threshold=threshold,
            beats=found,
            block_energies=ej,
        ))
        logger.debug(
            f"Window {index}: samples {start}-{end}, mean {avg:.4f}, variance {variance:.4f}, "
            f"c {c:.6f}, threshold {threshold:.4f}, beats {found}"
        )

        cursor.advance()

    bpm = compute_bpm(state.beats, total_samples, sample_rate)
    logger.info(f"Detected {state.beats} beats in {window_total} windows: {bpm} BPM")

    return BpmResult(
        bpm=bpm,
        beats=state.beats,
        total_samples=total_samples,
        sample_rate=sample_rate,
        windows=windows,
    )


def detect_bpm_from_file(path, **kwargs):
    """
    Load samples from a text or audio file and estimate their BPM.

    Audio files are decoded at the detector sample rate.

    Returns:
        BpmResult: BPM estimate with per-window reports
    """
    params = get_detector_params(**kwargs)
    samples = load_samples(path, sr=params['sample_rate'])
    logger.info(f"Loaded {len(samples)} samples from {path}")
    return detect_bpm(samples, **kwargs)
