import numpy as np

from energy_bpm.audio.errors import InvalidInputError
from energy_bpm.config.detector_config import (
    SAMPLE_RATE,
    BLOCK_SIZE,
    BLOCK_COUNT,
    WINDOW_STRIDE,
    ENERGY_GAIN,
    BEAT_RUN_LENGTH,
    SENSITIVITY_SLOPE,
    SENSITIVITY_INTERCEPT,
)

_POSITIVE_INT_PARAMS = ('sample_rate', 'block_size', 'block_count', 'window_stride', 'run_length')


def get_detector_params(**overrides):
    """
    Get centralized beat detection parameters.

    Args:
        **overrides: Replace any of the default parameters. A window_stride
                     of None follows sample_rate.

    Returns:
        dict: Dictionary of beat detection parameters

    Raises:
        InvalidInputError: Unknown parameter name or a non-positive size
    """
    # Default parameters
    params = {
        'sample_rate': SAMPLE_RATE,
        'block_size': BLOCK_SIZE,
        'block_count': BLOCK_COUNT,
        'window_stride': None,
        'energy_gain': ENERGY_GAIN,
        'run_length': BEAT_RUN_LENGTH,
        'sensitivity_slope': SENSITIVITY_SLOPE,
        'sensitivity_intercept': SENSITIVITY_INTERCEPT,
    }

    unknown = sorted(set(overrides) - set(params))
    if unknown:
        raise InvalidInputError(f"Unknown detector parameter(s): {', '.join(unknown)}")

    # Drop unset overrides so CLI defaults of None keep the configured values
    params.update({key: value for key, value in overrides.items() if value is not None})

    # The stride tracks the sample rate unless set explicitly
    if params['window_stride'] is None:
        if params['sample_rate'] == SAMPLE_RATE:
            params['window_stride'] = WINDOW_STRIDE
        else:
            params['window_stride'] = params['sample_rate']

    for name in _POSITIVE_INT_PARAMS:
        value = params[name]
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
            raise InvalidInputError(f"{name} must be a positive integer, got {value!r}")
        params[name] = int(value)

    return params


class BeatState:
    """
    Running beat counters shared by every window of one analysis.

    peak is the length of the current run of above-threshold blocks. It is
    deliberately kept between windows, so a run that starts at the end of one
    window finishes in the next one.
    """

    def __init__(self):
        self.peak = 0
        self.beats = 0

    def __repr__(self):
        return f"BeatState(peak={self.peak}, beats={self.beats})"


def count_beats(block_energies, threshold, state, run_length=BEAT_RUN_LENGTH):
    """
    Count debounced beats in one window of block energies.

    Every block above the threshold extends the current run; once the run
    reaches run_length a beat is registered and the run starts over, so a run
    of 8 blocks gives 2 beats. A block at or below the threshold breaks the run.

    Args:
        block_energies (np.ndarray): Block energies in block order
        threshold (float): Trigger level from the threshold policy
        state (BeatState): Counters carried between windows, updated in place
        run_length (int): Blocks needed for one beat

    Returns:
        int: Beats registered in this window
    """
    if run_length <= 0:
        raise InvalidInputError(f"run_length must be positive, got {run_length}")

    found = 0
    for energy in block_energies:
        if energy > threshold:
            state.peak += 1
            if state.peak == run_length:
                state.beats += 1
                found += 1
                state.peak = 0
        else:
            state.peak = 0

    return found
