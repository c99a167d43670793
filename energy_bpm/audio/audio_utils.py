"""Sample Loading Utilities for Energy Beat Detection.

This module gets samples into and out of the shape the detector works on: a
one-dimensional float array holding a single channel.

The main functions include:
- load_sample_text: Read whitespace separated sample values from a text file
- load_audio: Decode an audio file (wav, flac, mp3, ...) to mono samples
- load_samples: Pick one of the two loaders from the file extension
- write_sample_text: Write samples one per line, the format load_sample_text reads

Decoding goes through librosa, which resamples to the requested rate and
downmixes stereo input to mono.
"""

import logging
import os
from typing import Tuple, Union, Sequence

import librosa
import numpy as np

from energy_bpm.audio.errors import SampleFormatError
from energy_bpm.config.detector_config import SAMPLE_RATE, TEXT_SAMPLE_EXTENSIONS

logger = logging.getLogger(__name__)


def _require_file(path: str) -> None:
    if not os.path.isfile(path):
        logger.error(f"Sample file not found: {path}")
        raise FileNotFoundError(f"Sample file not found: {path}")


def load_sample_text(path: str) -> np.ndarray:
    """Read sample values from a text file.

    Values are separated by any whitespace; one value per line is the usual
    layout. An empty file gives an empty array.

    Args:
        path (str): Path to the text file

    Returns:
        np.ndarray: float64 samples in file order

    Raises:
        FileNotFoundError: The file does not exist
        SampleFormatError: A token is not a number
    """
    _require_file(path)

    with open(path, 'r') as handle:
        tokens = handle.read().split()

    try:
        samples = np.array(tokens, dtype=np.float64)
    except ValueError as e:
        logger.error(f"Could not parse samples from {path}: {e}")
        raise SampleFormatError(f"Could not parse samples from {path}: {e}") from e

    logger.debug(f"Read {len(samples)} samples from {path}")
    return samples


def load_audio(audio_path: str, sr: int = SAMPLE_RATE) -> Tuple[np.ndarray, int]:
    """Decode an audio file to mono samples.

    Args:
        audio_path (str): Path to the audio file (wav, flac, mp3, etc.)
        sr (int, optional): Target sample rate. Defaults to 44100.

    Returns:
        tuple: (audio_data, sample_rate) where audio_data is a float64 numpy
               array in [-1, 1] and sample_rate is the actual sample rate.

    Raises:
        FileNotFoundError: The file does not exist
        SampleFormatError: The file could not be decoded
    """
    _require_file(audio_path)

    try:
        y, sr = librosa.load(audio_path, sr=sr, mono=True)
    except Exception as e:
        logger.error(f"Error loading audio: {e}")
        raise SampleFormatError(f"Could not decode audio file {audio_path}: {e}") from e

    logger.debug(f"Decoded {len(y)} samples at {sr} Hz from {audio_path}")
    return y.astype(np.float64), sr


def load_samples(path: str, sr: int = SAMPLE_RATE) -> np.ndarray:
    """Load samples from a text sample file or an audio file.

    Args:
        path (str): Sample file. Extensions in TEXT_SAMPLE_EXTENSIONS are read
                    as text, everything else is decoded as audio.
        sr (int, optional): Sample rate audio files are resampled to. Defaults to 44100.

    Returns:
        np.ndarray: float64 samples
    """
    extension = os.path.splitext(path)[1].lower()
    if extension in TEXT_SAMPLE_EXTENSIONS:
        return load_sample_text(path)

    y, _ = load_audio(path, sr=sr)
    return y


def write_sample_text(samples: Union[np.ndarray, Sequence[float]], path: str) -> int:
    """Write samples one per line.

    Args:
        samples (np.ndarray or sequence): Samples to write
        path (str): Output text file, overwritten if present

    Returns:
        int: Number of samples written
    """
    y = np.asarray(samples, dtype=np.float64).ravel()

    output_dir = os.path.dirname(path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    # %.9g keeps every float32 value exact
    np.savetxt(path, y, fmt='%.9g')
    logger.info(f"Wrote {len(y)} samples to {path}")
    return len(y)
