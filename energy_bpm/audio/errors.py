"""Exceptions raised by the beat detection pipeline and its loaders."""


class BpmDetectionError(Exception):
    """Base class for every error raised by energy_bpm."""


class InvalidInputError(BpmDetectionError, ValueError):
    """Samples or parameters that cannot be analysed (empty, non-finite, bad config)."""


class InsufficientSamplesError(BpmDetectionError):
    """Fewer samples than one full analysis window."""

    def __init__(self, total_samples, sample_rate):
        self.total_samples = total_samples
        self.sample_rate = sample_rate
        super().__init__(
            f"Need at least {sample_rate} samples for one analysis window, got {total_samples}"
        )


class SampleFormatError(BpmDetectionError, ValueError):
    """A sample file could not be parsed or decoded."""
