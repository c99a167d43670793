"""
Configuration settings for energy-based beat detection.
"""

# General audio settings
SAMPLE_RATE = 44100  # Hz, samples in one analysis window

# Block settings
BLOCK_SIZE = 1024    # Samples folded into one block energy sum
BLOCK_COUNT = 43     # Blocks per analysis window (43 * 1024 = 44032 samples)

# Distance the block cursor moves between windows. Keeping it at SAMPLE_RATE
# leaves SAMPLE_RATE - BLOCK_COUNT * BLOCK_SIZE (68) samples unread per window.
# Set it to BLOCK_COUNT * BLOCK_SIZE for gap-free blocks.
WINDOW_STRIDE = SAMPLE_RATE

# Energy transform
ENERGY_GAIN = 2.0    # energy = gain * sample ** 2

# Beat detection settings
BEAT_RUN_LENGTH = 4  # Consecutive above-threshold blocks that make one beat

# Sensitivity constant c = slope * variance + intercept (threshold = c * mean)
SENSITIVITY_SLOPE = -0.0000015
SENSITIVITY_INTERCEPT = 1.5142857

# Files with these extensions are read as whitespace separated sample values,
# anything else goes through the audio decoder.
TEXT_SAMPLE_EXTENSIONS = (".txt", ".dat", ".csv")

OUTPUT_PATH = "output/"
