import os

import numpy as np
import matplotlib

matplotlib.use('Agg')
import matplotlib.pyplot as plt  # noqa: E402

from energy_bpm.config.detector_config import OUTPUT_PATH


def plot_windows(result, output_path=None):
    """
    Plot block energies and per-window thresholds of a BpmResult.

    Args:
        result (BpmResult): Output of detect_bpm
        output_path (str, optional): Image path. Defaults to OUTPUT_PATH/window_energy.png

    Returns:
        str: Path of the saved image
    """
    if output_path is None:
        output_path = os.path.join(OUTPUT_PATH, "window_energy.png")

    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    windows = result.windows
    sr = result.sample_rate

    fig, ax = plt.subplots(3, 1, figsize=(14, 8))

    # 1. Block energies against the threshold of their window
    for window in windows:
        n_blocks = len(window.block_energies)
        block_times = np.linspace(window.start, window.end, n_blocks, endpoint=False) / sr
        ax[0].plot(block_times, window.block_energies, color='tab:blue', alpha=0.7)
        ax[0].hlines(window.threshold, window.start / sr, window.end / sr, color='red', linestyle='--', alpha=0.7)
    ax[0].set(title="Block Energy with Beat Threshold", xlabel="Time (s)", ylabel="Energy")

    # 2. Window mean and threshold
    index = np.array([w.index for w in windows])
    ax[1].plot(index, [w.mean for w in windows], marker='o', label='Mean Energy')
    ax[1].plot(index, [w.threshold for w in windows], marker='x', color='red', label='Threshold')
    ax[1].set(ylabel="Energy", title="Window Statistics")
    ax[1].legend(loc="upper right")

    # 3. Beats per window
    ax[2].bar(index, [w.beats for w in windows], color='orange')
    ax[2].set(xlabel="Window", ylabel="Beats", title=f"Beats per Window ({result.bpm} BPM)")

    plt.tight_layout()
    fig.savefig(output_path)
    plt.close(fig)

    return output_path
