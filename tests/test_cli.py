import numpy as np
import pytest
import soundfile as sf

import estimate_bpm_cli
import export_samples_cli
from energy_bpm.audio.audio_utils import load_sample_text, write_sample_text

SR = 44100


def _write_beat_samples(path, n_windows=2):
    """One beat (four loud blocks) at the end of every window."""
    y = np.zeros(n_windows * SR)
    for window in range(n_windows):
        start = window * SR + 39 * 1024
        y[start:start + 4 * 1024] = 1.0
    write_sample_text(y, str(path))
    return path


def test_estimate_bpm_prints_result(tmp_path, capsys):
    path = _write_beat_samples(tmp_path / "beats.txt")
    assert estimate_bpm_cli.main([str(path)]) == 0

    out = capsys.readouterr().out
    assert "Starting" in out
    assert "BPM = 60" in out
    assert "Time taken" in out


def test_estimate_bpm_window_listing(tmp_path, capsys):
    path = _write_beat_samples(tmp_path / "beats.txt", n_windows=3)
    estimate_bpm_cli.main([str(path), "--windows"])

    lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith("window ")]
    assert len(lines) == 3
    assert lines[0].startswith("window 0: samples 0-44032")
    assert all(line.endswith("beats=1") for line in lines)


def test_estimate_bpm_too_short(tmp_path, capsys):
    path = tmp_path / "short.txt"
    write_sample_text(np.ones(1000), str(path))
    assert estimate_bpm_cli.main([str(path)]) == 2
    assert "BPM =" not in capsys.readouterr().out


def test_estimate_bpm_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        estimate_bpm_cli.main([str(tmp_path / "missing.txt")])


def test_estimate_bpm_saves_plot(tmp_path):
    path = _write_beat_samples(tmp_path / "beats.txt")
    plot_path = tmp_path / "plots" / "windows.png"
    assert estimate_bpm_cli.main([str(path), "--plot", str(plot_path)]) == 0
    assert plot_path.exists()
    assert plot_path.stat().st_size > 0


def test_estimate_bpm_custom_blocks(tmp_path, capsys):
    y = np.zeros(2000)
    y[640:896] = 1.0
    path = tmp_path / "small.txt"
    write_sample_text(y, str(path))

    args = [str(path), "--sample-rate", "1000", "--block-size", "64", "--block-count", "15"]
    assert estimate_bpm_cli.main(args) == 0
    assert "BPM = 30" in capsys.readouterr().out


def test_export_samples_writes_text(tmp_path):
    t = np.linspace(0, 0.5, SR // 2, endpoint=False)
    y = (0.5 * np.sin(2 * np.pi * 220 * t)).astype(np.float32)
    wav_path = tmp_path / "tone.wav"
    sf.write(wav_path, y, SR)

    out_path = tmp_path / "tone.txt"
    assert export_samples_cli.main([str(wav_path), str(out_path)]) == 0

    samples = load_sample_text(str(out_path))
    assert len(samples) == len(y)
    np.testing.assert_allclose(samples, y, atol=1e-3)
