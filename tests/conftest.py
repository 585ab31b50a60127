"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from pulsegrid.core.grid import Grid
from pulsegrid.core.levels import Level

# Every synthetic clip is this long, at this rate
CLIP_SECONDS = 2.0
CLIP_RATE = 22050


@pytest.fixture
def sample_rate() -> int:
    return CLIP_RATE


@pytest.fixture
def steady_tone(sample_rate: int) -> tuple[np.ndarray, int]:
    """Constant-level 220 Hz tone; the normalizer should see a flat RMS."""
    t = np.arange(int(sample_rate * CLIP_SECONDS)) / sample_rate
    y = 0.3 * np.sin(2 * np.pi * 220.0 * t)
    return y.astype(np.float32), sample_rate


@pytest.fixture
def pulse_track(sample_rate: int) -> tuple[np.ndarray, int]:
    """
    Short decaying bursts every quarter second, silence in between.

    A burst starts at sample 0, so the first video frame is loud and the
    next one (at 30 fps) is silent.

    Returns:
        Tuple of (samples, sample_rate).
    """
    burst = 0.8 * np.exp(-np.linspace(0, 5, int(sample_rate * 0.01)))
    period = np.zeros(int(sample_rate * 0.25), dtype=np.float32)
    period[:len(burst)] = burst
    y = np.resize(period, int(sample_rate * CLIP_SECONDS))
    return y, sample_rate


@pytest.fixture
def pulse_wav(tmp_path, pulse_track):
    """pulse_track written to a WAV file."""
    import soundfile as sf

    y, sr = pulse_track
    path = tmp_path / "pulses.wav"
    sf.write(path, y, sr)
    return path


@pytest.fixture
def alternating_signal() -> list[float]:
    """Loud/quiet alternating samples."""
    return [0.9, 0.2, 0.9, 0.2]


@pytest.fixture
def grid_3x3() -> Grid:
    """Seeded 3x3 grid at the direct threshold level."""
    return Grid(3, 3, level=Level.DIRECT, seed=7)
