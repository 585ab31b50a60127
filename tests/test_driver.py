"""Tests for the FrameDriver module."""

import pytest

from pulsegrid.core.grid import Grid
from pulsegrid.core.levels import Level
from pulsegrid.driver import FrameDriver
from pulsegrid.io.audio import AudioSource


class TestFrameDriver:
    @pytest.fixture
    def source(self, pulse_track):
        y, sr = pulse_track
        return AudioSource(y, sr)

    def test_frame_count_and_times(self, source):
        """One frame per 1/fps seconds of audio."""
        driver = FrameDriver(Grid(2, 2), fps=30)

        frames = list(driver.run(source))

        assert len(frames) == 60
        assert [f.index for f in frames[:3]] == [0, 1, 2]
        assert frames[1].time == pytest.approx(1 / 30)

    def test_max_frames(self, source):
        driver = FrameDriver(Grid(2, 2), fps=30)
        assert len(list(driver.run(source, max_frames=5))) == 5

    def test_burst_turns_cells_on_then_traces(self, source):
        """The burst at t=0 lights the grid; the silent frame after traces it."""
        grid = Grid(4, 4, level=Level.DIRECT)
        driver = FrameDriver(grid, fps=30)

        driver.step(source, 0)
        assert all(c.state for c in grid)

        driver.step(source, 1)
        assert not any(c.state for c in grid)
        assert all(c.last_off == pytest.approx(1 / 30) for c in grid)

    def test_progress_callback(self, source):
        progress = []
        driver = FrameDriver(Grid(1, 1), fps=10)

        for _ in driver.run(source, progress_callback=lambda c, t: progress.append((c, t))):
            pass

        assert len(progress) == 20
        assert progress[-1] == (20, 20)

    def test_invalid_settings(self):
        with pytest.raises(ValueError):
            FrameDriver(Grid(1, 1), fps=0)
        with pytest.raises(ValueError):
            FrameDriver(Grid(1, 1), window=0)
