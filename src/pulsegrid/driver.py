"""
Frame driver.

Replays a source one window per frame: normalize the window, advance the
grid with the frame's timestamp, hand the grid to the caller for drawing.
Timestamps are frame times in seconds, so replay is deterministic and
independent of wall-clock speed.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from pulsegrid.core.grid import Grid
from pulsegrid.core.normalizer import SignalNormalizer
from pulsegrid.io.audio import AudioSource


@dataclass
class DriverFrame:
    """One advanced frame."""
    index: int
    time: float
    grid: Grid


class FrameDriver:
    """Drives a Grid from an AudioSource at a fixed frame rate."""

    def __init__(
        self,
        grid: Grid,
        normalizer: Optional[SignalNormalizer] = None,
        fps: int = 60,
        window: int = 1024,
    ):
        """
        Args:
            grid: Grid to advance.
            normalizer: Window normalizer (default parameters if None).
            fps: Frames per second.
            window: Samples handed to the grid per frame.
        """
        if fps <= 0:
            raise ValueError("fps must be positive")
        if window <= 0:
            raise ValueError("window must be positive")
        self.grid = grid
        self.normalizer = normalizer or SignalNormalizer()
        self.fps = fps
        self.window = window

    def step(self, source: AudioSource, frame_index: int) -> DriverFrame:
        """Advance the grid for a single frame of ``source``."""
        raw = source.window_at(frame_index, self.fps, self.window)
        t = frame_index / self.fps
        self.grid.advance(self.normalizer.normalize(raw), now=t)
        return DriverFrame(index=frame_index, time=t, grid=self.grid)

    def run(
        self,
        source: AudioSource,
        max_frames: Optional[int] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> Iterator[DriverFrame]:
        """
        Yield each advanced frame in order.

        Args:
            source: Audio to replay.
            max_frames: Stop after this many frames.
            progress_callback: Optional callback(current_frame, total_frames).
        """
        total = source.n_frames(self.fps)
        if max_frames is not None:
            total = min(total, max_frames)

        for i in range(total):
            yield self.step(source, i)
            if progress_callback:
                progress_callback(i + 1, total)
