"""
Audio replay source.

Loads an audio file and slices it into one time-domain window per video
frame, the way a live analyser would hand the latest buffer to each frame.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union

import librosa
import numpy as np


@dataclass
class AudioSource:
    """Mono audio held in memory."""

    samples: np.ndarray
    sample_rate: int

    @classmethod
    def load(
        cls,
        audio_path: Union[str, Path],
        sr: int | None = 22050,
    ) -> "AudioSource":
        """
        Load audio from file.

        Args:
            audio_path: Path to audio file (wav, mp3, flac).
            sr: Target sample rate. None preserves original.

        Returns:
            AudioSource with mono float32 samples in [-1, 1].
        """
        y, sr_out = librosa.load(audio_path, sr=sr, mono=True)
        return cls(samples=y.astype(np.float32), sample_rate=int(sr_out))

    @property
    def duration(self) -> float:
        return len(self.samples) / float(self.sample_rate)

    def n_frames(self, fps: int) -> int:
        """Number of frames covering the whole source at ``fps``."""
        return int(np.ceil(self.duration * fps))

    def window_at(self, frame_index: int, fps: int, window: int = 1024) -> np.ndarray:
        """
        Time-domain window starting at the given frame's timestamp.

        Windows running past the end are zero-padded to ``window`` samples.
        """
        start = int(frame_index * self.sample_rate / fps)
        chunk = self.samples[start:start + window]
        if len(chunk) < window:
            chunk = np.pad(chunk, (0, window - len(chunk)))
        return chunk

    def windows(self, fps: int, window: int = 1024) -> Iterator[np.ndarray]:
        """Yield one window per frame at ``fps``."""
        for i in range(self.n_frames(fps)):
            yield self.window_at(i, fps, window)
