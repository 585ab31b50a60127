"""
Signal normalization module.

Turns a raw time-domain window into per-sample magnitudes in [0.0, 1.0]
with an RMS-targeted gain, so quiet input still drives the grid and loud
input does not saturate it.
"""

from dataclasses import dataclass

import numpy as np


@dataclass
class NormalizerParams:
    """RMS gain parameters."""

    target_rms: float = 0.15  # Level the gain aims for
    max_gain: float = 3.0  # Cap on the boost applied to quiet input
    silence_rms: float = 0.01  # Below this the window is passed through at unity gain


class SignalNormalizer:
    """
    Volume-normalizes time-domain windows for the grid.

    Each sample's magnitude is scaled by ``min(target_rms / rms, max_gain)``
    and clipped to 1.0. Near-silent windows keep unity gain so noise is not
    amplified into activity.
    """

    def __init__(self, params: NormalizerParams | None = None):
        self.params = params or NormalizerParams()

    def rms(self, window: np.ndarray) -> float:
        """Root mean square of a float window in [-1, 1]."""
        window = np.asarray(window, dtype=np.float64)
        if window.size == 0:
            return 0.0
        return float(np.sqrt(np.mean(window * window)))

    def gain(self, rms: float) -> float:
        """Gain for a window with the given RMS."""
        p = self.params
        if rms <= p.silence_rms:
            return 1.0
        return min(p.target_rms / rms, p.max_gain)

    def normalize(self, window: np.ndarray) -> np.ndarray:
        """
        Normalize a float window.

        Args:
            window: Time-domain samples in [-1, 1].

        Returns:
            float32 array of the same length with values in [0, 1].

        Raises:
            ValueError: If the window is empty.
        """
        window = np.asarray(window, dtype=np.float64)
        if window.size == 0:
            raise ValueError("Cannot normalize an empty window")
        factor = self.gain(self.rms(window))
        return np.clip(np.abs(window) * factor, 0.0, 1.0).astype(np.float32)

    def normalize_bytes(self, window: np.ndarray) -> np.ndarray:
        """
        Normalize unsigned 8-bit samples where 128 is silence.

        This is the layout browser/analyser style byte buffers use.
        """
        centered = (np.asarray(window, dtype=np.float64) - 128.0) / 128.0
        return self.normalize(centered)
