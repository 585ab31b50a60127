"""Tests for the SignalNormalizer module."""

import numpy as np
import pytest

from pulsegrid.core.normalizer import NormalizerParams, SignalNormalizer


class TestSignalNormalizer:
    """Tests for RMS-targeted volume normalization."""

    def test_output_in_unit_range(self, steady_tone):
        """normalize() should map any window to [0, 1]."""
        y, _ = steady_tone
        normalizer = SignalNormalizer()

        result = normalizer.normalize(y[:1024])

        assert result.dtype == np.float32
        assert len(result) == 1024
        assert result.min() >= 0.0
        assert result.max() <= 1.0

    def test_loud_window_scaled_to_target(self):
        """A constant loud window should come out at the target RMS."""
        normalizer = SignalNormalizer()
        window = np.full(256, 0.5)

        result = normalizer.normalize(window)

        assert np.allclose(result, 0.15)

    def test_quiet_window_gain_capped(self):
        """Gain should never exceed max_gain."""
        normalizer = SignalNormalizer()
        window = np.full(256, 0.02)

        assert normalizer.gain(normalizer.rms(window)) == 3.0
        assert np.allclose(normalizer.normalize(window), 0.06)

    def test_silence_passthrough(self):
        """Windows below the silence floor keep unity gain."""
        normalizer = SignalNormalizer()
        window = np.full(256, 0.005)

        assert normalizer.gain(normalizer.rms(window)) == 1.0
        assert np.allclose(normalizer.normalize(window), 0.005)

    def test_negative_samples_use_magnitude(self):
        normalizer = SignalNormalizer(NormalizerParams(target_rms=0.5))
        result = normalizer.normalize(np.array([-0.5, 0.5, -0.5, 0.5]))
        assert np.allclose(result, 0.5)

    def test_clipped_to_one(self):
        normalizer = SignalNormalizer(NormalizerParams(target_rms=0.9, max_gain=10.0))
        window = np.zeros(100)
        window[0] = 1.0  # rms 0.1, gain 9

        result = normalizer.normalize(window)

        assert result[0] == 1.0
        assert np.all(result[1:] == 0.0)

    def test_byte_samples(self):
        """128 is silence in unsigned byte buffers."""
        normalizer = SignalNormalizer()
        window = np.full(64, 128, dtype=np.uint8)
        window[0] = 255

        result = normalizer.normalize_bytes(window)

        assert result[1] == 0.0
        assert 0.0 < result[0] <= 1.0

    def test_empty_window_rejected(self):
        with pytest.raises(ValueError):
            SignalNormalizer().normalize(np.array([]))

    def test_input_not_modified(self):
        window = np.array([-0.2, 0.4, -0.6])
        before = window.copy()
        SignalNormalizer().normalize(window)
        np.testing.assert_array_equal(window, before)
