"""
Speed-adaptive low-pass filter.

Implementation of the 1€ filter from:
    Casiez, G., Roussel, N. and Vogel, D. (2012).
    1€ Filter: A Simple Speed-based Low-pass Filter for Noisy Input in Interactive Systems.

The signal speed is estimated with a low-passed derivative and used to raise
the cutoff frequency of the value filter, so slow motion is smoothed heavily
and fast motion is followed with little lag.
"""

import logging
import math

from posesmooth.smoothing.errors import FilterConfigError
from posesmooth.smoothing.low_pass import LowPassFilter

logger = logging.getLogger(__name__)


def _positive(name, value):
    if not value > 0.0 or not math.isfinite(value):
        raise FilterConfigError(f"{name} must be a positive finite number, got {value}")
    return float(value)


def _non_negative(name, value):
    if not value >= 0.0 or not math.isfinite(value):
        raise FilterConfigError(f"{name} must be a non-negative finite number, got {value}")
    return float(value)


class SpeedAdaptiveFilter:
    """One Euro filter for a scalar signal sampled at a variable rate."""

    def __init__(self, frequency_hz, min_cutoff=1.0, beta=0.0, derivative_cutoff=1.0):
        """
        Args:
            frequency_hz: Sampling frequency assumed until the second sample arrives.
            min_cutoff: Cutoff frequency (Hz) used when the signal is still.
            beta: Cutoff slope; how much the cutoff grows with signal speed.
            derivative_cutoff: Cutoff frequency (Hz) of the speed estimate.
        """
        self.set_frequency(frequency_hz)
        self.set_min_cutoff(min_cutoff)
        self.set_beta(beta)
        self.set_derivative_cutoff(derivative_cutoff)
        self._x_filter = LowPassFilter(self.get_weight(self._min_cutoff))
        self._dx_filter = LowPassFilter(self.get_weight(self._derivative_cutoff))
        self._has_sampled = False
        self._last_value = 0.0

    @property
    def last_value(self):
        return self._last_value

    @property
    def frequency_hz(self):
        return self._frequency_hz

    @property
    def min_cutoff(self):
        return self._min_cutoff

    @property
    def beta(self):
        return self._beta

    @property
    def derivative_cutoff(self):
        return self._derivative_cutoff

    @property
    def is_initialized(self):
        return self._x_filter.is_initialized

    @property
    def raw_input(self):
        return self._x_filter.raw_input

    def get_weight(self, cutoff):
        """Convert a cutoff frequency into a smoothing weight at the current sample rate."""
        te = 1.0 / self._frequency_hz
        tau = 1.0 / (2.0 * math.pi * cutoff)
        return 1.0 / (1.0 + tau / te)

    def set_frequency(self, value):
        self._frequency_hz = _positive("frequency_hz", value)

    def set_min_cutoff(self, value):
        self._min_cutoff = _positive("min_cutoff", value)

    def set_beta(self, value):
        self._beta = _non_negative("beta", value)

    def set_derivative_cutoff(self, value):
        self._derivative_cutoff = _positive("derivative_cutoff", value)

    def filter(self, value, dt):
        """
        Smooth one sample.

        Args:
            value: Raw sample.
            dt: Seconds elapsed since the previous sample. Ignored on the first call.

        Returns:
            The filtered value.
        """
        self._update_frequency(dt)

        if self._x_filter.is_initialized:
            dx = (value - self._x_filter.raw_input) * self._frequency_hz
        else:
            dx = 0.0

        edx = self._dx_filter.filter(dx, self.get_weight(self._derivative_cutoff))
        cutoff = self._min_cutoff + self._beta * abs(edx)

        self._last_value = self._x_filter.filter(value, self.get_weight(cutoff))
        return self._last_value

    def _update_frequency(self, dt):
        if not self._has_sampled:
            self._has_sampled = True
            return
        if dt is not None and dt > 0.0 and math.isfinite(dt):
            self._frequency_hz = 1.0 / dt
        else:
            logger.debug("Degenerate dt %r, keeping %.3f Hz", dt, self._frequency_hz)
