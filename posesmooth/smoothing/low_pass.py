"""
Single-pole exponential low-pass filter for one scalar value.
"""

import logging
import math

from posesmooth.smoothing.errors import FilterConfigError

logger = logging.getLogger(__name__)


def _check_weight(weight):
    if not 0.0 <= weight <= 1.0:
        raise FilterConfigError(f"Low-pass weight must be within [0, 1], got {weight}")
    return float(weight)


class LowPassFilter:
    """
    Exponential smoother: output = weight * value + (1 - weight) * previous output.

    A weight of 1 passes samples through unchanged, a weight of 0 freezes the
    output. The first finite sample is returned as-is and seeds the state.
    NaN and infinite samples are ignored and the previous output is returned.
    """

    def __init__(self, weight, initial_value=0.0):
        self._weight = _check_weight(weight)
        self._smoothed = float(initial_value)
        self._raw_input = float(initial_value)
        self._initialized = False

    @property
    def weight(self):
        return self._weight

    @property
    def raw_input(self):
        """Last accepted raw sample."""
        return self._raw_input

    @property
    def is_initialized(self):
        return self._initialized

    @property
    def last_value(self):
        """Last smoothed output."""
        return self._smoothed

    def set_weight(self, weight):
        self._weight = _check_weight(weight)

    def filter(self, value, weight=None):
        """
        Smooth one sample.

        Args:
            value: Raw sample.
            weight: Optional new weight; it is stored and used for later calls too.

        Returns:
            The smoothed value.
        """
        if weight is not None:
            self.set_weight(weight)

        if not math.isfinite(value):
            logger.debug("Ignoring non-finite sample %r", value)
            return self._smoothed

        if self._initialized:
            self._smoothed = self._weight * value + (1.0 - self._weight) * self._smoothed
        else:
            self._smoothed = float(value)
            self._initialized = True

        self._raw_input = float(value)
        return self._smoothed
