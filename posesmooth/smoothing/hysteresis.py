"""
Hysteresis-windowed speed-adaptive filters for scalars, 3D vectors and rotations.

Every component of the signal gets its own SpeedAdaptiveFilter. On top of
that, the distance between the new sample and the last output selects how
much of the filtered value is applied:

- below the inner window the output does not move at all,
- above the outer window the filtered value is used as-is,
- in between the two are blended linearly.

This suppresses sensor jitter during near-stationary holds while fast
motion is still followed closely.
"""

import logging

import numpy as np

from posesmooth.smoothing.math_utils import (
    clamp01,
    is_finite_vector,
    norm,
    quat_angle_between,
    quat_normalize,
    slerp,
    sq_distance,
)
from posesmooth.smoothing.profiles import POSITION_PROFILE, ROTATION_PROFILE, SCALAR_PROFILE
from posesmooth.smoothing.speed_adaptive import SpeedAdaptiveFilter

logger = logging.getLogger(__name__)


class HysteresisFilter:
    """
    Generic hysteresis filter over a fixed number of components.

    Subclasses set `components` and the default profile, and may override
    `_prepare`, `_distance`, `_blend` and `_to_output`.
    """
    components = 1
    default_profile = SCALAR_PROFILE

    def __init__(self, profile=None):
        if profile is None:
            profile = self.default_profile
        # Private copy: profile constants are shared templates.
        self._profile = profile.copy()
        self._filters = []
        self._last_output = None
        self.reinitialize()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def profile(self):
        """A copy of the current tuning."""
        return self._profile.copy()

    @property
    def last_value(self):
        """Last output, or None before the first valid sample."""
        if self._last_output is None:
            return None
        return self._to_output(self._last_output)

    @property
    def is_initialized(self):
        return self._last_output is not None

    def reinitialize(self):
        """
        Reset the per-component filters and forget the last output.

        Use this after changing filter parameters. Feeding the same samples
        afterwards reproduces the outputs of a freshly constructed filter.
        """
        p = self._profile
        self._filters = [
            SpeedAdaptiveFilter(p.initial_frequency_hz, p.min_cutoff, p.beta, p.derivative_cutoff)
            for _ in range(self.components)
        ]
        self._last_output = None
        logger.debug("%s reinitialized with %s", type(self).__name__, p)

    # ------------------------------------------------------------------
    # Tuning. Invalid values raise FilterConfigError and change nothing.
    # ------------------------------------------------------------------

    def set_min_cutoff(self, value):
        self._profile = self._profile.copy(min_cutoff=value)

    def set_beta(self, value):
        self._profile = self._profile.copy(beta=value)

    def set_derivative_cutoff(self, value):
        self._profile = self._profile.copy(derivative_cutoff=value)

    def set_inner_window(self, value):
        self._profile = self._profile.copy(inner_window=value)

    def set_outer_window(self, value):
        self._profile = self._profile.copy(outer_window=value)

    def set_windows(self, inner, outer):
        """Set both windows at once, for moves that would cross the current bounds."""
        self._profile = self._profile.copy(inner_window=inner, outer_window=outer)

    def set_window_only(self, enabled):
        self._profile = self._profile.copy(window_only=bool(enabled))

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def filter(self, value, dt):
        """
        Filter one sample.

        Args:
            value: New sample.
            dt: Seconds elapsed since the previous sample.

        Returns:
            The filtered sample. Invalid samples (NaN / inf components) are
            ignored and the previous output is returned.
        """
        self._update_filter_parameters()

        sample = self._prepare(value)
        if sample is None:
            logger.debug("%s ignoring invalid sample %r", type(self).__name__, value)
            return self.last_value

        last = self._last_output
        if self._profile.window_only:
            raw_filtered = sample
        else:
            raw_filtered = np.array(
                [f.filter(float(sample[i]), dt) for i, f in enumerate(self._filters)]
            )

        if last is None:
            ratio = 1.0
        else:
            ratio = self._ratio(self._distance(sample, last))

        result = self._blend(last, raw_filtered, ratio)
        self._last_output = result
        return self._to_output(result)

    def _update_filter_parameters(self):
        p = self._profile
        for f in self._filters:
            f.set_beta(p.beta)
            f.set_min_cutoff(p.min_cutoff)
            f.set_derivative_cutoff(p.derivative_cutoff)

    def _ratio(self, distance):
        p = self._profile
        return clamp01((distance - p.inner_window) / (p.outer_window - p.inner_window))

    def _prepare(self, value):
        sample = np.asarray(value, dtype=float).reshape(-1)
        if sample.shape != (self.components,):
            raise ValueError(
                f"{type(self).__name__} expects {self.components} components, got {sample.shape[0]}"
            )
        if not is_finite_vector(sample):
            return None
        return sample

    def _distance(self, sample, last):
        return norm(sample - last)

    def _blend(self, last, raw_filtered, ratio):
        if last is None:
            return raw_filtered.copy()
        return ratio * raw_filtered + (1.0 - ratio) * last

    def _to_output(self, result):
        return result.copy()


class ScalarFilter(HysteresisFilter):
    """Speed-adaptive hysteresis filter for a single sensor value."""
    components = 1
    default_profile = SCALAR_PROFILE

    def _distance(self, sample, last):
        return abs(float(sample[0]) - float(last[0]))

    def _to_output(self, result):
        return float(result[0])


class VectorFilter(HysteresisFilter):
    """Speed-adaptive hysteresis filter for 3D positions."""
    components = 3
    default_profile = POSITION_PROFILE


class RotationFilter(HysteresisFilter):
    """
    Speed-adaptive hysteresis filter for unit quaternions [w, x, y, z].

    The four components are filtered independently. Samples are flipped onto
    the hemisphere of the last output first, so q / -q sign changes from the
    tracker do not show up as jumps. Windows are in degrees.
    """
    components = 4
    default_profile = ROTATION_PROFILE

    def _prepare(self, value):
        sample = super()._prepare(value)
        if sample is None or norm(sample) < 1e-10:
            return None
        sample = np.array(quat_normalize(sample))

        # Antipodal representation of the same rotation
        if self._last_output is not None and sq_distance(self._last_output, sample) > 2.0:
            sample = -sample
        return sample

    def _distance(self, sample, last):
        return quat_angle_between(sample, last)

    def _blend(self, last, raw_filtered, ratio):
        target = quat_normalize(raw_filtered)
        if last is None:
            return np.array(target)
        return np.array(slerp(last, target, ratio))
