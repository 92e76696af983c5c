"""
Speed-adaptive smoothing filters for noisy pose signals.

- LowPassFilter: single-pole exponential smoother
- SpeedAdaptiveFilter: 1€ filter built from two low-pass filters
- ScalarFilter / VectorFilter / RotationFilter: per-component 1€ filtering
  gated by a hysteresis window
- PoseFilter: position + rotation of one tracked entity
"""

from .errors import FilterConfigError
from .low_pass import LowPassFilter
from .speed_adaptive import SpeedAdaptiveFilter
from .hysteresis import HysteresisFilter, ScalarFilter, VectorFilter, RotationFilter
from .pose_filter import PoseFilter
from .profiles import (
    FilterProfile,
    load_profile,
    POSITION_PROFILE,
    ROTATION_PROFILE,
    SCALAR_PROFILE,
)

__all__ = [
    'FilterConfigError',
    'LowPassFilter',
    'SpeedAdaptiveFilter',
    'HysteresisFilter',
    'ScalarFilter',
    'VectorFilter',
    'RotationFilter',
    'PoseFilter',
    'FilterProfile',
    'load_profile',
    'POSITION_PROFILE',
    'ROTATION_PROFILE',
    'SCALAR_PROFILE',
]
