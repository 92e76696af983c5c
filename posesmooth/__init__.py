VERSION = "0.1.0"

from posesmooth.smoothing import (
    FilterConfigError,
    LowPassFilter,
    SpeedAdaptiveFilter,
    ScalarFilter,
    VectorFilter,
    RotationFilter,
    PoseFilter,
    FilterProfile,
)

__all__ = [
    'VERSION',
    'FilterConfigError',
    'LowPassFilter',
    'SpeedAdaptiveFilter',
    'ScalarFilter',
    'VectorFilter',
    'RotationFilter',
    'PoseFilter',
    'FilterProfile',
]
