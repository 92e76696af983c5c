from posesmooth.smoothing.profiles.filter_profile import FilterProfile, load_profile
from posesmooth.smoothing.profiles.position_profile import POSITION_PROFILE
from posesmooth.smoothing.profiles.rotation_profile import ROTATION_PROFILE
from posesmooth.smoothing.profiles.scalar_profile import SCALAR_PROFILE

__all__ = [
    'FilterProfile',
    'load_profile',
    'POSITION_PROFILE',
    'ROTATION_PROFILE',
    'SCALAR_PROFILE',
]
