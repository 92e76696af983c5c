"""
Position + rotation filtering for one tracked entity.
"""

from posesmooth.smoothing.hysteresis import RotationFilter, VectorFilter


class PoseFilter:
    """
    Pairs a VectorFilter and a RotationFilter that are fed from the same tick.

    Keep one PoseFilter per tracked entity; instances share no state.
    """

    def __init__(self, position_profile=None, rotation_profile=None):
        self.position_filter = VectorFilter(position_profile)
        self.rotation_filter = RotationFilter(rotation_profile)

    @property
    def last_value(self):
        """(position, rotation) of the last output; entries are None before the first sample."""
        return self.position_filter.last_value, self.rotation_filter.last_value

    @property
    def is_initialized(self):
        return self.position_filter.is_initialized and self.rotation_filter.is_initialized

    def reinitialize(self):
        self.position_filter.reinitialize()
        self.rotation_filter.reinitialize()

    def filter(self, position, rotation, dt):
        """
        Filter one pose sample.

        Args:
            position: [x, y, z]
            rotation: unit quaternion [w, x, y, z]
            dt: Seconds elapsed since the previous sample.

        Returns:
            (filtered_position, filtered_rotation) as numpy arrays.
        """
        return (
            self.position_filter.filter(position, dt),
            self.rotation_filter.filter(rotation, dt),
        )
