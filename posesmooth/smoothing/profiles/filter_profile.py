import json
import math
from dataclasses import dataclass, asdict, fields, replace

from posesmooth.smoothing.errors import FilterConfigError

@dataclass
class FilterProfile:
    """
    Defines filtering behavior for one kind of tracked signal.

    Window sizes are in the signal's units (metres for positions) except for
    rotations, where they are in degrees.
    """
    # --- 1€ filter ---
    min_cutoff: float = 7.0            # Hz, cutoff while still
    beta: float = 0.5                  # cutoff slope vs. speed
    derivative_cutoff: float = 1.0     # Hz, cutoff of the speed estimate
    initial_frequency_hz: float = 60.0 # assumed until the second sample

    # --- hysteresis ---
    inner_window: float = 0.003        # below: motion fully suppressed
    outer_window: float = 0.015        # above: filtered motion fully applied
    window_only: bool = False          # skip the 1€ filter, keep the windows

    def validate(self):
        """Raise FilterConfigError if any parameter is out of range. Returns self."""
        for name in ("min_cutoff", "derivative_cutoff", "initial_frequency_hz"):
            value = getattr(self, name)
            if not (value > 0.0 and math.isfinite(value)):
                raise FilterConfigError(f"{name} must be a positive finite number, got {value}")
        if not (self.beta >= 0.0 and math.isfinite(self.beta)):
            raise FilterConfigError(f"beta must be a non-negative finite number, got {self.beta}")
        if not (0.0 <= self.inner_window < self.outer_window and math.isfinite(self.outer_window)):
            raise FilterConfigError(
                f"Hysteresis windows need 0 <= inner < outer, got "
                f"inner={self.inner_window}, outer={self.outer_window}"
            )
        return self

    def copy(self, **changes):
        """Return a validated copy, optionally with some fields replaced."""
        try:
            return replace(self, **changes).validate()
        except TypeError as e:
            raise FilterConfigError(str(e)) from e

    @classmethod
    def from_dict(cls, profile_dict, base=None):
        """
        Create a profile from a dictionary.

        Missing keys fall back to `base` (or the dataclass defaults).
        Unknown keys are rejected.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(profile_dict) - known)
        if unknown:
            raise FilterConfigError(f"Unknown filter profile keys: {', '.join(unknown)}")
        values = asdict(base) if base is not None else {}
        values.update(profile_dict)
        try:
            return cls(**values).validate()
        except TypeError as e:
            raise FilterConfigError(f"Invalid filter profile value: {e}") from e

    def to_dict(self):
        return asdict(self)


def load_profile(path, base=None):
    """Load a FilterProfile from a JSON file."""
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise FilterConfigError(f"Invalid JSON in profile {path}: {e}") from e
    if not isinstance(data, dict):
        raise FilterConfigError(f"Profile {path} must contain a JSON object")
    return FilterProfile.from_dict(data, base=base)
