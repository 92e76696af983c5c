from posesmooth.smoothing.profiles.filter_profile import FilterProfile

ROTATION_PROFILE = FilterProfile( # degrees
    min_cutoff=7.0,
    beta=0.5,
    derivative_cutoff=1.0,
    inner_window=0.5,
    outer_window=1.0,
)
