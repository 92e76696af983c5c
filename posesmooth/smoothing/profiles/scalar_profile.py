from posesmooth.smoothing.profiles.filter_profile import FilterProfile

SCALAR_PROFILE = FilterProfile(
    min_cutoff=7.0,
    beta=0.5,
    derivative_cutoff=1.0,
    inner_window=0.003,
    outer_window=0.015,
)
