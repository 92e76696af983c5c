"""
Exceptions raised by the smoothing filters.
"""


class FilterConfigError(ValueError):
    """Raised when a filter is constructed or tuned with invalid parameters."""
