"""Custom exception hierarchy for the one-line puzzle solver."""


class OnePathError(Exception):
    """Base exception for solver failures."""


class InvalidConfiguration(OnePathError):
    """Raised when the grid or start cell cannot describe a valid puzzle."""


class LayoutParseError(InvalidConfiguration):
    """Raised when a text layout cannot be parsed."""


class SearchStateError(OnePathError):
    """Raised when a search handle is driven after it already finished."""


class CrossCheckError(OnePathError):
    """Raised when the exact solver cannot decide an instance in time."""
