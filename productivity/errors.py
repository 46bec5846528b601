"""
Errors raised while preparing or rendering productivity charts.
All are ValueError subclasses so callers can catch them the same way as bad input.
"""


class ChartError(ValueError):
    """Base class for chart input and rendering errors."""


class EmptySeriesError(ChartError):
    """Raised when a series has no points to plot."""


class DomainDegenerateError(ChartError):
    """Raised when a scale needs a non-zero span but min == max (e.g. a single-point series)."""


class UnknownContributorError(ChartError, KeyError):
    """Raised when a contributor key is not in the dataset."""

    def __str__(self) -> str:
        # KeyError quotes its message; keep it readable
        return str(self.args[0]) if self.args else ""
