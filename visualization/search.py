"""
Binary search over a sorted series by x, used to slice the visible focus window.
"""

from typing import Any

import numpy as np

from productivity.series import Series, as_series


def _xs(series: Any) -> np.ndarray:
    """x values of a Series, of {"x", "y"} / (x, y) points, or of plain numbers."""
    if isinstance(series, Series):
        return series.x
    items = list(series)
    if items and isinstance(items[0], (dict, tuple, list)):
        return as_series(items).x
    return np.asarray(items, dtype=float)


def leftmost_index_at_or_after(series: Any, x_value: float) -> int:
    """
    Index of the first point with x >= x_value (the insertion point).

    Returns 0 when x_value is at or before the first point and len(series) when it is
    after the last. O(log n).
    """
    return int(np.searchsorted(_xs(series), x_value, side="left"))


def index_after(series: Any, x_value: float) -> int:
    """Number of points with x <= x_value (exclusive upper bound of the covered range)."""
    return int(np.searchsorted(_xs(series), x_value, side="right"))


def focus_bounds(series: Any, d1: float, d2: float) -> tuple[int, int]:
    """
    (start, stop) slice indices of the points covering [d1, d2], padded by one point
    on each side so the area does not end short of the window edge.
    """
    n = len(_xs(series))
    start = max(0, leftmost_index_at_or_after(series, d1) - 1)
    stop = min(n, index_after(series, d2) + 1)
    return start, max(start, stop)
