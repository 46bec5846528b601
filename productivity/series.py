"""
Time series of commit activity: immutable, sorted (x, y) points stored as numpy arrays.
Datasets map a contributor key to a Series; "all" is the reserved aggregate key.
"""

import math
from typing import Any, Iterable

import numpy as np

from productivity.errors import EmptySeriesError, UnknownContributorError

ALL_CONTRIBUTORS = "all"
ALL_HEADING = "All Productivity"


def _coerce_point(point: Any) -> tuple[float, float]:
    """Accept {"x", "y"} dicts or (x, y) pairs."""
    if isinstance(point, dict):
        try:
            raw_x, raw_y = point["x"], point["y"]
        except KeyError as e:
            raise ValueError(f"Point is missing {e.args[0]!r}: {point!r}") from e
    else:
        try:
            raw_x, raw_y = point
        except (TypeError, ValueError) as e:
            raise ValueError(f"Point must be a dict or an (x, y) pair: {point!r}") from e
    try:
        x, y = float(raw_x), float(raw_y)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Point values must be numeric: {point!r}") from e
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Point values must be finite: {point!r}")
    return x, y


class Series:
    """
    Ordered, read-only sequence of (x, y) points with non-decreasing x.

    Slicing returns another Series sharing the same buffers; unlike
    from_points, a slice may be empty (e.g. the focus slice of a zero-width window).
    """

    __slots__ = ("_x", "_y")

    def __init__(self, x: np.ndarray, y: np.ndarray):
        x = np.array(x, dtype=float)
        y = np.array(y, dtype=float)
        if x.shape != y.shape or x.ndim != 1:
            raise ValueError("Series x and y must be 1-D arrays of the same length")
        if x.size > 1 and bool(np.any(np.diff(x) < 0)):
            raise ValueError("Series x values must be sorted ascending")
        x.setflags(write=False)
        y.setflags(write=False)
        self._x = x
        self._y = y

    @classmethod
    def from_points(cls, points: Iterable[Any]) -> "Series":
        """
        Build a Series from {"x", "y"} dicts or (x, y) pairs.

        Raises:
            EmptySeriesError: No points.
            ValueError: Unsorted, non-numeric or non-finite values.
        """
        pairs = [_coerce_point(p) for p in points]
        if not pairs:
            raise EmptySeriesError("Series has no points to plot")
        xs, ys = zip(*pairs)
        return cls(np.array(xs), np.array(ys))

    @property
    def x(self) -> np.ndarray:
        return self._x

    @property
    def y(self) -> np.ndarray:
        return self._y

    def __len__(self) -> int:
        return int(self._x.size)

    def __getitem__(self, index):
        if isinstance(index, slice):
            if index.step not in (None, 1):
                raise ValueError("Series slices must keep x ascending (step 1)")
            return Series._view(self._x[index], self._y[index])
        return {"x": float(self._x[index]), "y": float(self._y[index])}

    def __iter__(self):
        for x, y in zip(self._x, self._y):
            yield {"x": float(x), "y": float(y)}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Series):
            return NotImplemented
        return bool(np.array_equal(self._x, other._x) and np.array_equal(self._y, other._y))

    def __repr__(self) -> str:
        return f"Series(n={len(self)})"

    @classmethod
    def _view(cls, x: np.ndarray, y: np.ndarray) -> "Series":
        # Slices of an already validated series skip validation and copying
        s = cls.__new__(cls)
        s._x = x
        s._y = y
        return s

    def points(self) -> list[dict]:
        """Return points as a list of {"x", "y"} dicts."""
        return list(self)

    def x_extent(self) -> tuple[float, float]:
        """(min x, max x). Raises EmptySeriesError for an empty slice."""
        if not len(self):
            raise EmptySeriesError("Series has no points to plot")
        return float(self._x[0]), float(self._x[-1])

    def y_max(self) -> float:
        if not len(self):
            raise EmptySeriesError("Series has no points to plot")
        return float(self._y.max())


def as_series(obj: Any) -> Series:
    """Return obj as a Series (pass-through for Series, else built from points)."""
    if isinstance(obj, Series):
        if not len(obj):
            raise EmptySeriesError("Series has no points to plot")
        return obj
    if obj is None:
        raise EmptySeriesError("Series has no points to plot")
    return Series.from_points(obj)


def normalize_dataset(dataset: dict[str, Any]) -> dict[str, Series]:
    """Convert every value of a contributor -> points mapping to a Series (keeps key order)."""
    return {str(key): as_series(points) for key, points in dataset.items()}


def combine_series(series_list: Iterable[Series]) -> Series:
    """
    Sum y per distinct x across several series.

    Used to build the "all" view when the caller only supplied per-contributor series.
    """
    series_list = [as_series(s) for s in series_list]
    if not series_list:
        raise EmptySeriesError("No series to combine")
    xs = np.concatenate([s.x for s in series_list])
    ys = np.concatenate([s.y for s in series_list])
    unique_x, inverse = np.unique(xs, return_inverse=True)
    totals = np.bincount(inverse.ravel(), weights=ys, minlength=unique_x.size)
    return Series(unique_x, totals)


def with_all_contributors(dataset: dict[str, Any]) -> dict[str, Series]:
    """Return a normalized dataset that has an "all" entry (combined if missing)."""
    normalized = normalize_dataset(dataset)
    if not normalized or ALL_CONTRIBUTORS in normalized:
        return normalized
    combined = combine_series(normalized.values())
    return {ALL_CONTRIBUTORS: combined, **normalized}


def plot_order(dataset: dict[str, Any]) -> list[str]:
    """Contributor keys in plotting order: "all" first, then insertion order."""
    keys = [k for k in dataset if k != ALL_CONTRIBUTORS]
    if ALL_CONTRIBUTORS in dataset:
        return [ALL_CONTRIBUTORS, *keys]
    return keys


def heading_for(key: str) -> str:
    """Heading shown above a contributor's chart."""
    return ALL_HEADING if key == ALL_CONTRIBUTORS else key


def get_series(dataset: dict[str, Any], key: str) -> Series:
    """Look up a contributor's series; raise UnknownContributorError if absent."""
    if key not in dataset:
        raise UnknownContributorError(f"Unknown contributor: {key}. Known: {list(dataset)}")
    return as_series(dataset[key])
