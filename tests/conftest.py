"""Shared fixtures for chart tests (headless matplotlib)."""

import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from visualization.options import ChartOptions, Dimensions  # noqa: E402


@pytest.fixture
def three_points():
    """Series from the focus/context walkthrough: x = 0, 10, 20."""
    return [{"x": 0, "y": 1}, {"x": 10, "y": 5}, {"x": 20, "y": 2}]


@pytest.fixture
def small_options():
    """100px wide chart so pixel/domain arithmetic is easy to follow."""
    return ChartOptions(dimensions=Dimensions(width=100, focus_height=50, context_height=10))


@pytest.fixture
def dataset():
    """Two contributors plus the aggregate view, deliberately not in plot order."""
    return {
        "alice": [{"x": 0, "y": 2}, {"x": 10, "y": 3}, {"x": 20, "y": 0}],
        "all": [{"x": 0, "y": 3}, {"x": 10, "y": 7}, {"x": 20, "y": 4}],
        "bob": [{"x": 0, "y": 1}, {"x": 10, "y": 4}, {"x": 20, "y": 4}],
    }
