"""
Brushing charts for productivity series.
Linear scales, index search and brush handlers feed a matplotlib focus/context renderer.
"""

from visualization.brushing import BrushingChart
from visualization.interaction import BrushController, InteractionState
from visualization.options import ChartOptions, Dimensions, load_options
from visualization.plotter import chart_to_bytes, plot, plot_all, plot_to_bytes
from visualization.scale import LinearScale, make_linear_scale
from visualization.search import focus_bounds, index_after, leftmost_index_at_or_after

__all__ = [
    "BrushController",
    "BrushingChart",
    "ChartOptions",
    "Dimensions",
    "InteractionState",
    "LinearScale",
    "chart_to_bytes",
    "focus_bounds",
    "index_after",
    "leftmost_index_at_or_after",
    "load_options",
    "make_linear_scale",
    "plot",
    "plot_all",
    "plot_to_bytes",
]
