"""
Chart preview service: hosts one brushing chart per contributor (headless Agg backend),
serves PNG snapshots and accepts pointer events that move the selection window.
The dataset is handed in by the host via create_app(); nothing here fetches data.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Any, Literal

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import matplotlib
matplotlib.use("Agg")  # headless backend for server (no display)
from matplotlib.figure import Figure

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from productivity.errors import ChartError, UnknownContributorError
from productivity.series import get_series, heading_for, plot_order, with_all_contributors
from ui.cache import SnapshotCache
from visualization.brushing import BrushingChart
from visualization.options import ChartOptions, load_options
from visualization.plotter import chart_to_bytes

logger = logging.getLogger(__name__)

# Make window changes and rejected requests visible when run under uvicorn
for _log in ("ui.app", "visualization.interaction", "visualization.plotter"):
    logging.getLogger(_log).setLevel(logging.INFO)


class WindowBody(BaseModel):
    x: float
    dx: float


class PointerBody(BaseModel):
    kind: Literal["down", "move", "up"]
    x: float


def _window(chart: BrushingChart) -> dict:
    d1, d2 = chart.focus_domain()
    return {"x": chart.interaction.x, "dx": chart.interaction.dx, "domain": [d1, d2]}


def create_app(dataset: dict[str, Any], options: ChartOptions | None = None) -> FastAPI:
    """
    Build the FastAPI app for a dataset.

    Args:
        dataset: Contributor key -> series (validated here; bad series raise ChartError).
                 An "all" entry is combined from the others when missing.
        options: Chart options; defaults to load_options() (environment / .env).
    """
    options = options or load_options()
    data = with_all_contributors(dataset)
    charts: dict[str, BrushingChart] = {}
    # One lock for all charts: handlers run one at a time, in arrival order
    lock = threading.Lock()
    snapshots = SnapshotCache()

    app = FastAPI(title="Coductivity")
    app.state.snapshots = snapshots

    def _chart(key: str) -> BrushingChart:
        """Return the rendered chart for key, rendering it on first use."""
        chart = charts.get(key)
        if chart is not None:
            return chart
        try:
            series = get_series(data, key)
            chart = BrushingChart(options)
            fig = Figure(dpi=options.dpi)
            fig.set_label(key)
            chart.render(series, fig, title=heading_for(key))
        except UnknownContributorError as e:
            logger.warning("Rejected request for unknown contributor %s", key)
            raise HTTPException(status_code=404, detail=str(e)) from e
        except ChartError as e:
            logger.warning("Could not render chart for %s: %s", key, e)
            raise HTTPException(status_code=422, detail=str(e)) from e
        charts[key] = chart
        return chart

    @app.get("/api/contributors")
    def list_contributors():
        """Contributors in plotting order ("all" first) with their headings."""
        return [{"key": key, "heading": heading_for(key)} for key in plot_order(data)]

    @app.get("/api/charts/{key}.png")
    def chart_png(key: str):
        """PNG snapshot of the chart at its current selection window."""
        with lock:
            chart = _chart(key)
            state = chart.interaction
            png = snapshots.get_or_render(key, state.x, state.dx, lambda: chart_to_bytes(chart))
        return Response(content=png, media_type="image/png")

    @app.get("/api/charts/{key}/window")
    def get_window(key: str):
        with lock:
            return _window(_chart(key))

    @app.put("/api/charts/{key}/window")
    def put_window(key: str, body: WindowBody):
        """Set the selection window directly (a completed select gesture). Values are clamped."""
        with lock:
            chart = _chart(key)
            chart.set_window(body.x, body.dx)
            logger.info("Window for %s set to x=%.1f dx=%.1f", key, chart.interaction.x, chart.interaction.dx)
            return _window(chart)

    @app.post("/api/charts/{key}/pointer")
    def pointer(key: str, body: PointerBody):
        """Forward a pointer event (context-pane pixels) to the chart's brush."""
        with lock:
            chart = _chart(key)
            controller = chart.controller
            if body.kind == "down":
                controller.on_pointer_down(body.x)
            elif body.kind == "move":
                controller.on_pointer_move(body.x)
            else:
                controller.on_pointer_up(body.x)
            return _window(chart)

    return app
