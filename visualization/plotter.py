"""
Plot contributors' productivity series as brushing charts with matplotlib.
plot() draws one contributor, plot_all() draws "all" first and then everyone else.
"""

import io
import logging
from pathlib import Path
from typing import Any

from matplotlib.figure import Figure

from productivity.series import (
    ALL_CONTRIBUTORS,
    get_series,
    heading_for,
    plot_order,
    with_all_contributors,
)
from visualization.brushing import BrushingChart
from visualization.interaction import InteractionState
from visualization.options import ChartOptions

logger = logging.getLogger(__name__)


def _slug(key: str) -> str:
    """Filesystem-safe name for a contributor key."""
    safe = "".join(c if c.isalnum() or c in "-_.@" else "_" for c in key.strip())
    return safe[:80] or "contributor"


def _new_figure(options: ChartOptions, interactive: bool) -> Figure:
    if interactive:
        import matplotlib.pyplot as plt

        return plt.figure(dpi=options.dpi)
    return Figure(dpi=options.dpi)


def _save(fig: Figure, path: str | Path | io.BytesIO, dpi: int) -> None:
    if isinstance(path, io.BytesIO):
        fig.savefig(path, format="png", dpi=dpi)
    else:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, dpi=dpi)


def plot(
    dataset: dict[str, Any],
    contributor: str = ALL_CONTRIBUTORS,
    path: str | Path | io.BytesIO | None = None,
    *,
    options: ChartOptions | None = None,
    interaction: InteractionState | None = None,
    title: str | None = None,
) -> BrushingChart:
    """
    Plot one contributor's series as a focus/context chart.

    Args:
        dataset: Contributor key -> Series (or list of {"x", "y"} points).
        contributor: Key to plot; "all" is the aggregate view (combined from the other
                     contributors when the dataset has no "all" entry).
        path: If set, save a PNG there (file path or BytesIO); otherwise show an
              interactive window with the brush connected.
        options: Sizes, tick counts and initial window; defaults to ChartOptions().
        interaction: Selection window to start from (e.g. one kept from a previous chart).
        title: Heading above the chart. Defaults to the contributor's heading.

    Returns:
        The rendered BrushingChart.
    """
    options = options or ChartOptions()
    if contributor == ALL_CONTRIBUTORS and contributor not in dataset:
        dataset = with_all_contributors(dataset)
    series = get_series(dataset, contributor)
    heading = title if title is not None else heading_for(contributor)

    logger.info("Plotting %s", contributor)
    chart = BrushingChart(options, interaction)
    fig = _new_figure(options, interactive=path is None)
    fig.set_label(contributor)
    chart.render(series, fig, title=heading)

    if path is not None:
        _save(fig, path, options.dpi)
        return chart

    import matplotlib.pyplot as plt

    chart.connect()
    plt.show()
    return chart


def plot_all(
    dataset: dict[str, Any],
    *,
    options: ChartOptions | None = None,
    output_dir: str | Path | None = None,
) -> dict[str, BrushingChart]:
    """
    Plot every contributor: "all" first (headed "All Productivity"), then the rest by key.

    Args:
        dataset: Contributor key -> series. An "all" entry is combined from the others
                 when missing.
        options: Shared chart options.
        output_dir: If set, save <key>.png files there; otherwise open interactive windows.

    Returns:
        Charts keyed by contributor, in plotting order.
    """
    options = options or ChartOptions()
    dataset = with_all_contributors(dataset)
    charts: dict[str, BrushingChart] = {}
    for key in plot_order(dataset):
        series = get_series(dataset, key)
        logger.info("Plotting %s", key)
        chart = BrushingChart(options)
        fig = _new_figure(options, interactive=output_dir is None)
        fig.set_label(key)
        chart.render(series, fig, title=heading_for(key))
        if output_dir is not None:
            _save(fig, Path(output_dir) / f"{_slug(key)}.png", options.dpi)
        else:
            chart.connect()
        charts[key] = chart

    if output_dir is None and charts:
        import matplotlib.pyplot as plt

        plt.show()
    return charts


def chart_to_bytes(chart: BrushingChart, *, dpi: int | None = None) -> bytes:
    """PNG bytes of an already rendered chart at its current window."""
    if chart.figure is None:
        raise RuntimeError("Chart has not been rendered yet")
    buf = io.BytesIO()
    _save(chart.figure, buf, dpi or chart.options.dpi)
    buf.seek(0)
    return buf.read()


def plot_to_bytes(
    dataset: dict[str, Any],
    contributor: str = ALL_CONTRIBUTORS,
    *,
    options: ChartOptions | None = None,
    interaction: InteractionState | None = None,
) -> bytes:
    """Render one contributor's chart to PNG bytes (e.g. for serving in a web UI)."""
    buf = io.BytesIO()
    plot(dataset, contributor, buf, options=options, interaction=interaction)
    buf.seek(0)
    return buf.read()
