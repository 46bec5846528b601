"""
Focus + context area chart with a brush, drawn with matplotlib.

The mount is a matplotlib Figure. Both panes are axes whose data coordinates are pixels
(x in [0, w], y in [0, pane height]); our own linear scales map series values to pixels.
The context pane shows the whole series and a translucent selection window; the focus
pane shows only the points inside that window. Brush events redraw the focus pane only.
"""

import logging
from typing import Any

import numpy as np
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from productivity.errors import DomainDegenerateError
from productivity.series import Series, as_series
from visualization.interaction import BrushController, InteractionState
from visualization.options import (
    MARGIN_BOTTOM,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    MARGIN_TOP,
    PANE_GAP,
    TITLE_HEIGHT,
    ChartOptions,
    Dimensions,
)
from visualization.scale import LinearScale, make_linear_scale
from visualization.search import focus_bounds

logger = logging.getLogger(__name__)

AREA_FILL = "lightsteelblue"
LINE_STROKE = "steelblue"
X_RULE = "#eee"
Y_RULE = "#aaa"
ZERO_RULE = "#000"
BRUSH_FILL = (1.0, 128 / 255, 128 / 255, 0.4)
LABEL_SIZE = 8


def _pane(fig: Figure, rect: list[float], width: float, height: float) -> Any:
    """Axes with pixel data coordinates and no matplotlib axis decorations."""
    ax = fig.add_axes(rect)
    ax.set_xlim(0, width)
    ax.set_ylim(0, height)
    ax.set_axis_off()
    return ax


def _draw_x_rules(ax: Any, scale: LinearScale, count: int) -> list:
    """Vertical rules at the scale's ticks, labelled below the pane."""
    fmt = scale.tick_format(count)
    artists = []
    for tick in scale.ticks(count):
        px = scale(tick)
        artists.append(ax.axvline(px, color=X_RULE, linewidth=1, zorder=0))
        artists.append(
            ax.annotate(
                fmt(tick), (px, 0), xytext=(0, -3), textcoords="offset points",
                ha="center", va="top", fontsize=LABEL_SIZE, annotation_clip=False,
            )
        )
    return artists


def _draw_y_rules(ax: Any, scale: LinearScale, count: int) -> list:
    """Horizontal rules at the scale's ticks (zero rule in black), labelled on the left."""
    fmt = scale.tick_format(count)
    artists = []
    for tick in scale.ticks(count):
        py = scale(tick)
        color = Y_RULE if tick else ZERO_RULE
        artists.append(ax.axhline(py, color=color, linewidth=1, zorder=0))
        artists.append(
            ax.annotate(
                fmt(tick), (0, py), xytext=(-3, 0), textcoords="offset points",
                ha="right", va="center", fontsize=LABEL_SIZE, annotation_clip=False,
            )
        )
    return artists


def _draw_area(ax: Any, px: np.ndarray, py: np.ndarray) -> list:
    """Area starting 1px above the baseline with a line along its top."""
    fill = ax.fill_between(px, 1, 1 + py, color=AREA_FILL, linewidth=0)
    (line,) = ax.plot(px, 1 + py, color=LINE_STROKE, linewidth=2)
    return [fill, line]


class BrushingChart:
    """
    One interactive focus/context chart.

    The chart owns its InteractionState for its whole lifetime; render() keeps an existing
    window (clamped to the new width) so re-rendering does not reset the user's selection.
    """

    def __init__(
        self,
        options: ChartOptions | None = None,
        interaction: InteractionState | None = None,
    ):
        self.options = options or ChartOptions()
        self.interaction = interaction
        self.series: Series | None = None
        self.figure: Figure | None = None
        self.dimensions: Dimensions | None = None
        # context scales (x, y) and focus scales (fx, fy)
        self.x: LinearScale | None = None
        self.y: LinearScale | None = None
        self.fx: LinearScale | None = None
        self.fy: LinearScale | None = None
        self._focus_ax = None
        self._context_ax = None
        self._brush_rect: Rectangle | None = None
        self._focus_artists: list = []
        self._controller: BrushController | None = None
        self._canvas = None
        self._cids: list[int] = []

    @property
    def controller(self) -> BrushController:
        self._require_rendered()
        return self._controller

    def render(
        self,
        series: Any,
        mount: Figure,
        dimensions: Dimensions | None = None,
        *,
        title: str | None = None,
    ) -> Figure:
        """
        Draw the chart into mount (cleared first).

        Args:
            series: Series or iterable of {"x", "y"} points, sorted by x.
            mount: Figure to draw into.
            dimensions: Pane sizes; defaults to options.dimensions.
            title: Optional heading drawn above the focus pane.

        Raises:
            EmptySeriesError: No points.
            DomainDegenerateError: All points share one x value.
        """
        # Validate before touching the mount so a failed render leaves it as it was
        series = as_series(series)
        lo, hi = series.x_extent()
        if lo == hi:
            raise DomainDegenerateError(f"Series has a single x value ({lo}); cannot scale it")
        dims = dimensions or self.options.dimensions
        w, h1, h2 = dims.width, dims.focus_height, dims.context_height
        y_max = series.y_max()
        if y_max <= 0:
            y_max = 1.0

        if self.figure is not None and self.figure is not mount:
            self.disconnect()
        self.series = series
        self.figure = mount
        self.dimensions = dims
        self.x = make_linear_scale(lo, hi, 0, w)
        self.y = make_linear_scale(0, y_max, 0, h2)
        # focus domains are rebound on every focus redraw
        self.fx = make_linear_scale(lo, hi, 0, w)
        self.fy = make_linear_scale(0, y_max, 0, h1)

        if self.interaction is None:
            self.interaction = InteractionState(self.options.window_x, self.options.window_dx)
        self.interaction.clamp(w)
        if self._controller is None:
            self._controller = BrushController(self.interaction, w, on_change=self._on_brush)
        else:
            self._controller.state = self.interaction
            self._controller.width = float(w)

        self._layout(mount, dims, title)
        self._draw_context()
        self.redraw_focus()
        logger.debug("Rendered chart: %d points, x in [%s, %s]", len(series), lo, hi)
        return mount

    def _layout(self, fig: Figure, dims: Dimensions, title: str | None) -> None:
        w, h1, h2 = dims.width, dims.focus_height, dims.context_height
        top = MARGIN_TOP + (TITLE_HEIGHT if title else 0)
        total_w = MARGIN_LEFT + w + MARGIN_RIGHT
        total_h = top + h1 + PANE_GAP + h2 + MARGIN_BOTTOM

        fig.clear()
        fig.set_size_inches(total_w / fig.dpi, total_h / fig.dpi)
        left = MARGIN_LEFT / total_w
        width = w / total_w
        self._focus_ax = _pane(
            fig, [left, (MARGIN_BOTTOM + h2 + PANE_GAP) / total_h, width, h1 / total_h], w, h1
        )
        self._context_ax = _pane(fig, [left, MARGIN_BOTTOM / total_h, width, h2 / total_h], w, h2)
        if title:
            fig.suptitle(
                title, x=left, y=1 - MARGIN_TOP / total_h,
                ha="left", va="top", fontsize=14, fontweight="bold",
            )
        self._focus_artists = []

    def _draw_context(self) -> None:
        ax = self._context_ax
        _draw_x_rules(ax, self.x, self.options.x_ticks)
        ax.axhline(0, color=ZERO_RULE, linewidth=1)
        _draw_area(ax, self.x(self.series.x), self.y(self.series.y))
        state = self.interaction
        self._brush_rect = Rectangle(
            (state.x, 0), state.dx, self.dimensions.context_height,
            facecolor=BRUSH_FILL, edgecolor="none", zorder=3,
        )
        ax.add_patch(self._brush_rect)

    def focus_domain(self) -> tuple[float, float]:
        """Series x range under the selection window: (d1, d2), clamped, d1 <= d2."""
        self._require_rendered()
        lo, hi = self.x.domain
        state = self.interaction
        d1 = self.x.invert(state.x)
        d2 = self.x.invert(state.x + max(0.0, state.dx))
        d1, d2 = (min(hi, max(lo, d)) for d in (d1, d2))
        return (d1, d2) if d1 <= d2 else (d2, d1)

    def focus_series(self) -> Series:
        """
        Points drawn in the focus pane: the window's points plus one neighbour per side.

        Empty for a zero-width window, matching the empty focus pane.
        """
        d1, d2 = self.focus_domain()
        if d1 == d2:
            return self.series[0:0]
        start, stop = focus_bounds(self.series, d1, d2)
        return self.series[start:stop]

    def redraw_focus(self) -> None:
        """Redraw only the focus pane (and move the brush rectangle) from the current window."""
        self._require_rendered()
        for artist in self._focus_artists:
            artist.remove()
        self._focus_artists = []

        state = self.interaction
        self._brush_rect.set_x(state.x)
        self._brush_rect.set_width(state.dx)

        d1, d2 = self.focus_domain()
        self.fy = self.fy.with_domain(*self.y.domain)
        if d1 == d2:
            logger.debug("Zero-width window at %s; focus pane left empty", d1)
            return
        self.fx = self.fx.with_domain(d1, d2)
        visible = self.focus_series()

        ax = self._focus_ax
        artists = _draw_x_rules(ax, self.fx, self.options.x_ticks)
        artists += _draw_y_rules(ax, self.fy, self.options.y_ticks)
        if len(visible):
            artists += _draw_area(ax, self.fx(visible.x), self.fy(visible.y))
        self._focus_artists = artists
        logger.debug("Focus redraw: domain [%s, %s], %d points", d1, d2, len(visible))

    def set_window(self, x: float, dx: float) -> InteractionState:
        """Replace the selection window (clamped to the pane) and redraw the focus pane."""
        self._require_rendered()
        self.interaction.x = float(x)
        self.interaction.dx = float(dx)
        self.interaction.clamp(self.dimensions.width)
        self.redraw_focus()
        return self.interaction

    def connect(self, canvas: Any = None) -> None:
        """Route the canvas's mouse events on the context pane to the brush."""
        self._require_rendered()
        if self._cids:
            self.disconnect()
        canvas = canvas if canvas is not None else self.figure.canvas
        self._canvas = canvas
        self._cids = [
            canvas.mpl_connect("button_press_event", self._on_press),
            canvas.mpl_connect("motion_notify_event", self._on_motion),
            canvas.mpl_connect("button_release_event", self._on_release),
        ]

    def disconnect(self) -> None:
        if self._canvas is not None:
            for cid in self._cids:
                self._canvas.mpl_disconnect(cid)
        self._cids = []
        self._canvas = None

    def teardown(self) -> None:
        """Disconnect events and drop the chart's state."""
        self.disconnect()
        self.interaction = None
        self._controller = None
        self.series = None
        self.figure = None
        self._focus_ax = self._context_ax = self._brush_rect = None
        self._focus_artists = []

    def _event_px(self, event: Any) -> float:
        """Pointer x in context pixels, also when the pointer has left the pane."""
        if event.inaxes is self._context_ax and event.xdata is not None:
            return float(event.xdata)
        return float(self._context_ax.transData.inverted().transform((event.x, event.y))[0])

    def _on_press(self, event: Any) -> None:
        if event.inaxes is not self._context_ax or event.xdata is None or event.button != 1:
            return
        self._controller.on_pointer_down(float(event.xdata))

    def _on_motion(self, event: Any) -> None:
        if self._controller is None or not self._controller.active:
            return
        self._controller.on_pointer_move(self._event_px(event))

    def _on_release(self, event: Any) -> None:
        if self._controller is None or not self._controller.active:
            return
        self._controller.on_pointer_up(self._event_px(event))

    def _on_brush(self, state: InteractionState) -> None:
        self.redraw_focus()
        if self._canvas is not None:
            self._canvas.draw_idle()

    def _require_rendered(self) -> None:
        if self.series is None or self._controller is None:
            raise RuntimeError("Chart has not been rendered yet")
