"""Focus/context chart rendering and brush synchronization."""

import pytest
from matplotlib.backend_bases import MouseEvent
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from pytest import approx

from productivity.errors import DomainDegenerateError, EmptySeriesError
from visualization.brushing import BrushingChart
from visualization.interaction import InteractionState
from visualization.options import ChartOptions, Dimensions


def _render(points, options, interaction=None):
    chart = BrushingChart(options, interaction)
    fig = Figure(dpi=options.dpi)
    FigureCanvasAgg(fig)
    chart.render(points, fig)
    return chart, fig


def _focus_snapshot(chart):
    ax = chart._focus_ax
    return (
        [line.get_xydata().tolist() for line in ax.lines],
        [text.get_text() for text in ax.texts],
        len(ax.collections),
    )


def test_context_scale_spans_pane(three_points, small_options) -> None:
    chart, _ = _render(three_points, small_options)

    assert chart.x(0) == 0
    assert chart.x(20) == 100
    assert chart.x(10) == 50
    assert chart.y.domain == (0.0, 5.0)
    assert chart.y.range == (0.0, 10.0)


def test_window_selects_focus_domain_and_padded_slice(three_points, small_options) -> None:
    chart, _ = _render(three_points, small_options)

    chart.set_window(0, 50)

    assert chart.focus_domain() == (0.0, 10.0)
    assert chart.focus_series().x.tolist() == [0.0, 10.0, 20.0]
    assert chart.fx.domain == (0.0, 10.0)
    assert chart.fy.domain == chart.y.domain


def test_focus_scale_rebinding_leaves_context_scale_alone(three_points, small_options) -> None:
    chart, _ = _render(three_points, small_options)

    chart.set_window(25, 25)

    assert chart.x.domain == (0.0, 20.0)
    assert chart.fx.domain == approx((5.0, 10.0))


def test_default_window_is_clamped_to_narrow_pane(three_points, small_options) -> None:
    chart, _ = _render(three_points, small_options)

    assert (chart.interaction.x, chart.interaction.dx) == (0.0, 100.0)


def test_default_window_on_wide_pane() -> None:
    points = [{"x": i, "y": i % 7} for i in range(200)]
    chart, fig = _render(points, ChartOptions())

    assert (chart.interaction.x, chart.interaction.dx) == (200.0, 100.0)
    assert fig.get_size_inches() * fig.dpi == approx((1094, 575))


def test_empty_series_raises_without_touching_mount(small_options) -> None:
    chart = BrushingChart(small_options)
    fig = Figure()

    with pytest.raises(EmptySeriesError):
        chart.render([], fig)

    assert fig.axes == []
    assert chart.series is None


def test_single_point_series_raises_degenerate_domain(small_options) -> None:
    chart = BrushingChart(small_options)
    fig = Figure()

    with pytest.raises(DomainDegenerateError):
        chart.render([{"x": 5, "y": 3}], fig)

    assert fig.axes == []


def test_all_zero_series_still_renders(small_options) -> None:
    chart, _ = _render([(0, 0), (10, 0)], small_options)

    assert chart.y.domain == (0.0, 1.0)


def test_render_twice_gives_identical_output(three_points, small_options) -> None:
    chart, fig = _render(three_points, small_options)
    chart.set_window(10, 40)
    first = _focus_snapshot(chart)
    first_axes = len(fig.axes)

    chart.render(three_points, fig)

    assert len(fig.axes) == first_axes == 2
    assert _focus_snapshot(chart) == first
    assert (chart.interaction.x, chart.interaction.dx) == (10.0, 40.0)


def test_focus_redraw_does_not_accumulate_artists(three_points, small_options) -> None:
    chart, _ = _render(three_points, small_options)
    chart.set_window(10, 40)
    expected = _focus_snapshot(chart)

    for x in (0, 30, 60, 10):
        chart.set_window(x, 40)

    assert _focus_snapshot(chart) == expected


def test_drag_then_release_sets_window_and_focus_domain(small_options) -> None:
    points = [{"x": i * 5, "y": i} for i in range(21)]
    chart, _ = _render(points, small_options, InteractionState(20, 30))

    brush = chart.controller
    brush.on_pointer_down(25)
    brush.on_pointer_move(45)
    brush.on_pointer_up(55)

    state = chart.interaction
    assert (state.x, state.dx) == (50.0, 30.0)
    assert chart.focus_domain() == approx((chart.x.invert(50), chart.x.invert(80)))
    assert chart._brush_rect.get_x() == 50.0
    assert chart._brush_rect.get_width() == 30.0


def test_zero_width_window_leaves_focus_empty(three_points, small_options) -> None:
    chart, _ = _render(three_points, small_options)

    chart.set_window(30, 0)

    d1, d2 = chart.focus_domain()
    assert d1 == d2
    assert len(chart._focus_ax.lines) == 0
    assert len(chart._focus_ax.texts) == 0
    assert len(chart.focus_series()) == 0


def test_title_is_drawn_above_focus(three_points, small_options) -> None:
    chart = BrushingChart(small_options)
    fig = Figure(dpi=small_options.dpi)

    chart.render(three_points, fig, title="All Productivity")

    assert fig.get_suptitle() == "All Productivity"
    assert fig.get_size_inches()[1] * fig.dpi == approx(5 + 30 + 50 + 20 + 10 + 20)


def test_render_accepts_dimensions_override(three_points, small_options) -> None:
    chart = BrushingChart(small_options)
    fig = Figure(dpi=100)

    chart.render(three_points, fig, Dimensions(width=200, focus_height=40, context_height=20))

    assert chart.x.range == (0.0, 200.0)
    assert chart.fy.range == (0.0, 40.0)


def test_methods_before_render_raise() -> None:
    chart = BrushingChart()

    with pytest.raises(RuntimeError):
        chart.redraw_focus()


def test_teardown_discards_state(three_points, small_options) -> None:
    chart, _ = _render(three_points, small_options)
    chart.connect()

    chart.teardown()

    assert chart.interaction is None
    with pytest.raises(RuntimeError):
        chart.focus_domain()


def test_mouse_events_drive_the_brush(small_options) -> None:
    points = [{"x": i * 5, "y": i} for i in range(21)]
    chart, fig = _render(points, small_options, InteractionState(20, 30))
    chart.connect()
    to_display = chart._context_ax.transData.transform

    def send(name, px, button=1):
        x, y = to_display((px, 5))
        event = MouseEvent(name, fig.canvas, x, y, button=button)
        fig.canvas.callbacks.process(name, event)

    send("button_press_event", 70)
    send("motion_notify_event", 90)
    send("button_release_event", 90)

    assert chart.interaction.x == approx(70.0)
    assert chart.interaction.dx == approx(20.0)
    assert chart.focus_domain() == approx((70.0, 90.0))
