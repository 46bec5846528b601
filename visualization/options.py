"""
Chart sizing and interaction defaults.
Overrides come from environment variables (CODUCTIVITY_*), with .env loaded from the project root.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# visualization/options.py -> parent.parent = project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

logger = logging.getLogger(__name__)

# Root panel margins and the gap between focus and context panes, in pixels
MARGIN_LEFT = 50
MARGIN_RIGHT = 20
MARGIN_TOP = 5
MARGIN_BOTTOM = 20
PANE_GAP = 20
TITLE_HEIGHT = 30


@dataclass(frozen=True)
class Dimensions:
    """Pixel sizes: context/focus width w, focus height h1, context height h2."""

    width: int = 1024
    focus_height: int = 500
    context_height: int = 30

    def __post_init__(self):
        for name in ("width", "focus_height", "context_height"):
            if getattr(self, name) <= 0:
                raise ValueError(f"Dimensions.{name} must be positive, got {getattr(self, name)}")


@dataclass(frozen=True)
class ChartOptions:
    """Everything that used to differ between hand-copied chart setups."""

    dimensions: Dimensions = field(default_factory=Dimensions)
    y_ticks: int = 10
    x_ticks: int = 10
    window_x: float = 200.0
    window_dx: float = 100.0
    dpi: int = 100


_ENV_FIELDS = {
    "CODUCTIVITY_WIDTH": ("dimensions", "width", int),
    "CODUCTIVITY_FOCUS_HEIGHT": ("dimensions", "focus_height", int),
    "CODUCTIVITY_CONTEXT_HEIGHT": ("dimensions", "context_height", int),
    "CODUCTIVITY_Y_TICKS": (None, "y_ticks", int),
    "CODUCTIVITY_X_TICKS": (None, "x_ticks", int),
    "CODUCTIVITY_WINDOW_X": (None, "window_x", float),
    "CODUCTIVITY_WINDOW_DX": (None, "window_dx", float),
    "CODUCTIVITY_DPI": (None, "dpi", int),
}


def load_options(environ: dict[str, str] | None = None) -> ChartOptions:
    """
    Build ChartOptions from defaults plus CODUCTIVITY_* environment overrides.

    Args:
        environ: Mapping to read instead of os.environ (e.g. for tests).

    Raises:
        ValueError: A variable is set but not a valid number.
    """
    env = os.environ if environ is None else environ
    dims: dict[str, int] = {}
    top: dict[str, float | int] = {}
    for var, (group, name, cast) in _ENV_FIELDS.items():
        raw = (env.get(var) or "").strip()
        if not raw:
            continue
        try:
            value = cast(raw)
        except ValueError as e:
            raise ValueError(f"{var} must be a {cast.__name__}, got {raw!r}") from e
        (dims if group == "dimensions" else top)[name] = value
    if dims or top:
        logger.info("Chart options from environment: %s", {**dims, **top})
    return ChartOptions(dimensions=Dimensions(**dims), **top)
