"""
Linear scales mapping a numeric domain to a pixel range, with inverse and "nice" ticks.
Tick steps follow the protovis/d3 rule: 1, 2 or 5 times a power of ten.
"""

import math
from dataclasses import dataclass, replace
from typing import Callable, Iterator

from productivity.errors import DomainDegenerateError


def _tick_step(lo: float, hi: float, count: int) -> float:
    """Step between ticks for [lo, hi] aiming at about `count` ticks."""
    span = hi - lo
    step = 10.0 ** math.floor(math.log10(span / count))
    err = count / span * step
    if err <= 0.15:
        step *= 10
    elif err <= 0.35:
        step *= 5
    elif err <= 0.75:
        step *= 2
    return step


def _precision(step: float) -> int:
    """Fraction digits needed to print multiples of step."""
    return max(0, -math.floor(math.log10(step) + 0.01))


class TickSequence:
    """
    Finite, restartable sequence of tick values.

    Values are computed on iteration; iterating twice yields the same ticks.
    """

    def __init__(self, first: int, last: int, step: float, only: float | None = None):
        self._first = first
        self._last = last
        self._step = step
        self._only = only
        self._digits = _precision(step) if step > 0 else 0

    @classmethod
    def single(cls, value: float) -> "TickSequence":
        """One tick at value (degenerate domain)."""
        return cls(0, -1, 0.0, only=value)

    @property
    def step(self) -> float:
        return self._step

    def __len__(self) -> int:
        if self._step == 0:
            return 0 if self._only is None else 1
        return max(0, self._last - self._first + 1)

    def __iter__(self) -> Iterator[float]:
        if self._step == 0:
            if self._only is not None:
                yield self._only
            return
        for i in range(self._first, self._last + 1):
            # round away float noise like 0.30000000000000004
            yield round(i * self._step, self._digits)

    def __repr__(self) -> str:
        return f"TickSequence({list(self)!r})"


_EMPTY_TICKS = TickSequence(0, -1, 0.0)


@dataclass(frozen=True)
class LinearScale:
    """
    Linear interpolation between [domain_min, domain_max] and [range_min, range_max].

    Instances are values: with_domain/with_range return new scales.
    apply() extrapolates outside the domain; it works on floats and numpy arrays.
    """

    domain_min: float = 0.0
    domain_max: float = 1.0
    range_min: float = 0.0
    range_max: float = 1.0

    @property
    def domain(self) -> tuple[float, float]:
        return (self.domain_min, self.domain_max)

    @property
    def range(self) -> tuple[float, float]:
        return (self.range_min, self.range_max)

    def with_domain(self, domain_min: float, domain_max: float) -> "LinearScale":
        return replace(self, domain_min=float(domain_min), domain_max=float(domain_max))

    def with_range(self, range_min: float, range_max: float) -> "LinearScale":
        return replace(self, range_min=float(range_min), range_max=float(range_max))

    def apply(self, value):
        span = self.domain_max - self.domain_min
        if span == 0:
            raise DomainDegenerateError(
                f"Scale domain is degenerate ({self.domain_min} == {self.domain_max})"
            )
        return self.range_min + (value - self.domain_min) / span * (self.range_max - self.range_min)

    __call__ = apply

    def invert(self, pixel):
        span = self.range_max - self.range_min
        if span == 0:
            raise DomainDegenerateError(
                f"Scale range is degenerate ({self.range_min} == {self.range_max})"
            )
        return self.domain_min + (pixel - self.range_min) / span * (self.domain_max - self.domain_min)

    def ticks(self, count: int = 10) -> TickSequence:
        """
        Nice tick values inside the domain.

        Args:
            count: Approximate number of ticks wanted (a hint, not a guarantee).

        Returns:
            TickSequence in ascending order. A degenerate domain yields just its value;
            count <= 0 yields no ticks.
        """
        if count <= 0:
            return _EMPTY_TICKS
        lo, hi = sorted(self.domain)
        if lo == hi:
            return TickSequence.single(lo)
        step = _tick_step(lo, hi, count)
        return TickSequence(math.ceil(lo / step), math.floor(hi / step), step)

    def tick_format(self, count: int = 10) -> Callable[[float], str]:
        """Formatter for ticks(count): fixed fraction digits matching the tick step."""
        step = self.ticks(count).step
        digits = _precision(step) if step > 0 else 0

        def fmt(value: float) -> str:
            return f"{value:.{digits}f}"

        return fmt


def make_linear_scale(
    domain_min: float,
    domain_max: float,
    range_min: float,
    range_max: float,
) -> LinearScale:
    """Build a LinearScale from domain and range bounds."""
    return LinearScale(float(domain_min), float(domain_max), float(range_min), float(range_max))
