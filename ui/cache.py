"""
In-memory cache for rendered chart snapshots, one instance per app.
Holds only the latest snapshot per contributor: key (window x, window dx), value PNG bytes.
"""

from typing import Callable


def _make_key(x: float, dx: float) -> tuple[float, float]:
    """Build cache key from the selection window."""
    return (round(float(x), 3), round(float(dx), 3))


class SnapshotCache:
    """Latest PNG per contributor; a new window position replaces the old snapshot."""

    def __init__(self):
        self._store: dict[str, tuple[tuple[float, float], bytes]] = {}

    def __len__(self) -> int:
        return len(self._store)

    def get_or_render(
        self,
        contributor: str,
        x: float,
        dx: float,
        renderer: Callable[[], bytes],
    ) -> bytes:
        """
        Return the PNG from cache if the window is unchanged; otherwise call renderer(),
        store it as the contributor's snapshot, and return it.

        Args:
            contributor: Dataset key of the chart.
            x: Selection window offset in pixels.
            dx: Selection window width in pixels.
            renderer: No-arg callable that returns the PNG bytes for that window.
        """
        key = _make_key(x, dx)
        cached = self._store.get(contributor)
        if cached is not None and cached[0] == key:
            return cached[1]
        value = renderer()
        self._store[contributor] = (key, value)
        return value

    def clear(self) -> None:
        """Drop every snapshot (e.g. after the dataset changes)."""
        self._store.clear()
