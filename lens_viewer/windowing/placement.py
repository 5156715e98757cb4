"""
New-window placement.

A new window is cascaded from the focused window by a fixed offset and
clamped so it stays inside the work area of that window's display. Without
a reference window it is centred in the work area.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_WINDOW_WIDTH = 1200
DEFAULT_WINDOW_HEIGHT = 800
DEFAULT_WINDOW_OFFSET = 30


@dataclass(frozen=True)
class Bounds:
    """Position and size of a window or display work area."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


def _clamp(value: int, low: int, high: int) -> int:
    # When the window is larger than the area, pin it to the area's origin
    if high < low:
        return low
    return max(low, min(value, high))


def center_in(work_area: Bounds, width: int, height: int) -> Bounds:
    """Centre a window of the given size in the work area, clamped to it."""
    x = work_area.x + (work_area.width - width) // 2
    y = work_area.y + (work_area.height - height) // 2
    return Bounds(
        _clamp(x, work_area.x, work_area.right - width),
        _clamp(y, work_area.y, work_area.bottom - height),
        width,
        height,
    )


def place_new_window(
    reference: Bounds | None,
    work_area: Bounds,
    width: int = DEFAULT_WINDOW_WIDTH,
    height: int = DEFAULT_WINDOW_HEIGHT,
    offset: int = DEFAULT_WINDOW_OFFSET,
) -> Bounds:
    """Compute bounds for a new window.

    Args:
        reference: Bounds of the focused window, or None if there is none.
        work_area: Work area of the display containing the reference window
            (or of the primary display when there is no reference).
        width: Width of the new window.
        height: Height of the new window.
        offset: Cascade offset applied to both axes.

    Returns:
        Bounds for the new window, fully inside the work area whenever the
        window fits.

    Examples:
        >>> area = Bounds(0, 0, 1920, 1080)
        >>> place_new_window(Bounds(100, 100, 1200, 800), area)
        Bounds(x=130, y=130, width=1200, height=800)
        >>> place_new_window(Bounds(700, 250, 1200, 800), area)
        Bounds(x=720, y=280, width=1200, height=800)
    """
    if reference is None:
        return center_in(work_area, width, height)

    x = reference.x + offset
    y = reference.y + offset
    return Bounds(
        _clamp(x, work_area.x, work_area.right - width),
        _clamp(y, work_area.y, work_area.bottom - height),
        width,
        height,
    )
