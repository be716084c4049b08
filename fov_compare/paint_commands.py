"""Paint command types and the painter adapter interface used by the canvas."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from fov_compare.geometry import Rect, ViewportState

DEFAULT_LINE_WIDTH = 1.5


@dataclass(frozen=True)
class RenderedRect:
    """One field-of-view rectangle ready for drawing."""

    rect: Rect
    color: str
    bounds: Tuple[float, float, float, float]


class RectPainterAdapter:
    def clear(self, width: float, height: float) -> None: ...
    def set_pen(self, color: str, *, width: float) -> None: ...
    def draw_rect(self, x: float, y: float, width: float, height: float) -> None: ...


@dataclass(frozen=True)
class RectPaintCommand:
    color: str
    x: float
    y: float
    width: float
    height: float

    def paint(self, adapter: RectPainterAdapter, line_width: float) -> None:
        adapter.set_pen(self.color, width=line_width)
        adapter.draw_rect(self.x, self.y, self.width, self.height)


def build_paint_commands(
    rendered: Iterable[RenderedRect],
    *,
    trace: Optional[Callable[[str, Mapping[str, object]], None]] = None,
) -> List[RectPaintCommand]:
    """Turn rendered rectangles into paint commands, dropping non-finite ones."""

    commands: List[RectPaintCommand] = []
    for item in rendered:
        x, y, width, height = item.bounds
        if not all(math.isfinite(value) for value in (x, y, width, height)):
            if trace:
                trace("paint:skip_non_finite", {"color": item.color, "bounds": item.bounds})
            continue
        # Negative sizes come from negative focal lengths; draw the mirrored box.
        if width < 0:
            x, width = x + width, -width
        if height < 0:
            y, height = y + height, -height
        commands.append(RectPaintCommand(color=item.color, x=x, y=y, width=width, height=height))
    return commands


def paint_rectangles(
    adapter: RectPainterAdapter,
    rendered: Sequence[RenderedRect],
    viewport: ViewportState,
    *,
    line_width: float = DEFAULT_LINE_WIDTH,
    trace: Optional[Callable[[str, Mapping[str, object]], None]] = None,
) -> int:
    adapter.clear(viewport.width, viewport.height)
    commands = build_paint_commands(rendered, trace=trace)
    for command in commands:
        command.paint(adapter, line_width)
    return len(commands)
