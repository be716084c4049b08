"""Field-of-view rectangle math decoupled from Qt widgets."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from fov_compare.control_group import ControlGroup, oriented_sensor

# A 17.3 x 13 mm sensor behind a 6.5 mm lens fills the viewport exactly.
REFERENCE_SENSOR_WIDTH = 17.3
REFERENCE_SENSOR_HEIGHT = 13.0
REFERENCE_FOCAL_LENGTH = 6.5

ASPECT_WIDTH = 4.0
ASPECT_HEIGHT = 3.0
COMPACT_BREAKPOINT = 1000.0


@dataclass(frozen=True)
class ViewportState:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    width: float
    height: float

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.width) and math.isfinite(self.height)

    def bounds_in(self, viewport: ViewportState) -> Tuple[float, float, float, float]:
        return centered_bounds(self, viewport)


def viewport_center(viewport: ViewportState) -> Tuple[float, float]:
    return viewport.width / 2.0, viewport.height / 2.0


def _ratio(numerator: float, denominator: float) -> float:
    # IEEE semantics: a zero focal length yields inf/nan instead of raising.
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0.0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def compute_rectangle(config: ControlGroup, viewport: ViewportState) -> Rect:
    """Size of the field-of-view rectangle for ``config`` inside ``viewport``.

    The rectangle shrinks as the focal length grows. Portrait orientation
    swaps the sensor dimensions before scaling. No clamping is applied, so a
    non-positive focal length produces non-finite or negative sizes.
    """

    sensor = oriented_sensor(config)
    focal_length = float(config.focal_length)
    width = viewport.width * _ratio(
        sensor.width * REFERENCE_FOCAL_LENGTH,
        REFERENCE_SENSOR_WIDTH * focal_length,
    )
    height = viewport.height * _ratio(
        sensor.height * REFERENCE_FOCAL_LENGTH,
        REFERENCE_SENSOR_HEIGHT * focal_length,
    )
    return Rect(width=width, height=height)


def centered_bounds(rect: Rect, viewport: ViewportState) -> Tuple[float, float, float, float]:
    """Return (x, y, width, height) with ``rect`` centered in the viewport."""

    center_x, center_y = viewport_center(viewport)
    return (
        center_x - rect.width / 2.0,
        center_y - rect.height / 2.0,
        rect.width,
        rect.height,
    )


def fit_viewport(container_width: float, container_height: float, *, compact: bool) -> ViewportState:
    """Largest 4:3 canvas for the container.

    In compact mode the canvas spans the full container width and the height
    follows from the aspect ratio.
    """

    width = max(0.0, float(container_width))
    height = max(0.0, float(container_height))
    if compact:
        return ViewportState(width=width, height=width * ASPECT_HEIGHT / ASPECT_WIDTH)
    return ViewportState(
        width=min(width, height * ASPECT_WIDTH / ASPECT_HEIGHT),
        height=min(height, width * ASPECT_HEIGHT / ASPECT_WIDTH),
    )


def is_compact_width(container_width: float) -> bool:
    return container_width <= COMPACT_BREAKPOINT
