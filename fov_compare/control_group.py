"""Control group records: one modeled camera configuration each."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Union

from fov_compare.sensor_presets import SensorPreset, SensorSize, match_preset

CUSTOM_SENSOR = "custom"

DEFAULT_FOCAL_LENGTH = 35.0
DEFAULT_CUSTOM_WIDTH = 36.0
DEFAULT_CUSTOM_HEIGHT = 24.0

SensorSelection = Union[str, SensorPreset]


class Orientation(str, Enum):
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"

    @property
    def code(self) -> str:
        return "p" if self is Orientation.PORTRAIT else "l"

    @classmethod
    def from_code(cls, code: str) -> "Orientation":
        token = (code or "").strip().lower()
        if token == "l":
            return cls.LANDSCAPE
        if token == "p":
            return cls.PORTRAIT
        raise ValueError(f"Unknown orientation code: {code!r}")


@dataclass(frozen=True)
class ControlGroup:
    """Editable camera settings plus the display color fixed at creation.

    ``sensor_selection`` is either the ``CUSTOM_SENSOR`` token or a catalog
    preset. The custom dimensions are kept even while a preset is selected so
    switching back to ``custom`` restores them.
    """

    focal_length: float
    orientation: Orientation
    sensor_selection: SensorSelection
    custom_width: float
    custom_height: float
    color: Optional[str] = None

    @property
    def is_custom(self) -> bool:
        return self.sensor_selection == CUSTOM_SENSOR

    @property
    def is_portrait(self) -> bool:
        return self.orientation is Orientation.PORTRAIT

    @classmethod
    def from_dimensions(
        cls,
        focal_length: float,
        orientation: Orientation,
        sensor_width: float,
        sensor_height: float,
        catalog: Sequence[SensorPreset],
    ) -> "ControlGroup":
        """Build a group from raw sensor millimeters, re-deriving the preset selection."""

        preset = match_preset(sensor_width, sensor_height, catalog)
        if preset is None:
            return cls(
                focal_length=focal_length,
                orientation=orientation,
                sensor_selection=CUSTOM_SENSOR,
                custom_width=sensor_width,
                custom_height=sensor_height,
            )
        defaults = default_config(catalog)
        return cls(
            focal_length=focal_length,
            orientation=orientation,
            sensor_selection=preset,
            custom_width=defaults.custom_width,
            custom_height=defaults.custom_height,
        )

    @classmethod
    def copy_settings(cls, source: "ControlGroup", color: Optional[str] = None) -> "ControlGroup":
        # The selection is taken as-is; an explicit custom choice stays custom.
        return replace(source, color=color)

    def with_color(self, color: Optional[str]) -> "ControlGroup":
        return replace(self, color=color)


def resolve_sensor(config: ControlGroup) -> SensorSize:
    """Effective sensor size in mm after resolving custom vs preset."""

    if config.is_custom:
        return SensorSize(width=config.custom_width, height=config.custom_height)
    selection = config.sensor_selection
    if isinstance(selection, SensorPreset):
        return selection.size
    raise ValueError(f"Unsupported sensor selection: {selection!r}")


def oriented_sensor(config: ControlGroup) -> SensorSize:
    sensor = resolve_sensor(config)
    if config.is_portrait:
        return sensor.swapped()
    return sensor


def shows_custom_fields(config: ControlGroup) -> bool:
    return config.is_custom


def default_config(catalog: Sequence[SensorPreset]) -> ControlGroup:
    """Seed configuration used when the group list is empty."""

    selection: SensorSelection = catalog[0] if catalog else CUSTOM_SENSOR
    return ControlGroup(
        focal_length=DEFAULT_FOCAL_LENGTH,
        orientation=Orientation.LANDSCAPE,
        sensor_selection=selection,
        custom_width=DEFAULT_CUSTOM_WIDTH,
        custom_height=DEFAULT_CUSTOM_HEIGHT,
    )
