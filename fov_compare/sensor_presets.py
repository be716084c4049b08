"""Catalog of named sensor sizes offered in the sensor drop-down."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple

_LOGGER = logging.getLogger("FovCompare.Presets")


@dataclass(frozen=True)
class SensorSize:
    width: float
    height: float

    def swapped(self) -> "SensorSize":
        return SensorSize(width=self.height, height=self.width)


@dataclass(frozen=True)
class SensorPreset:
    """Named sensor size; equality and hashing only look at the dimensions."""

    width: float
    height: float
    name: str = field(default="", compare=False)

    @property
    def size(self) -> SensorSize:
        return SensorSize(width=self.width, height=self.height)

    @property
    def label(self) -> str:
        dims = f"{_format_mm(self.width)} x {_format_mm(self.height)} mm"
        return f"{self.name} ({dims})" if self.name else dims


def _format_mm(value: float) -> str:
    return f"{value:g}"


# First entry is the home preset used by the built-in default configuration.
DEFAULT_PRESETS: Tuple[SensorPreset, ...] = (
    SensorPreset(36.0, 24.0, "Full frame"),
    SensorPreset(43.8, 32.9, "Medium format 44x33"),
    SensorPreset(28.7, 19.0, "APS-H"),
    SensorPreset(23.5, 15.6, "APS-C"),
    SensorPreset(22.3, 14.9, "APS-C (Canon)"),
    SensorPreset(17.3, 13.0, "Four Thirds"),
    SensorPreset(13.2, 8.8, '1"'),
    SensorPreset(7.6, 5.7, '1/1.7"'),
    SensorPreset(6.17, 4.55, '1/2.3"'),
)


def match_preset(width: float, height: float, catalog: Iterable[SensorPreset]) -> Optional[SensorPreset]:
    """Return the first preset whose dimensions equal (width, height) exactly."""

    for preset in catalog:
        if preset.width == width and preset.height == height:
            return preset
    return None


def _coerce_dimension(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0.0:
        return None
    return number


def _parse_entry(entry: Any) -> Optional[SensorPreset]:
    if not isinstance(entry, dict):
        return None
    width = _coerce_dimension(entry.get("width"))
    height = _coerce_dimension(entry.get("height"))
    if width is None or height is None:
        return None
    name = entry.get("name")
    return SensorPreset(width=width, height=height, name=str(name).strip() if name is not None else "")


def parse_preset_entries(entries: Sequence[Any]) -> Tuple[SensorPreset, ...]:
    presets: List[SensorPreset] = []
    for index, entry in enumerate(entries):
        preset = _parse_entry(entry)
        if preset is None:
            _LOGGER.debug("Skipping malformed sensor preset entry #%d: %r", index, entry)
            continue
        presets.append(preset)
    return tuple(presets)


def load_preset_catalog(path: Optional[Path]) -> Tuple[SensorPreset, ...]:
    """Read a JSON list of {name, width, height} records, falling back to DEFAULT_PRESETS."""

    if path is None:
        return DEFAULT_PRESETS
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        _LOGGER.debug("Preset catalog %s not found; using built-in presets", path)
        return DEFAULT_PRESETS
    except (OSError, json.JSONDecodeError) as exc:
        _LOGGER.debug("Failed to load preset catalog %s: %s", path, exc)
        return DEFAULT_PRESETS
    if isinstance(raw, dict):
        raw = raw.get("presets")
    if not isinstance(raw, list):
        _LOGGER.debug("Preset catalog %s has no preset list; using built-in presets", path)
        return DEFAULT_PRESETS
    presets = parse_preset_entries(raw)
    if not presets:
        return DEFAULT_PRESETS
    return presets
