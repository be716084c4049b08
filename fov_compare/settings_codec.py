"""Shareable URL encoding of the control group list."""
from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Sequence, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fov_compare.control_group import ControlGroup, Orientation, resolve_sensor
from fov_compare.sensor_presets import SensorPreset

_LOGGER = logging.getLogger("FovCompare.Codec")

PARAM_FOCAL_LENGTH = "f"
PARAM_ORIENTATION = "o"
PARAM_SENSOR_WIDTH = "sw"
PARAM_SENSOR_HEIGHT = "sh"
PARAM_NAMES: Tuple[str, ...] = (
    PARAM_FOCAL_LENGTH,
    PARAM_ORIENTATION,
    PARAM_SENSOR_WIDTH,
    PARAM_SENSOR_HEIGHT,
)


class MalformedSettingsError(ValueError):
    """Raised internally when a query string cannot be turned into groups."""


def format_number(value: float) -> str:
    """Shortest decimal text that parses back to ``value`` exactly."""

    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _parse_number(raw: str, name: str, position: int) -> float:
    try:
        number = float(raw)
    except (TypeError, ValueError):
        raise MalformedSettingsError(f"{name}[{position}]={raw!r} is not a number") from None
    if not math.isfinite(number):
        raise MalformedSettingsError(f"{name}[{position}]={raw!r} is not finite")
    return number


def _parse_orientation(raw: str, position: int) -> Orientation:
    try:
        return Orientation.from_code(raw)
    except ValueError:
        raise MalformedSettingsError(f"{PARAM_ORIENTATION}[{position}]={raw!r} is not l/p") from None


def encode(groups: Iterable[ControlGroup]) -> str:
    """Serialize groups oldest-first; the i-th occurrence of each name is the i-th group."""

    pairs: List[Tuple[str, str]] = []
    for group in groups:
        sensor = resolve_sensor(group)
        pairs.append((PARAM_FOCAL_LENGTH, format_number(group.focal_length)))
        pairs.append((PARAM_ORIENTATION, group.orientation.code))
        pairs.append((PARAM_SENSOR_WIDTH, format_number(sensor.width)))
        pairs.append((PARAM_SENSOR_HEIGHT, format_number(sensor.height)))
    return urlencode(pairs)


def _collect(query: str) -> Dict[str, List[str]]:
    values: Dict[str, List[str]] = {name: [] for name in PARAM_NAMES}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        if key in values:
            values[key].append(value)
    return values


def _decode_strict(query: str, catalog: Sequence[SensorPreset]) -> List[ControlGroup]:
    values = _collect(query)
    counts = {name: len(items) for name, items in values.items()}
    if len(set(counts.values())) != 1:
        raise MalformedSettingsError(f"parameter counts differ: {counts}")
    groups: List[ControlGroup] = []
    for position in range(counts[PARAM_FOCAL_LENGTH]):
        focal_length = _parse_number(values[PARAM_FOCAL_LENGTH][position], PARAM_FOCAL_LENGTH, position)
        orientation = _parse_orientation(values[PARAM_ORIENTATION][position], position)
        width = _parse_number(values[PARAM_SENSOR_WIDTH][position], PARAM_SENSOR_WIDTH, position)
        height = _parse_number(values[PARAM_SENSOR_HEIGHT][position], PARAM_SENSOR_HEIGHT, position)
        groups.append(ControlGroup.from_dimensions(focal_length, orientation, width, height, catalog))
    return groups


def decode(query: str, catalog: Sequence[SensorPreset]) -> List[ControlGroup]:
    """Parse a query string back into uncolored groups, oldest-first.

    Any inconsistency (missing names, unequal counts, bad values) discards the
    whole query and returns an empty list.
    """

    if not query or not query.lstrip("?"):
        return []
    try:
        groups = _decode_strict(query, catalog)
    except MalformedSettingsError as exc:
        _LOGGER.debug("Ignoring URL settings: %s", exc)
        return []
    if not groups:
        _LOGGER.debug("Ignoring URL settings: no control group parameters in %r", query)
    return groups


def decode_url(url: str, catalog: Sequence[SensorPreset]) -> List[ControlGroup]:
    return decode(urlsplit(url).query, catalog)


def build_share_url(base_url: str, groups: Iterable[ControlGroup]) -> str:
    """Replace any query on ``base_url`` with the encoded groups."""

    parts = urlsplit(base_url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encode(groups), parts.fragment))
