"""Ordered control group collection and display color assignment."""
from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from fov_compare.control_group import ControlGroup, default_config
from fov_compare.sensor_presets import SensorPreset

PALETTE: Tuple[str, ...] = (
    "red",
    "yellow",
    "olive",
    "lime",
    "green",
    "aqua",
    "teal",
    "blue",
    "navy",
    "fuchsia",
    "purple",
)


def color_for_position(position: int, palette: Sequence[str] = PALETTE) -> str:
    return palette[position % len(palette)]


def add_group(
    groups: Sequence[ControlGroup],
    source: ControlGroup,
    palette: Sequence[str] = PALETTE,
) -> Tuple[ControlGroup, ...]:
    """Append a copy of ``source`` colored by the current list length.

    Colors of groups already in the list are never recomputed, so after a
    removal the new group may share a color with an older one.
    """

    created = ControlGroup.copy_settings(source, color=color_for_position(len(groups), palette))
    return tuple(groups) + (created,)


def remove_group(groups: Sequence[ControlGroup], index: int) -> Tuple[ControlGroup, ...]:
    items = list(groups)
    del items[index]
    return tuple(items)


def reset_groups(catalog: Sequence[SensorPreset], palette: Sequence[str] = PALETTE) -> Tuple[ControlGroup, ...]:
    return add_group((), default_config(catalog), palette)


class GroupList:
    """Mutable insertion-ordered list of control groups.

    Storage is oldest-first, which is also the URL serialization order.
    Display order is newest-first.
    """

    def __init__(self, catalog: Sequence[SensorPreset], palette: Sequence[str] = PALETTE) -> None:
        if not palette:
            raise ValueError("palette must contain at least one color")
        self._catalog = tuple(catalog)
        self._palette = tuple(palette)
        self._groups: Tuple[ControlGroup, ...] = ()

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[ControlGroup]:
        return iter(self._groups)

    @property
    def catalog(self) -> Tuple[SensorPreset, ...]:
        return self._catalog

    @property
    def palette(self) -> Tuple[str, ...]:
        return self._palette

    def oldest_first(self) -> List[ControlGroup]:
        return list(self._groups)

    def newest_first(self) -> List[ControlGroup]:
        return list(reversed(self._groups))

    def newest(self) -> Optional[ControlGroup]:
        return self._groups[-1] if self._groups else None

    def add(self) -> ControlGroup:
        """Add a group copying the newest group's settings, or the defaults."""

        source = self.newest()
        if source is None:
            source = default_config(self._catalog)
        return self.add_with_settings(source)

    def add_with_settings(self, settings: ControlGroup) -> ControlGroup:
        self._groups = add_group(self._groups, settings, self._palette)
        return self._groups[-1]

    def reset(self) -> ControlGroup:
        self._groups = reset_groups(self._catalog, self._palette)
        return self._groups[0]

    def clear(self) -> None:
        self._groups = ()

    def remove(self, display_index: int) -> ControlGroup:
        """Remove by newest-first index; the remaining order is preserved."""

        storage_index = self._storage_index(display_index)
        removed = self._groups[storage_index]
        self._groups = remove_group(self._groups, storage_index)
        return removed

    def replace(self, display_index: int, group: ControlGroup) -> ControlGroup:
        """Swap in edited settings while keeping the group's creation color."""

        storage_index = self._storage_index(display_index)
        current = self._groups[storage_index]
        updated = group.with_color(current.color)
        items = list(self._groups)
        items[storage_index] = updated
        self._groups = tuple(items)
        return updated

    def get(self, display_index: int) -> ControlGroup:
        return self._groups[self._storage_index(display_index)]

    def _storage_index(self, display_index: int) -> int:
        count = len(self._groups)
        if not 0 <= display_index < count:
            raise IndexError(f"group index {display_index} out of range for {count} groups")
        return count - 1 - display_index
