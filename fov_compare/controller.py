"""Single owner of the live control group list and the current viewport."""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, Callable, List, Optional, Sequence
from urllib.parse import urlsplit

from fov_compare.control_group import ControlGroup, shows_custom_fields
from fov_compare.geometry import ViewportState, compute_rectangle, fit_viewport, is_compact_width
from fov_compare.group_list import PALETTE, GroupList
from fov_compare.paint_commands import RenderedRect
from fov_compare.sensor_presets import SensorPreset
from fov_compare.settings_codec import build_share_url, decode

_LOGGER = logging.getLogger("FovCompare.Controller")

SHARE_SUCCESS_MESSAGE = "Copied the URL to these settings!"
SHARE_FAILURE_MESSAGE = "Could not copy the URL to the clipboard: {error}"

_NUMERIC_FIELDS = frozenset({"focal_length", "custom_width", "custom_height"})
_EDITABLE_FIELDS = frozenset(
    {"focal_length", "orientation", "sensor_selection", "custom_width", "custom_height"}
)


def coerce_number(value: Any) -> float:
    """Form values that are not numbers become NaN instead of failing later."""

    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


class FovController:
    """Handles UI events and recomputes what the canvas should draw.

    Widgets never hold business state: they read ``render()`` and
    ``custom_field_visibility()`` after each change notification and forward
    user actions to the event methods below.
    """

    def __init__(
        self,
        catalog: Sequence[SensorPreset],
        *,
        base_url: str,
        copy_fn: Callable[[str], None],
        notify_fn: Callable[[str], None],
        palette: Sequence[str] = PALETTE,
        viewport: Optional[ViewportState] = None,
    ) -> None:
        self._groups = GroupList(catalog, palette)
        self._base_url = base_url
        self._copy = copy_fn
        self._notify = notify_fn
        self._viewport = viewport or ViewportState(width=800.0, height=600.0)
        self._listeners: List[Callable[[], None]] = []

    @property
    def catalog(self) -> Sequence[SensorPreset]:
        return self._groups.catalog

    @property
    def viewport(self) -> ViewportState:
        return self._viewport

    @property
    def groups(self) -> List[ControlGroup]:
        """Groups in display order (newest first)."""
        return self._groups.newest_first()

    def add_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def _changed(self) -> None:
        for callback in list(self._listeners):
            callback()

    def load(self, url: str = "") -> int:
        """Seed the list from a URL or bare query string; one default group when empty."""

        query = urlsplit(url).query if "?" in url else url
        decoded = decode(query, self._groups.catalog)
        self._groups.clear()
        if decoded:
            for settings in decoded:
                self._groups.add_with_settings(settings)
            _LOGGER.info("Loaded %d control group(s) from URL", len(decoded))
        else:
            self._groups.add()
            _LOGGER.debug("No usable URL settings; seeded one default control group")
        self._changed()
        return len(self._groups)

    def add_group(self) -> ControlGroup:
        created = self._groups.add()
        _LOGGER.debug("Added control group #%d (%s)", len(self._groups), created.color)
        self._changed()
        return created

    def reset(self) -> ControlGroup:
        group = self._groups.reset()
        _LOGGER.debug("Reset control groups")
        self._changed()
        return group

    def remove_group(self, index: int) -> ControlGroup:
        removed = self._groups.remove(index)
        _LOGGER.debug("Removed control group at display index %d (%s)", index, removed.color)
        self._changed()
        return removed

    def update_group(self, index: int, **changes: Any) -> ControlGroup:
        """Apply form edits to the group at ``index`` (newest-first)."""

        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise TypeError(f"Unsupported control group fields: {sorted(unknown)}")
        for name in _NUMERIC_FIELDS.intersection(changes):
            changes[name] = coerce_number(changes[name])
        current = self._groups.get(index)
        updated = self._groups.replace(index, replace(current, **changes))
        self._changed()
        return updated

    def resize(self, container_width: float, container_height: float, *, compact: Optional[bool] = None) -> ViewportState:
        if compact is None:
            compact = is_compact_width(container_width)
        self._viewport = fit_viewport(container_width, container_height, compact=compact)
        self._changed()
        return self._viewport

    def render(self) -> List[RenderedRect]:
        rendered: List[RenderedRect] = []
        for group in self._groups.newest_first():
            rect = compute_rectangle(group, self._viewport)
            rendered.append(
                RenderedRect(rect=rect, color=group.color or PALETTE[0], bounds=rect.bounds_in(self._viewport))
            )
        return rendered

    def custom_field_visibility(self) -> List[bool]:
        return [shows_custom_fields(group) for group in self._groups.newest_first()]

    def share_url(self) -> str:
        return build_share_url(self._base_url, self._groups.oldest_first())

    def share(self) -> str:
        """Copy the settings URL to the clipboard and report the outcome."""

        url = self.share_url()
        try:
            self._copy(url)
        except Exception as exc:
            _LOGGER.warning("Clipboard write failed: %s", exc)
            self._notify(SHARE_FAILURE_MESSAGE.format(error=exc))
            return url
        _LOGGER.info("Copied settings URL with %d control group(s)", len(self._groups))
        self._notify(SHARE_SUCCESS_MESSAGE)
        return url
