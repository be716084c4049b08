from __future__ import annotations

import math

import pytest

from fov_compare.control_group import CUSTOM_SENSOR, Orientation, default_config
from fov_compare.controller import SHARE_SUCCESS_MESSAGE, FovController
from fov_compare.geometry import ViewportState


class _StubClipboard:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[str] = []
        self._error = error

    def __call__(self, text: str) -> None:
        self.calls.append(text)
        if self._error is not None:
            raise self._error


@pytest.fixture
def notifications():
    return []


def _controller(catalog, notifications, clipboard=None) -> FovController:
    return FovController(
        catalog,
        base_url="https://example.org/fov/",
        copy_fn=clipboard or _StubClipboard(),
        notify_fn=notifications.append,
    )


def test_load_without_query_seeds_one_default_group(catalog, notifications):
    controller = _controller(catalog, notifications)
    assert controller.load("") == 1
    assert controller.groups == [default_config(catalog).with_color("red")]


def test_load_malformed_query_falls_back_to_default(catalog, notifications):
    controller = _controller(catalog, notifications)
    controller.load("https://example.org/fov/?f=50&f=35&o=l&o=p&sw=36&sh=24&sh=24")
    assert len(controller.groups) == 1
    assert controller.groups[0].focal_length == default_config(catalog).focal_length
    assert notifications == []


def test_load_url_assigns_colors_in_insertion_order(catalog, notifications):
    controller = _controller(catalog, notifications)
    controller.load("https://example.org/fov/?f=50&f=35&o=l&o=p&sw=36&sw=23.5&sh=24&sh=15.6")
    # Display order is newest first.
    assert [(g.focal_length, g.color) for g in controller.groups] == [(35.0, "yellow"), (50.0, "red")]


def test_load_accepts_url_without_scheme(catalog, notifications):
    controller = _controller(catalog, notifications)
    assert controller.load("example.org/fov/?f=85&o=p&sw=20&sh=10") == 1
    group = controller.groups[0]
    assert group.focal_length == 85.0
    assert group.orientation is Orientation.PORTRAIT
    assert group.sensor_selection == CUSTOM_SENSOR


def test_add_group_copies_newest_and_notifies_listeners(catalog, notifications):
    controller = _controller(catalog, notifications)
    changes = []
    controller.add_listener(lambda: changes.append(len(controller.groups)))
    controller.load("f=85&o=p&sw=20&sh=10")
    created = controller.add_group()

    assert created.focal_length == 85.0
    assert created.orientation is Orientation.PORTRAIT
    assert created.is_custom
    assert changes == [1, 2]


def test_update_group_recomputes_render(catalog, notifications):
    controller = _controller(catalog, notifications)
    controller.load("")
    before = controller.render()[0].rect
    controller.update_group(0, focal_length=controller.groups[0].focal_length * 2)
    after = controller.render()[0].rect
    assert after.width == pytest.approx(before.width / 2)
    assert controller.groups[0].color == "red"


def test_update_group_rejects_unknown_fields(catalog, notifications):
    controller = _controller(catalog, notifications)
    controller.load("")
    with pytest.raises(TypeError):
        controller.update_group(0, color="blue")


def test_update_group_turns_non_numeric_values_into_nan(catalog, notifications):
    controller = _controller(catalog, notifications)
    controller.load("")
    controller.update_group(0, focal_length="abc")
    assert math.isnan(controller.groups[0].focal_length)
    assert not controller.render()[0].rect.is_finite()

    controller.update_group(0, focal_length="85", sensor_selection=CUSTOM_SENSOR, custom_width=None)
    assert controller.groups[0].focal_length == 85.0
    rect = controller.render()[0].rect
    assert math.isnan(rect.width)
    assert math.isfinite(rect.height)
    assert "sw=nan" in controller.share()


def test_custom_field_visibility_follows_selection(catalog, notifications):
    controller = _controller(catalog, notifications)
    controller.load("")
    assert controller.custom_field_visibility() == [False]
    controller.update_group(0, sensor_selection=CUSTOM_SENSOR)
    assert controller.custom_field_visibility() == [True]


def test_render_returns_display_order_with_centered_bounds(catalog, notifications):
    controller = _controller(catalog, notifications)
    controller.load("f=10&o=l&sw=36&sh=24&f=100&o=l&sw=36&sh=24")
    controller.resize(1600, 600, compact=False)
    assert controller.viewport == ViewportState(800.0, 600.0)

    rendered = controller.render()
    assert [item.color for item in rendered] == ["yellow", "red"]
    x, y, width, height = rendered[0].bounds
    assert x + width / 2 == pytest.approx(400.0)
    assert y + height / 2 == pytest.approx(300.0)


def test_render_keeps_non_finite_geometry(catalog, notifications):
    controller = _controller(catalog, notifications)
    controller.load("")
    controller.update_group(0, focal_length=0.0)
    rect = controller.render()[0].rect
    assert math.isinf(rect.width)


def test_reset_and_remove(catalog, notifications):
    controller = _controller(catalog, notifications)
    controller.load("")
    controller.add_group()
    controller.add_group()
    controller.remove_group(0)
    assert [g.color for g in controller.groups] == ["yellow", "red"]
    controller.reset()
    assert [g.color for g in controller.groups] == ["red"]


def test_share_copies_url_oldest_first(catalog, notifications):
    clipboard = _StubClipboard()
    controller = _controller(catalog, notifications, clipboard)
    controller.load("f=50&f=35&o=l&o=p&sw=36&sw=23.5&sh=24&sh=15.6")

    url = controller.share()

    assert url == "https://example.org/fov/?f=50&o=l&sw=36&sh=24&f=35&o=p&sw=23.5&sh=15.6"
    assert clipboard.calls == [url]
    assert notifications == [SHARE_SUCCESS_MESSAGE]


def test_share_surfaces_clipboard_failure(catalog, notifications):
    clipboard = _StubClipboard(error=RuntimeError("clipboard locked"))
    controller = _controller(catalog, notifications, clipboard)
    controller.load("")

    url = controller.share()

    assert clipboard.calls == [url]
    assert len(notifications) == 1
    assert "clipboard locked" in notifications[0]
