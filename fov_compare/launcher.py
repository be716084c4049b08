from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from fov_compare.client_config import SETTINGS_FILENAME, ClientSettings, load_client_settings
from fov_compare.controller import FovController
from fov_compare.geometry import ViewportState
from fov_compare.logging_utils import LOGGER_NAME, configure_logging
from fov_compare.sensor_presets import load_preset_catalog
from fov_compare.settings_codec import encode

_LOGGER = logging.getLogger(LOGGER_NAME)

PRINT_VIEWPORT = ViewportState(width=800.0, height=600.0)


def resolve_settings_path(args_settings: Optional[str]) -> Path:
    if args_settings:
        return Path(args_settings).expanduser().resolve()
    return (Path.cwd() / SETTINGS_FILENAME).resolve()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compare camera fields of view")
    parser.add_argument("--url", default="", help="Settings URL or query string to load")
    parser.add_argument("--settings", help=f"Path to {SETTINGS_FILENAME}")
    parser.add_argument("--presets", help="Path to a JSON sensor preset catalog")
    parser.add_argument(
        "--print-query",
        action="store_true",
        help="Decode --url, print the canonical query and rectangles, then exit",
    )
    return parser


def print_summary(controller: FovController, out: TextIO) -> None:
    groups = list(reversed(controller.groups))
    out.write(encode(groups) + "\n")
    for group, rendered in zip(controller.groups, controller.render()):
        out.write(
            f"{rendered.color}: {group.focal_length:g}mm {group.orientation.value} "
            f"-> {rendered.rect.width:.1f} x {rendered.rect.height:.1f}\n"
        )


def _run_window(controller_factory, settings: ClientSettings, url: str) -> int:
    from PyQt6.QtWidgets import QApplication

    from fov_compare.window import FovWindow, copy_to_clipboard

    app = QApplication(sys.argv)
    window: List[FovWindow] = []
    controller = controller_factory(copy_to_clipboard, lambda message: window[0].notify(message))
    controller.load(url)
    window.append(FovWindow(controller, settings))
    window[0].show()
    exit_code = app.exec()
    _LOGGER.info("Window closed with code %s", exit_code)
    return int(exit_code)


def main(argv: Optional[List[str]] = None, *, out: TextIO = sys.stdout) -> int:
    args = build_parser().parse_args(argv)

    settings_path = resolve_settings_path(args.settings)
    settings = load_client_settings(settings_path)
    presets_path = Path(args.presets).expanduser() if args.presets else settings.presets_path
    catalog = load_preset_catalog(presets_path)

    def controller_factory(copy_fn, notify_fn) -> FovController:
        return FovController(catalog, base_url=settings.base_url, copy_fn=copy_fn, notify_fn=notify_fn)

    if args.print_query:
        controller = controller_factory(lambda _url: None, lambda _message: None)
        controller.load(args.url)
        controller.resize(PRINT_VIEWPORT.width, PRINT_VIEWPORT.height, compact=False)
        print_summary(controller, out)
        return 0

    configure_logging(debug_enabled=settings.debug, retention=settings.log_retention)
    _LOGGER.info("Starting fov-compare (pid=%s)", os.getpid())
    _LOGGER.debug("Loaded settings from %s: %s", settings_path, settings)
    _LOGGER.debug("Using %d sensor preset(s)", len(catalog))
    return _run_window(controller_factory, settings, args.url)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
