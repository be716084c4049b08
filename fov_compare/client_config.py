"""Configuration helpers for the field-of-view comparison window."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

SETTINGS_FILENAME = "fov_settings.json"
BASE_URL_ENV_VAR = "FOV_COMPARE_BASE_URL"
DEBUG_ENV_VAR = "FOV_COMPARE_DEBUG"
LOG_RETENTION_MIN = 1
LOG_RETENTION_MAX = 20

_LOGGER = logging.getLogger("FovCompare.Config")


@dataclass(frozen=True)
class ClientSettings:
    """Values read at startup from fov_settings.json and the environment."""

    base_url: str = "https://fov-compare.local/"
    log_retention: int = 5
    debug: bool = False
    line_width: float = 1.5
    presets_path: Optional[Path] = None
    window_width: int = 1200
    window_height: int = 720


def _truthy(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    token = value.strip().lower()
    if token in {"1", "true", "yes", "on"}:
        return True
    if token in {"0", "false", "no", "off"}:
        return False
    return None


def _coerce_retention(value: Any, fallback: int) -> int:
    try:
        numeric = int(value)
    except (TypeError, ValueError):
        return fallback
    return max(LOG_RETENTION_MIN, min(LOG_RETENTION_MAX, numeric))


def _coerce_positive_float(value: Any, fallback: float) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return fallback
    return numeric if numeric > 0 else fallback


def _coerce_positive_int(value: Any, fallback: int) -> int:
    try:
        numeric = int(value)
    except (TypeError, ValueError):
        return fallback
    return numeric if numeric > 0 else fallback


def settings_from_mapping(data: Mapping[str, Any], *, base_dir: Optional[Path] = None) -> ClientSettings:
    defaults = ClientSettings()
    base_url = data.get("base_url")
    presets_raw = data.get("presets_path")
    presets_path: Optional[Path] = None
    if isinstance(presets_raw, str) and presets_raw.strip():
        presets_path = Path(presets_raw.strip()).expanduser()
        if base_dir is not None and not presets_path.is_absolute():
            presets_path = base_dir / presets_path
    debug_raw = data.get("debug")
    return ClientSettings(
        base_url=base_url.strip() if isinstance(base_url, str) and base_url.strip() else defaults.base_url,
        log_retention=_coerce_retention(data.get("log_retention"), defaults.log_retention),
        debug=bool(debug_raw) if debug_raw is not None else defaults.debug,
        line_width=_coerce_positive_float(data.get("line_width"), defaults.line_width),
        presets_path=presets_path,
        window_width=_coerce_positive_int(data.get("window_width"), defaults.window_width),
        window_height=_coerce_positive_int(data.get("window_height"), defaults.window_height),
    )


def apply_env_overrides(settings: ClientSettings, env: Optional[Mapping[str, str]] = None) -> ClientSettings:
    source = os.environ if env is None else env
    changes: Dict[str, Any] = {}
    base_url = (source.get(BASE_URL_ENV_VAR) or "").strip()
    if base_url:
        changes["base_url"] = base_url
    debug = _truthy(source.get(DEBUG_ENV_VAR))
    if debug is not None:
        changes["debug"] = debug
    if not changes:
        return settings
    _LOGGER.debug("Applying environment overrides: %s", sorted(changes))
    return replace(settings, **changes)


def load_client_settings(settings_path: Path, env: Optional[Mapping[str, str]] = None) -> ClientSettings:
    """Read fov_settings.json if it exists; bad files and fields fall back to defaults."""

    try:
        raw = settings_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        data: Any = {}
    except OSError as exc:
        _LOGGER.debug("Failed to read settings %s: %s", settings_path, exc)
        data = {}
    else:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            _LOGGER.debug("Ignoring malformed settings %s: %s", settings_path, exc)
            data = {}
    if not isinstance(data, dict):
        data = {}
    settings = settings_from_mapping(data, base_dir=settings_path.parent)
    return apply_env_overrides(settings, env)
