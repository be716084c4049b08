"""Camera field-of-view comparison engine and PyQt6 front end."""

from __future__ import annotations

__version__ = "1.0.0"

__all__ = ["__version__"]
