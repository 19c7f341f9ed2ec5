"""Landing redirect and theme preference."""

from __future__ import annotations

from flask import Blueprint, session

bp = Blueprint("home", __name__)

THEMES = ("light", "dark")
DEFAULT_THEME = "light"


def current_theme() -> str:
    theme = session.get("theme", DEFAULT_THEME)
    return theme if theme in THEMES else DEFAULT_THEME


from . import routes  # noqa: E402,F401 - ensure routes register

__all__ = ["bp", "current_theme"]
