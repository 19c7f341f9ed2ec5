"""Home routes."""

from __future__ import annotations

from urllib.parse import urlparse

from flask import redirect, request, session, url_for

from ..auth import current_user
from . import THEMES, bp, current_theme


@bp.get("/")
def index():
    """Send signed-in users to the dashboard and everyone else to login."""

    if current_user() is not None:
        return redirect(url_for("dashboard.index"))
    return redirect(url_for("auth.login"))


@bp.post("/theme")
def toggle_theme():
    """Flip between light and dark themes and return to the referring page."""

    requested = request.form.get("theme")
    if requested in THEMES:
        session["theme"] = requested
    else:
        session["theme"] = "dark" if current_theme() == "light" else "light"

    target = request.referrer or ""
    # Only bounce back to pages on this host.
    if not target or urlparse(target).netloc not in ("", request.host):
        target = url_for("home.index")
    return redirect(target)
