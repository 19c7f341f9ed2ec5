"""Authentication blueprint package."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Optional, TypeVar

from flask import Blueprint, g, redirect, request, session, url_for

from ...models.user import User

bp = Blueprint("auth", __name__, url_prefix="/auth")

SESSION_USER_KEY = "user_id"

F = TypeVar("F", bound=Callable)


def current_user() -> Optional[User]:
    """Return the signed-in user, loading it once per request."""

    if "current_user" in g:
        return g.current_user

    user = None
    user_id = session.get(SESSION_USER_KEY)
    if user_id is not None:
        from ...extensions import session_factory
        from ...services.auth import get_user

        user = get_user(int(user_id), session_factory)
        if user is None:
            # Account vanished; drop the stale session.
            session.pop(SESSION_USER_KEY, None)
    g.current_user = user
    return user


def login_required(view: F) -> F:
    """Redirect anonymous visitors to the login page, remembering where they were going."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_user() is None:
            return redirect(url_for("auth.login", next=request.full_path.rstrip("?")))
        return view(*args, **kwargs)

    return wrapped  # type: ignore[return-value]


from . import routes  # noqa: E402,F401 - ensure routes register

__all__ = ["bp", "current_user", "login_required"]
