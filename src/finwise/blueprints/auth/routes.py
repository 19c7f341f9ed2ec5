"""Login, registration and logout routes."""

from __future__ import annotations

from urllib.parse import urlparse

from flask import (
    current_app,
    flash,
    make_response,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

from ...extensions import session_factory
from ...services.auth import RegistrationError, authenticate, register_user
from . import SESSION_USER_KEY, bp, current_user
from .forms import LoginForm, RegisterForm

REMEMBERED_EMAIL_COOKIE = "finwise_email"


def _safe_next(target: str | None) -> str:
    """Only follow relative redirects so ``next`` cannot point off-site."""

    if target:
        parsed = urlparse(target)
        if not parsed.scheme and not parsed.netloc and target.startswith("/"):
            return target
    return url_for("dashboard.index")


@bp.route("/login", methods=["GET", "POST"])
def login():
    """Render the login form or sign the user in."""

    if request.method == "GET":
        if current_user() is not None:
            return redirect(url_for("dashboard.index"))
        form = LoginForm(email=request.cookies.get(REMEMBERED_EMAIL_COOKIE, ""))
        return render_template("auth/login.html", form=form, next=request.args.get("next", ""))

    form = LoginForm.from_mapping(request.form)
    next_url = request.form.get("next") or request.args.get("next")
    if not form.validate():
        return render_template("auth/login.html", form=form, next=next_url or ""), 400

    user = authenticate(email=form.email, password=form.password, session_factory=session_factory)
    if user is None:
        flash("Invalid email or password.", "danger")
        return render_template("auth/login.html", form=form, next=next_url or ""), 401

    session.clear()
    session[SESSION_USER_KEY] = user.id
    session.permanent = form.remember_me
    current_app.logger.info("User signed in", extra={"user_id": user.id})

    response = make_response(redirect(_safe_next(next_url)))
    if form.remember_me:
        lifetime = current_app.config["PERMANENT_SESSION_LIFETIME"]
        response.set_cookie(
            REMEMBERED_EMAIL_COOKIE,
            user.email,
            max_age=int(lifetime.total_seconds()),
            httponly=True,
            samesite="Lax",
        )
    else:
        response.delete_cookie(REMEMBERED_EMAIL_COOKIE)
    return response


@bp.route("/register", methods=["GET", "POST"])
def register():
    """Create an account, then send the user to the login page."""

    if request.method == "GET":
        return render_template("auth/register.html", form=RegisterForm())

    form = RegisterForm.from_mapping(request.form)
    try:
        register_user(
            email=form.email,
            password=form.password,
            confirm_password=form.confirm_password,
            session_factory=session_factory,
        )
    except RegistrationError as exc:
        form.add_error(exc.field, exc.message)
        return render_template("auth/register.html", form=form), 400

    flash("Account created. Please sign in.", "success")
    return redirect(url_for("auth.login"))


@bp.post("/logout")
def logout():
    """Forget the signed-in user and clear remembered details."""

    user = current_user()
    theme = session.get("theme")
    session.clear()
    if theme:
        session["theme"] = theme
    if user is not None:
        current_app.logger.info("User signed out", extra={"user_id": user.id})
    flash("You have been signed out.", "info")
    response = make_response(redirect(url_for("auth.login")))
    response.delete_cookie(REMEMBERED_EMAIL_COOKIE)
    return response
