"""Login and registration form helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

_TRUTHY = {"1", "true", "on", "yes"}


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(slots=True)
class LoginForm:
    email: str = ""
    password: str = ""
    remember_me: bool = True
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LoginForm:
        return cls(
            email=_text(data, "email").strip(),
            password=_text(data, "password"),
            remember_me=_text(data, "remember_me").strip().lower() in _TRUTHY,
        )

    def validate(self) -> bool:
        self.errors.clear()
        if not self.email:
            self._add_error("email", "Email is required.")
        if not self.password:
            self._add_error("password", "Password is required.")
        return not self.errors

    def _add_error(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)


@dataclass(slots=True)
class RegisterForm:
    """Raw sign-up input; field rules are enforced by ``services.auth.register_user``."""

    email: str = ""
    password: str = ""
    confirm_password: str = ""
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RegisterForm:
        return cls(
            email=_text(data, "email").strip(),
            password=_text(data, "password"),
            confirm_password=_text(data, "confirm_password"),
        )

    def add_error(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)
