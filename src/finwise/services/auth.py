"""Authentication and user management services."""

from __future__ import annotations

import re
from typing import Callable, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlmodel import Session, select

from ..logging_config import get_logger
from ..models.transaction import utcnow
from ..models.user import User

SessionFactory = Callable[[], Session]

logger = get_logger(__name__)

_hasher = PasswordHasher()
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


class RegistrationError(ValueError):
    """Raised when sign-up input is rejected; ``field`` names the offending input."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _validate_registration(email: str, password: str, confirm_password: str) -> None:
    if not email:
        raise RegistrationError("email", "Email is required.")
    if not _EMAIL_PATTERN.match(email):
        raise RegistrationError("email", "Enter a valid email address.")
    if not password:
        raise RegistrationError("password", "Password is required.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise RegistrationError(
            "password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )
    if password != confirm_password:
        raise RegistrationError("confirm_password", "Passwords do not match.")


def register_user(
    *,
    email: str,
    password: str,
    confirm_password: str,
    session_factory: SessionFactory,
) -> User:
    """Create a new account with a hashed password."""

    email = normalize_email(email)
    _validate_registration(email, password, confirm_password)
    password_hash = _hasher.hash(password)
    with session_factory() as session:
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing:
            raise RegistrationError("email", "This email is already in use.")
        user = User(email=email, password_hash=password_hash)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
    logger.info("User registered", extra={"user_id": user.id})
    return user


def authenticate(
    *,
    email: str,
    password: str,
    session_factory: SessionFactory,
) -> Optional[User]:
    """Validate credentials and return the user when correct."""

    email = normalize_email(email)
    if not email or not password:
        return None
    with session_factory() as session:
        user = session.exec(select(User).where(User.email == email)).first()
        if user is None:
            logger.info("Login rejected: unknown email")
            return None
        try:
            _hasher.verify(user.password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            logger.info("Login rejected: bad password", extra={"user_id": user.id})
            return None

        if _hasher.check_needs_rehash(user.password_hash):
            user.password_hash = _hasher.hash(password)
        user.last_login = utcnow()
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def get_user(user_id: int, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by primary key."""

    with session_factory() as session:
        user = session.get(User, user_id)
        if user:
            session.expunge(user)
        return user


def get_user_by_email(email: str, session_factory: SessionFactory) -> Optional[User]:
    email = normalize_email(email)
    with session_factory() as session:
        user = session.exec(select(User).where(User.email == email)).first()
        if user:
            session.expunge(user)
        return user
