"""Pytest configuration and shared fixtures for Finwise tests.

Provides throwaway SQLite engines, a session factory matching the signature the
repositories expect, factories for users and transactions, and a Flask app wired to
a temporary data directory.
"""

from __future__ import annotations

import tempfile
from datetime import datetime
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine, select

# Import all models to ensure they're registered with SQLModel metadata
from finwise.models import Transaction, User

TEST_PASSWORD = "s3cret-pass"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Return a ``Callable[[], Session]`` bound to the test engine."""

    def factory() -> Session:
        return Session(db_engine, expire_on_commit=False)

    return factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user(session_factory) -> User:
    """Create a default user for scoping data."""

    with session_factory() as session:
        existing = session.exec(select(User).where(User.email == "tester@example.com")).first()
        if existing:
            return existing
        u = User(email="tester@example.com", password_hash="dummy-hash")
        session.add(u)
        session.commit()
        session.refresh(u)
        return u


@pytest.fixture
def transaction_factory(session_factory, user):
    """Factory for creating persisted test transactions.

    Returns:
        Callable: Function that creates and persists Transaction instances
    """

    def _create_transaction(
        amount: float,
        txn_type: str = "expense",
        category_id: str = "food",
        description: str = "Test transaction",
        occurred_at: datetime | None = None,
        owner: User | None = None,
    ) -> Transaction:
        owner = owner or user
        transaction = Transaction(
            user_id=owner.id,
            type=txn_type,
            amount=amount,
            category_id=category_id,
            description=description,
            occurred_at=occurred_at or datetime.now(),
        )
        with session_factory() as session:
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
        return transaction

    return _create_transaction


def make_txn(
    txn_type: str,
    amount: float,
    category_id: str = "food",
    occurred_at: datetime | None = None,
    **extra,
) -> Transaction:
    """Build an unsaved transaction for pure-function tests."""

    return Transaction(
        user_id=extra.pop("user_id", 1),
        type=txn_type,
        amount=amount,
        category_id=category_id,
        description=extra.pop("description", f"{txn_type} {category_id}"),
        occurred_at=occurred_at or datetime(2024, 3, 15, 12, 0),
        **extra,
    )


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("FINWISE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("FINWISE_DATABASE_URL", f"sqlite:///{tmp_path / 'finwise-test.db'}")
    monkeypatch.setenv("FINWISE_SECRET_KEY", "test-secret")
    monkeypatch.delenv("FINWISE_SURFACE_UNKNOWN_CATEGORIES", raising=False)
    monkeypatch.delenv("FINWISE_CURRENCY_SYMBOL", raising=False)

    from finwise import create_app

    application = create_app("testing")
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app):
    with app.test_client() as test_client:
        yield test_client


def register(client, email: str = "ana@example.com", password: str = TEST_PASSWORD):
    return client.post(
        "/auth/register",
        data={"email": email, "password": password, "confirm_password": password},
    )


def login(client, email: str = "ana@example.com", password: str = TEST_PASSWORD, **extra):
    data = {"email": email, "password": password}
    data.update(extra)
    return client.post("/auth/login", data=data)


@pytest.fixture()
def auth_client(client):
    """A test client signed in as ``ana@example.com``."""

    register(client)
    response = login(client)
    assert response.status_code == 302
    return client


def app_user(app, email: str = "ana@example.com") -> User:
    from finwise.extensions import session_factory
    from finwise.services.auth import get_user_by_email

    with app.app_context():
        found = get_user_by_email(email, session_factory)
    assert found is not None
    return found


def add_app_transaction(app, user_id: int, **fields) -> Transaction:
    from finwise.extensions import session_factory
    from finwise.infra.repositories.transaction import SQLModelTransactionRepository

    values = {
        "type": "expense",
        "amount": 10.0,
        "category_id": "food",
        "description": "Lunch out",
        "occurred_at": datetime.now(),
    }
    values.update(fields)
    with app.app_context():
        repo = SQLModelTransactionRepository(session_factory)
        return repo.create(Transaction(**values), user_id=user_id)


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance (default one cent)."""

    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
