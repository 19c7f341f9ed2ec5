"""Blueprint exports."""

from . import analysis, auth, dashboard, home, transactions

__all__ = [
    "analysis",
    "auth",
    "dashboard",
    "home",
    "transactions",
]
