"""Service module exports."""

from . import analysis, auth, periods, reports

__all__ = [
    "analysis",
    "auth",
    "periods",
    "reports",
]
