"""Static lookup tables."""

from .categories import DEFAULT_CATALOG, Category, CategoryCatalog

__all__ = ["Category", "CategoryCatalog", "DEFAULT_CATALOG"]
