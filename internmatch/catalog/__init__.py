"""Canonical catalogs and label resolution."""

from .models import CanonicalCatalog, CatalogEntry, CatalogKind, LabelSet
from .resolver import CatalogResolver, ResolvedLabel

__all__ = [
    "CanonicalCatalog",
    "CatalogEntry",
    "CatalogKind",
    "LabelSet",
    "CatalogResolver",
    "ResolvedLabel",
]
