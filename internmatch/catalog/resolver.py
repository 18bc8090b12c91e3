"""Resolve free-text labels to canonical catalog ids."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from internmatch.logging import get_logger
from internmatch.utils import compact_token, normalize_token

from .models import CanonicalCatalog, CatalogEntry, CatalogKind, LabelSet

logger = get_logger(__name__, component="catalog")


@dataclass(frozen=True)
class ResolvedLabel:
    """Outcome of resolving one label."""

    label: str
    canonical_id: Optional[str]
    token: str

    @property
    def is_custom(self) -> bool:
        return self.canonical_id is None


class CatalogResolver:
    """Maps labels to canonical ids by normalized-token equality.

    An entry is reachable through its id, slug, name and every alias, each
    in normalized and compact (spaces removed) form. There is no fuzzy
    matching: "Excel" finds "Microsoft Excel" only if it is a listed alias.

    Indexes are built lazily, once per kind, and never mutated afterwards.
    """

    def __init__(self, catalog: Optional[CanonicalCatalog] = None):
        self.catalog = catalog or CanonicalCatalog()
        self._token_index: Dict[CatalogKind, Dict[str, CatalogEntry]] = {}
        self._id_index: Dict[CatalogKind, Dict[str, CatalogEntry]] = {}

    def _index(self, kind: CatalogKind) -> Dict[str, CatalogEntry]:
        kind = CatalogKind(kind)
        index = self._token_index.get(kind)
        if index is not None:
            return index

        index = {}
        for entry in self.catalog.entries(kind):
            for key in self._entry_keys(entry):
                existing = index.get(key)
                if existing is None:
                    index[key] = entry
                elif existing.id != entry.id:
                    # First entry wins
                    logger.warning(
                        f"Catalog key '{key}' maps to both {existing.id} and {entry.id}",
                        extra={
                            "event": "catalog.duplicate_key",
                            "catalog_kind": kind.value,
                            "key": key,
                            "kept_id": existing.id,
                            "ignored_id": entry.id,
                        },
                    )

        self._token_index[kind] = index
        return index

    def _ids(self, kind: CatalogKind) -> Dict[str, CatalogEntry]:
        kind = CatalogKind(kind)
        by_id = self._id_index.get(kind)
        if by_id is None:
            by_id = {}
            for entry in self.catalog.entries(kind):
                by_id.setdefault(entry.id, entry)
            self._id_index[kind] = by_id
        return by_id

    @staticmethod
    def _entry_keys(entry: CatalogEntry) -> List[str]:
        keys = []
        for raw in [entry.id, entry.slug, entry.name, *entry.aliases]:
            for key in (normalize_token(raw), compact_token(raw)):
                if key and key not in keys:
                    keys.append(key)
        return keys

    def resolve(self, kind: CatalogKind, label: str) -> ResolvedLabel:
        """Resolve a single label.

        Args:
            kind: Catalog to search
            label: Free-text label

        Returns:
            ResolvedLabel; canonical_id is None when nothing matched
        """
        token = normalize_token(label)
        if not token:
            return ResolvedLabel(label=label, canonical_id=None, token="")

        index = self._index(kind)
        entry = index.get(token) or index.get(compact_token(label))
        return ResolvedLabel(
            label=label,
            canonical_id=entry.id if entry else None,
            token=token,
        )

    def resolve_many(self, kind: CatalogKind, labels: Iterable[str]) -> LabelSet:
        """Resolve labels into a deduplicated LabelSet.

        Canonical matches are keyed by id with the catalog name as display
        text; unmatched labels are kept as custom tokens showing the text as
        first entered.
        """
        ids: Dict[str, str] = {}
        custom: Dict[str, str] = {}

        for label in labels:
            resolved = self.resolve(kind, label)
            if not resolved.token:
                continue
            if resolved.canonical_id:
                if resolved.canonical_id not in ids:
                    ids[resolved.canonical_id] = (
                        self.label_for(kind, resolved.canonical_id) or str(label).strip()
                    )
            elif resolved.token not in custom:
                custom[resolved.token] = str(label).strip()

        return LabelSet(ids=frozenset(ids), custom=frozenset(custom), names={**ids, **custom})

    def labels_for_ids(self, kind: CatalogKind, ids: Iterable[str]) -> LabelSet:
        """Build a LabelSet from canonical ids (link rows).

        Ids missing from the catalog are kept as-is; a link row is trusted
        even when the catalog snapshot is stale.
        """
        names: Dict[str, str] = {}
        for canonical_id in ids:
            if not canonical_id:
                continue
            canonical_id = str(canonical_id).strip()
            if canonical_id and canonical_id not in names:
                names[canonical_id] = self.label_for(kind, canonical_id) or canonical_id
        return LabelSet(ids=frozenset(names), custom=frozenset(), names=names)

    def label_for(self, kind: CatalogKind, canonical_id: str) -> Optional[str]:
        """Display name for a canonical id, or None if unknown."""
        entry = self._ids(kind).get(canonical_id)
        return entry.name if entry else None

    def category_for_item(self, item_id: str) -> Optional[str]:
        """Coursework category a coursework item rolls up into."""
        entry = self._ids(CatalogKind.COURSEWORK_ITEM).get(item_id)
        return entry.category_id if entry else None
