"""Canonical catalog models (skills, coursework, majors)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from internmatch.utils import split_labels


class CatalogKind(str, Enum):
    """Which canonical catalog a label is resolved against."""

    SKILL = "skill"
    COURSEWORK_CATEGORY = "coursework_category"
    COURSEWORK_ITEM = "coursework_item"
    MAJOR = "major"


class CatalogEntry(BaseModel):
    """One canonical entry with its display name and known aliases.

    ``category_id`` is only meaningful for coursework items, which roll up
    into a coursework category for matching.
    """

    id: str = Field(..., description="Stable canonical id")
    slug: Optional[str] = Field(None, description="URL-style slug")
    name: str = Field(..., description="Display name")
    aliases: List[str] = Field(default_factory=list, description="Alternate spellings")
    category_id: Optional[str] = Field(None, description="Parent coursework category id")

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("id", "name", mode="before")
    @classmethod
    def require_text(cls, v) -> str:
        """Ids and names cannot be blank."""
        text = "" if v is None else str(v).strip()
        if not text:
            raise ValueError("Field cannot be empty or whitespace-only")
        return text

    @field_validator("slug", "category_id", mode="before")
    @classmethod
    def optional_text(cls, v) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("aliases", mode="before")
    @classmethod
    def clean_aliases(cls, v) -> List[str]:
        return split_labels(v)


class CanonicalCatalog(BaseModel):
    """All canonical catalogs used by the resolver."""

    skills: List[CatalogEntry] = Field(default_factory=list)
    coursework_categories: List[CatalogEntry] = Field(default_factory=list)
    coursework_items: List[CatalogEntry] = Field(default_factory=list)
    majors: List[CatalogEntry] = Field(default_factory=list)

    model_config = {"frozen": True, "extra": "ignore"}

    def entries(self, kind: CatalogKind) -> List[CatalogEntry]:
        """Entries for one catalog kind."""
        return {
            CatalogKind.SKILL: self.skills,
            CatalogKind.COURSEWORK_CATEGORY: self.coursework_categories,
            CatalogKind.COURSEWORK_ITEM: self.coursework_items,
            CatalogKind.MAJOR: self.majors,
        }[CatalogKind(kind)]

    def sizes(self) -> Dict[str, int]:
        """Entry counts per kind, for logging."""
        return {kind.value: len(self.entries(kind)) for kind in CatalogKind}


@dataclass(frozen=True)
class LabelSet:
    """A resolved set of labels.

    ``ids`` are canonical catalog ids; ``custom`` are normalized tokens for
    labels the catalog does not know. ``names`` maps each id or token to its
    display text and is ignored by equality and hashing.
    """

    ids: FrozenSet[str] = frozenset()
    custom: FrozenSet[str] = frozenset()
    names: Mapping[str, str] = field(default_factory=dict, compare=False)

    def __len__(self) -> int:
        return len(self.ids) + len(self.custom)

    def __bool__(self) -> bool:
        return bool(self.ids or self.custom)

    @property
    def is_empty(self) -> bool:
        return not self

    def display(self, key: str) -> str:
        """Display text for an id or custom token."""
        return self.names.get(key, key)

    def ordered_keys(self) -> List[str]:
        """Ids sorted by display name, then custom tokens sorted by token.

        The order depends only on the set contents, never on the order the
        labels were resolved in.
        """
        ordered = sorted(self.ids, key=lambda key: (self.display(key).casefold(), key))
        ordered += sorted(self.custom - self.ids)
        return ordered

    def display_names(self) -> List[str]:
        """Display names, canonical entries first."""
        return [self.display(key) for key in self.ordered_keys()]

    def __contains__(self, key: str) -> bool:
        return key in self.ids or key in self.custom

    def union(self, other: "LabelSet") -> "LabelSet":
        """Combine two sets; display names from self win."""
        names = dict(self.names)
        for key, display in other.names.items():
            names.setdefault(key, display)
        return LabelSet(
            ids=self.ids | other.ids,
            custom=self.custom | other.custom,
            names=names,
        )
