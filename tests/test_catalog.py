"""Unit tests for the canonical catalog and label resolution."""

import pytest
from pydantic import ValidationError

from internmatch.catalog import CanonicalCatalog, CatalogEntry, CatalogKind, CatalogResolver, LabelSet
from internmatch.reporting.fixtures import SAMPLE_CATALOG


@pytest.fixture
def resolver():
    return CatalogResolver(SAMPLE_CATALOG)


class TestCatalogEntry:
    """Tests for CatalogEntry validation."""

    def test_blank_name_rejected(self):
        """Test that ids and names cannot be blank."""
        with pytest.raises(ValidationError):
            CatalogEntry(id="skill-x", name="   ")

    def test_aliases_accept_comma_string(self):
        entry = CatalogEntry(id="skill-excel", name="Excel", aliases="ms excel, microsoft excel")
        assert entry.aliases == ["ms excel", "microsoft excel"]

    def test_sizes(self):
        """Test catalog sizes are reported per kind."""
        sizes = SAMPLE_CATALOG.sizes()
        assert sizes["skill"] == 8
        assert sizes["major"] == 7


class TestCatalogResolver:
    """Tests for CatalogResolver."""

    def test_resolve_by_name_case_insensitive(self, resolver):
        result = resolver.resolve(CatalogKind.SKILL, "  sql ")
        assert result.canonical_id == "skill-sql"
        assert not result.is_custom

    def test_resolve_by_alias(self, resolver):
        """Test that listed aliases reach the canonical entry."""
        assert resolver.resolve(CatalogKind.SKILL, "Microsoft Excel").canonical_id == "skill-excel"

    def test_resolve_by_id(self, resolver):
        assert resolver.resolve(CatalogKind.MAJOR, "major-finance").canonical_id == "major-finance"

    def test_resolve_compact_form(self, resolver):
        """Test that spacing differences are tolerated through the compact key."""
        assert resolver.resolve(CatalogKind.SKILL, "Power Point").canonical_id == "skill-powerpoint"

    def test_no_fuzzy_matching(self, resolver):
        """Test that near misses stay custom."""
        result = resolver.resolve(CatalogKind.SKILL, "Excell")
        assert result.canonical_id is None
        assert result.token == "excell"

    def test_kinds_are_separate(self, resolver):
        """Test that a skill name does not resolve as a major."""
        assert resolver.resolve(CatalogKind.MAJOR, "SQL").canonical_id is None

    def test_resolve_many_dedupes(self, resolver):
        """Test that spellings of the same entry collapse into one id."""
        labels = resolver.resolve_many(CatalogKind.SKILL, ["Excel", "excel", "MS Excel"])
        assert labels.ids == frozenset({"skill-excel"})
        assert len(labels) == 1
        assert labels.display("skill-excel") == "Excel"

    def test_resolve_many_keeps_custom_labels(self, resolver):
        """Test that unknown labels survive as custom tokens with their original text."""
        labels = resolver.resolve_many(CatalogKind.SKILL, ["SQL", "Underwater Basket-Weaving"])
        assert labels.ids == frozenset({"skill-sql"})
        assert labels.custom == frozenset({"underwater basket weaving"})
        assert labels.display_names() == ["SQL", "Underwater Basket-Weaving"]

    def test_resolve_many_skips_blank_labels(self, resolver):
        labels = resolver.resolve_many(CatalogKind.SKILL, ["", "  ", "!!"])
        assert labels.is_empty

    def test_labels_for_ids_keeps_unknown_ids(self, resolver):
        """Test that link rows pointing outside the catalog are trusted."""
        labels = resolver.labels_for_ids(CatalogKind.SKILL, ["skill-sql", "skill-retired", None])
        assert labels.ids == frozenset({"skill-sql", "skill-retired"})
        assert labels.display("skill-sql") == "SQL"
        assert labels.display("skill-retired") == "skill-retired"

    def test_category_for_item(self, resolver):
        assert resolver.category_for_item("item-valuation") == "cw-corporate-finance"
        assert resolver.category_for_item("item-missing") is None

    def test_duplicate_key_first_entry_wins(self, caplog):
        """Test that a key shared by two entries resolves to the first."""
        catalog = CanonicalCatalog(
            skills=[
                CatalogEntry(id="skill-excel", name="Excel", aliases=["xl"]),
                CatalogEntry(id="skill-xl-deploy", name="XL Deploy", aliases=["xl"]),
            ]
        )
        resolver = CatalogResolver(catalog)

        with caplog.at_level("WARNING"):
            result = resolver.resolve(CatalogKind.SKILL, "XL")

        assert result.canonical_id == "skill-excel"
        assert "maps to both" in caplog.text

    def test_empty_catalog_keeps_everything_custom(self):
        labels = CatalogResolver().resolve_many(CatalogKind.SKILL, ["SQL"])
        assert labels.ids == frozenset()
        assert labels.custom == frozenset({"sql"})


class TestLabelSet:
    """Tests for LabelSet."""

    def test_empty_is_falsy(self):
        assert not LabelSet()
        assert LabelSet().is_empty
        assert len(LabelSet()) == 0

    def test_equality_ignores_display_names(self):
        a = LabelSet(ids=frozenset({"skill-sql"}), names={"skill-sql": "SQL"})
        b = LabelSet(ids=frozenset({"skill-sql"}), names={"skill-sql": "Structured Query Language"})
        assert a == b
        assert hash(a) == hash(b)

    def test_contains(self):
        labels = LabelSet(ids=frozenset({"skill-sql"}), custom=frozenset({"dbt"}))
        assert "skill-sql" in labels
        assert "dbt" in labels
        assert "python" not in labels

    def test_union_prefers_own_names(self):
        """Test that union merges sets and keeps the left display names."""
        left = LabelSet(ids=frozenset({"a"}), names={"a": "Alpha"})
        right = LabelSet(ids=frozenset({"a", "b"}), custom=frozenset({"c"}), names={"a": "A", "b": "Beta", "c": "Gamma"})
        merged = left.union(right)
        assert merged.ids == frozenset({"a", "b"})
        assert merged.custom == frozenset({"c"})
        assert merged.display_names() == ["Alpha", "Beta", "Gamma"]

    def test_ordered_keys_ids_before_custom(self):
        labels = LabelSet(
            ids=frozenset({"skill-sql"}),
            custom=frozenset({"dbt"}),
            names={"dbt": "dbt", "skill-sql": "SQL"},
        )
        assert labels.ordered_keys() == ["skill-sql", "dbt"]

    def test_ordered_keys_ignore_resolution_order(self, resolver):
        """Test that the same labels in any order list identically."""
        a = resolver.resolve_many(CatalogKind.SKILL, ["SQL", "Excel", "dbt", "Airflow"])
        b = resolver.resolve_many(CatalogKind.SKILL, ["Airflow", "Excel", "dbt", "SQL"])
        assert a == b
        assert a.display_names() == b.display_names() == ["Excel", "SQL", "Airflow", "dbt"]


class TestNonLatinLabels:
    """Tests for labels written outside the Latin alphabet."""

    def test_kept_as_custom_labels(self, resolver):
        labels = resolver.resolve_many(CatalogKind.SKILL, ["数据分析", "Русский"])
        assert labels.custom == frozenset({"数据分析", "русский"})
        assert len(labels) == 2
        assert labels.display_names() == ["Русский", "数据分析"]

    def test_alias_in_another_script_resolves(self):
        catalog = CanonicalCatalog(
            skills=[CatalogEntry(id="skill-analytics", name="Data Analysis", aliases=["数据分析"])]
        )
        result = CatalogResolver(catalog).resolve(CatalogKind.SKILL, "数据分析")
        assert result.canonical_id == "skill-analytics"
