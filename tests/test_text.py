"""Unit tests for text normalization helpers."""

import pytest

from internmatch.utils.text import compact_token, normalize_token, split_labels


class TestNormalizeToken:
    """Tests for normalize_token."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("  Data-Visualization (Tableau/Power BI) ", "data visualization tableau power bi"),
            ("Women's Studies", "womens studies"),
            ("C++", "c++"),
            ("C#", "c#"),
            ("FINANCE", "finance"),
            ("Corporate Finance / Valuation", "corporate finance valuation"),
            ("数据分析", "数据分析"),
            ("Русский Язык", "русский язык"),
            ("Café Operations", "café operations"),
            ("snake_case", "snake case"),
        ],
    )
    def test_normalization(self, raw, expected):
        """Test case folding, punctuation and whitespace handling."""
        assert normalize_token(raw) == expected

    def test_empty_values(self):
        """Test None and punctuation-only text normalize to empty."""
        assert normalize_token(None) == ""
        assert normalize_token("   ") == ""
        assert normalize_token("--//--") == ""

    def test_non_latin_text_survives(self):
        """Test labels in other scripts keep a non-empty token."""
        assert normalize_token("  Анализ   данных ") == "анализ данных"
        assert compact_token("数据 分析") == "数据分析"

    def test_composed_and_decomposed_forms_match(self):
        assert normalize_token("Cafe\u0301") == normalize_token("Caf\u00e9")


def test_compact_token_removes_spaces():
    assert compact_token("Power BI") == "powerbi"


class TestSplitLabels:
    """Tests for split_labels."""

    def test_comma_string(self):
        """Test comma separated strings are split and trimmed."""
        assert split_labels("excel,  sql , ,python") == ["excel", "sql", "python"]

    def test_list(self):
        """Test lists keep order and drop blanks and None."""
        assert split_labels(["Excel", None, "  ", "SQL"]) == ["Excel", "SQL"]

    def test_none(self):
        assert split_labels(None) == []

    def test_inner_whitespace_collapsed(self):
        assert split_labels(["Financial   Modeling"]) == ["Financial Modeling"]
