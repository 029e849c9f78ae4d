"""Tests for catalog number parsing, ordering and range filtering."""

import pytest

from hinged.catalog import (
    CatalogNumber,
    NaturalCatalogComparator,
    SortOrder,
    catalog_number_in_range,
    compare_catalog_numbers,
    extract_numeric_part,
    parse_catalog_number,
    sort_catalog_numbers,
)


class TestParseCatalogNumber:
    """Tests for parse_catalog_number."""

    def test_prefixed_number(self) -> None:
        """Test a simple airmail number."""
        parsed = parse_catalog_number("C5")
        assert parsed.prefix == "C"
        assert parsed.number == 5
        assert parsed.suffix == ""

    def test_only_first_digit_run_is_the_number(self) -> None:
        """Test that later digits stay in the suffix."""
        parsed = parse_catalog_number("1958-1964")
        assert parsed.number == 1958
        assert parsed.suffix == "-1964"

    def test_embedded_digits_in_suffix(self) -> None:
        """Test "12A34" keeps "a34" verbatim as the suffix."""
        assert parse_catalog_number("12A34") == CatalogNumber("", 12, "a34")

    def test_empty_string(self) -> None:
        """Test the empty string parses to an empty triple."""
        assert parse_catalog_number("") == CatalogNumber("", 0, "")

    def test_pure_number(self) -> None:
        """Test a plain number has no prefix or suffix."""
        assert parse_catalog_number("300") == CatalogNumber("", 300, "")

    def test_case_canonicalization(self) -> None:
        """Test prefix is uppercased and suffix lowercased."""
        parsed = parse_catalog_number("c300D")
        assert parsed.prefix == "C"
        assert parsed.number == 300
        assert parsed.suffix == "d"

    def test_no_digits(self) -> None:
        """Test input without digits is all prefix with number 0."""
        assert parse_catalog_number("abc") == CatalogNumber("ABC", 0, "")

    def test_leading_zeros(self) -> None:
        """Test leading zeros are kept in the normalized form only."""
        parsed = parse_catalog_number("C007")
        assert parsed.number == 7
        assert parsed.normalized == "C007"

    def test_normalized_reconstructs_input(self) -> None:
        """Test prefix + digits + suffix rebuilds the case-folded input."""
        assert parse_catalog_number("sc12a").normalized == "SC12a"

    @pytest.mark.parametrize("raw", ["", " ", "-", "C-", "😀12", "١٢", "99999999999999999999999", "a" * 500])
    def test_never_raises(self, raw: str) -> None:
        """Test odd input always yields a well-formed triple."""
        parsed = parse_catalog_number(raw)
        assert isinstance(parsed.prefix, str)
        assert isinstance(parsed.number, int)
        assert parsed.number >= 0
        assert isinstance(parsed.suffix, str)


class TestExtractNumericPart:
    """Tests for extract_numeric_part."""

    def test_concatenates_all_digits(self) -> None:
        """Test every digit counts, not just the first run."""
        assert extract_numeric_part("C-12") == 12
        assert extract_numeric_part("12a3") == 123

    def test_no_digits(self) -> None:
        """Test strings without digits give None."""
        assert extract_numeric_part("CX") is None
        assert extract_numeric_part("") is None


class TestComparator:
    """Tests for natural catalog number ordering."""

    def test_numeric_not_lexicographic(self) -> None:
        """Test "2" sorts before "10"."""
        assert compare_catalog_numbers("2", "10") < 0
        assert sort_catalog_numbers(["10", "2", "1"]) == ["1", "2", "10"]

    def test_prefix_ordering(self) -> None:
        """Test empty prefix sorts before "C" before "O"."""
        assert sort_catalog_numbers(["C1", "1", "O1"]) == ["1", "C1", "O1"]

    def test_suffix_breaks_ties(self) -> None:
        """Test suffix ordering after equal numbers."""
        assert sort_catalog_numbers(["300b", "300", "300a"]) == ["300", "300a", "300b"]

    def test_case_insensitive(self) -> None:
        """Test "c5" and "C5" compare equal."""
        assert compare_catalog_numbers("c5", "C5") == 0

    def test_descending(self) -> None:
        """Test the reverse flag inverts the result."""
        assert compare_catalog_numbers("2", "10", descending=True) > 0
        assert sort_catalog_numbers(["1", "10", "2"], descending=True) == ["10", "2", "1"]

    def test_comparator_class(self) -> None:
        """Test NaturalCatalogComparator with a key function."""
        comparator = NaturalCatalogComparator(SortOrder.REVERSE)
        assert comparator.descending
        items = [{"n": "C2"}, {"n": "C10"}, {"n": "5"}]
        result = comparator.sorted(items, key=lambda item: item["n"])
        assert [item["n"] for item in result] == ["C10", "C2", "5"]

    def test_sort_key(self) -> None:
        """Test the key function works with the builtin sort."""
        values = ["C2", "300a", "10", "300"]
        values.sort(key=NaturalCatalogComparator().sort_key)
        assert values == ["10", "300", "300a", "C2"]

    def test_idempotent(self) -> None:
        """Test repeated comparisons give identical results."""
        values = ["C10", "2", "O1", "2a", "1"]
        assert sort_catalog_numbers(values) == sort_catalog_numbers(values)
        assert compare_catalog_numbers("C1", "2") == compare_catalog_numbers("C1", "2")


class TestRangeFilter:
    """Tests for catalog_number_in_range."""

    def test_within_and_outside(self) -> None:
        """Test basic numeric bounds."""
        assert catalog_number_in_range("50", "1", "100") is True
        assert catalog_number_in_range("150", "1", "100") is False
        assert catalog_number_in_range("0", "1", "100") is False

    def test_bounds_are_inclusive(self) -> None:
        """Test both ends of the range match."""
        assert catalog_number_in_range("1", "1", "100") is True
        assert catalog_number_in_range("100", "1", "100") is True

    def test_no_bounds(self) -> None:
        """Test empty bounds accept everything."""
        assert catalog_number_in_range("anything") is True
        assert catalog_number_in_range("C5", "", "") is True

    def test_only_one_bound(self) -> None:
        """Test a single lower or upper bound."""
        assert catalog_number_in_range("20", start="10") is True
        assert catalog_number_in_range("5", start="10") is False
        assert catalog_number_in_range("5", end="10") is True
        assert catalog_number_in_range("20", end="10") is False

    def test_other_prefix_decided_by_start_bound(self) -> None:
        """Test "C10" is kept by range "1" to "50" because "C" sorts after ""."""
        assert catalog_number_in_range("C10", "1", "50") is True

    def test_lower_prefix_excluded_by_start_bound(self) -> None:
        """Test "A10" is dropped by range "C1" to "C50"."""
        assert catalog_number_in_range("A10", "C1", "C50") is False

    def test_other_prefix_decided_by_end_bound(self) -> None:
        """Test prefix comparison against the end bound alone."""
        assert catalog_number_in_range("C10", end="50") is False
        assert catalog_number_in_range("10", end="C5") is True

    def test_same_prefix_range(self) -> None:
        """Test ranges within one series."""
        assert catalog_number_in_range("C25", "C1", "C50") is True
        assert catalog_number_in_range("C75", "C1", "C50") is False

    def test_suffix_ignored(self) -> None:
        """Test suffixes never constrain."""
        assert catalog_number_in_range("50z", "50a", "50b") is True
