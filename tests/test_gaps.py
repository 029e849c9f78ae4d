"""Tests for gap analysis and gap reports."""

from datetime import date

import pytest

from hinged.config import GapsConfig, Settings
from hinged.enums import CollectionStatus
from hinged.errors import RecordNotFoundError
from hinged.gaps import (
    GapAnalysis,
    GapReport,
    GapReportFinder,
    ReportStamp,
    analyze_gaps,
    compress_gaps_to_ranges,
    year_presets,
)
from hinged.models import Album, Collection, Country, Stamp
from hinged.store import Library


def _library_with_country(name: str = "Canada") -> tuple[Library, Country, Album]:
    library = Library()
    country = library.add_country(Country(name=name, catalog_prefixes={"scott": "CAN"}))
    collection = library.add_collection(Collection(name=f"{name} Scott", country_id=country.id))
    album = library.add_album(Album(name="Volume 1", collection_id=collection.id))
    return library, country, album


def _add(
    library: Library,
    album: Album,
    number: str,
    year: int | None,
    status: CollectionStatus = CollectionStatus.OWNED,
) -> Stamp:
    return library.add_stamp(
        Stamp(catalog_number=number, year_start=year, collection_status=status, album_id=album.id)
    )


class TestAnalyzeGaps:
    """Tests for the numeric gap analyzer."""

    def test_single_gap(self) -> None:
        """Test owned {1,2,5} wanted {3} leaves 4 missing."""
        result = analyze_gaps({1, 2, 5}, {3})
        assert result.missing == [4]
        assert result.compressed_ranges == ["#4"]

    def test_runs_and_singles(self) -> None:
        """Test consecutive missing numbers collapse into ranges."""
        result = analyze_gaps({1, 2, 3, 7, 8, 10}, set())
        assert result.missing == [4, 5, 6, 9]
        assert result.compressed_ranges == ["#4-6", "#9"]

    def test_empty_union(self) -> None:
        """Test no numbers gives no gaps and no error."""
        result = analyze_gaps(set(), set())
        assert result.missing == []
        assert result.compressed_ranges == []
        assert not result.has_gaps

    def test_no_gaps(self) -> None:
        """Test a contiguous run has nothing missing."""
        assert analyze_gaps({1, 2}, {3, 4}).missing == []

    def test_span_cap(self) -> None:
        """Test sparse numbering past the cap reports nothing."""
        assert analyze_gaps({1, 1001}, set()).missing == []
        assert len(analyze_gaps({1, 1000}, set()).missing) == 998

    def test_custom_span_cap(self) -> None:
        """Test the cap can be configured."""
        assert analyze_gaps({1, 20}, set(), max_span=10).missing == []
        assert analyze_gaps({1, 5}, set(), max_span=10).missing == [2, 3, 4]

    def test_idempotent(self) -> None:
        """Test repeated runs give identical results."""
        assert analyze_gaps({1, 9}, {4}) == analyze_gaps({1, 9}, {4})

    def test_displayed_ranges(self) -> None:
        """Test the display limit hides the tail of the missing list."""
        result = GapAnalysis(missing=list(range(2, 102)))
        ranges, hidden = result.displayed_ranges(50)
        assert ranges == ["#2-51"]
        assert hidden == 50

    def test_displayed_ranges_under_limit(self) -> None:
        """Test nothing is hidden when under the limit."""
        ranges, hidden = GapAnalysis(missing=[4, 9]).displayed_ranges()
        assert ranges == ["#4", "#9"]
        assert hidden == 0


class TestCompressGapsToRanges:
    """Tests for compress_gaps_to_ranges."""

    def test_empty(self) -> None:
        """Test an empty list."""
        assert compress_gaps_to_ranges([]) == []

    def test_format(self) -> None:
        """Test the "#n" and "#a-b" label format."""
        assert compress_gaps_to_ranges([1, 3, 4, 5, 10, 11]) == ["#1", "#3-5", "#10-11"]


class TestGapReportModel:
    """Tests for the GapReport model."""

    def test_completion_percentage(self) -> None:
        """Test owned share of owned plus wanted."""
        stamp = ReportStamp(id="x", catalog_number="1", display_catalog_number="1")
        report = GapReport(
            country_id="c",
            country_name="Canada",
            start_year=1840,
            end_year=2000,
            owned_stamps=[stamp, stamp, stamp],
            wanted_stamps=[stamp],
        )
        assert report.completion_percentage == 75.0

    def test_completion_percentage_empty(self) -> None:
        """Test completion is 0 when nothing is recorded."""
        report = GapReport(country_id="c", country_name="Canada", start_year=1840, end_year=2000)
        assert report.completion_percentage == 0.0

    def test_displayed_gaps(self) -> None:
        """Test compressed gaps with a display limit."""
        report = GapReport(
            country_id="c",
            country_name="Canada",
            start_year=1840,
            end_year=2000,
            potential_gaps=[2, 3, 4, 8, 9],
        )
        assert report.compressed_gaps == ["#2-4", "#8-9"]
        assert report.gap_analysis == GapAnalysis(missing=[2, 3, 4, 8, 9])
        assert report.displayed_gaps(4) == (["#2-4", "#8"], 1)


class TestYearPresets:
    """Tests for year range presets."""

    def test_presets(self) -> None:
        """Test preset windows."""
        presets = year_presets(date(2026, 3, 1))
        assert presets["classic"] == (1840, 1940)
        assert presets["modern"] == (1941, 2000)
        assert presets["recent"] == (2001, 2026)


class TestGapReportFinder:
    """Tests for GapReportFinder."""

    def test_basic_report(self) -> None:
        """Test owned, wanted, gaps and completion for one country."""
        library, country, album = _library_with_country()
        _add(library, album, "1", 1851)
        _add(library, album, "2", 1852)
        _add(library, album, "5", 1855)
        _add(library, album, "3", 1853, CollectionStatus.WANTED)

        report = GapReportFinder(library).find_gaps(country.id, 1840, 1940)

        assert report.country_name == "Canada"
        assert report.total_owned == 3
        assert report.total_wanted == 1
        assert report.potential_gaps == [4]
        assert report.completion_percentage == 75.0

    def test_not_collecting_is_ignored(self) -> None:
        """Test skipped stamps count as neither owned nor wanted."""
        library, country, album = _library_with_country()
        _add(library, album, "1", 1900)
        _add(library, album, "3", 1900, CollectionStatus.NOT_COLLECTING)

        report = GapReportFinder(library).find_gaps(country.id, 1840, 1940)

        assert report.total_owned == 1
        assert report.total_wanted == 0
        assert report.potential_gaps == []

    def test_year_window(self) -> None:
        """Test stamps outside the window are excluded."""
        library, country, album = _library_with_country()
        _add(library, album, "1", 1900)
        _add(library, album, "2", 1950)
        _add(library, album, "3", None)

        report = GapReportFinder(library).find_gaps(country.id, 1840, 1940)

        assert [s.catalog_number for s in report.owned_stamps] == ["1"]

    def test_undated_stamps_excluded_by_end_year(self) -> None:
        """Test a missing year never satisfies an end year."""
        library, country, album = _library_with_country()
        _add(library, album, "1", None)

        report = GapReportFinder(library).find_gaps(country.id, 0, 9999)

        assert report.total_owned == 0

    def test_other_countries_excluded(self) -> None:
        """Test only the requested country's stamps are used."""
        library, country, album = _library_with_country()
        other = library.add_country(Country(name="Mexico"))
        other_collection = library.add_collection(Collection(name="Mexico", country_id=other.id))
        other_album = library.add_album(Album(name="MX", collection_id=other_collection.id))
        _add(library, album, "1", 1900)
        _add(library, other_album, "2", 1900)

        report = GapReportFinder(library).find_gaps(country.id, 1840, 1940)

        assert report.total_owned == 1

    def test_worldwide_collection_uses_stamp_country(self) -> None:
        """Test stamps in a worldwide collection count toward their own country."""
        library, country, _ = _library_with_country()
        world = library.add_collection(Collection(name="World"))
        world_album = library.add_album(Album(name="Mixed", collection_id=world.id))
        library.add_stamp(
            Stamp(catalog_number="7", year_start=1900, album_id=world_album.id, country_id=country.id)
        )

        report = GapReportFinder(library).find_gaps(country.id, 1840, 1940)

        assert report.total_owned == 1

    def test_numbers_use_all_digits(self) -> None:
        """Test "C-12" counts as 12 in the gap report."""
        library, country, album = _library_with_country()
        _add(library, album, "C-12", 1930)
        _add(library, album, "10", 1930)

        report = GapReportFinder(library).find_gaps(country.id, 1840, 1940)

        assert report.potential_gaps == [11]

    def test_span_cap_from_settings(self) -> None:
        """Test the configured span cap is applied."""
        library, country, album = _library_with_country()
        _add(library, album, "1", 1900)
        _add(library, album, "50", 1900)

        settings = Settings(gaps=GapsConfig(max_span=10))
        report = GapReportFinder(library, settings).find_gaps(country.id, 1840, 1940)

        assert report.potential_gaps == []

    def test_wanted_by_year(self) -> None:
        """Test wanted stamps grouped by year in ascending order."""
        library, country, album = _library_with_country()
        _add(library, album, "1", 1901, CollectionStatus.WANTED)
        _add(library, album, "2", 1900, CollectionStatus.WANTED)
        _add(library, album, "3", 1900, CollectionStatus.WANTED)

        report = GapReportFinder(library).find_gaps(country.id, 1840, 1940)

        assert [g.year for g in report.wanted_by_year] == [1900, 1901]
        assert len(report.wanted_by_year[0].stamps) == 2

    def test_display_catalog_number_uses_prefix(self) -> None:
        """Test report entries carry the country's catalog prefix."""
        library, country, album = _library_with_country()
        _add(library, album, "5", 1900, CollectionStatus.WANTED)

        report = GapReportFinder(library).find_gaps(country.id, 1840, 1940)

        assert report.wanted_stamps[0].display_catalog_number == "CAN 5"

    def test_unknown_country(self) -> None:
        """Test an unknown country ID raises."""
        with pytest.raises(RecordNotFoundError):
            GapReportFinder(Library()).find_gaps("missing", 1840, 1940)
