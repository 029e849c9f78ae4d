"""Stamp-level gap detection for one country."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import TYPE_CHECKING

from hinged.catalog import extract_numeric_part
from hinged.config import Settings
from hinged.enums import CollectionStatus
from hinged.gaps.analyzer import analyze_gaps
from hinged.gaps.models import GapReport, ReportStamp, YearGroup

if TYPE_CHECKING:
    from hinged.models import Stamp
    from hinged.store import Library

# First year stamps were issued (Penny Black)
FIRST_ISSUE_YEAR = 1840


def year_presets(today: date | None = None) -> dict[str, tuple[int, int]]:
    """Named year windows for quick gap reports.

    Returns:
        Mapping of preset name to inclusive (start, end) years.
    """
    current_year = (today or date.today()).year
    return {
        "classic": (FIRST_ISSUE_YEAR, 1940),
        "modern": (1941, 2000),
        "recent": (2001, current_year),
    }


class GapReportFinder:
    """Find wanted stamps and numbering gaps for a country."""

    def __init__(
        self,
        library: Library,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the gap finder.

        Args:
            library: Library to analyze.
            settings: Settings supplying the gap span cap. Defaults apply if None.
        """
        self.library = library
        self.settings = settings or Settings()

    def find_gaps(
        self,
        country_id: str,
        start_year: int = FIRST_ISSUE_YEAR,
        end_year: int | None = None,
    ) -> GapReport:
        """Build a gap report for a country and year window.

        Args:
            country_id: Country to analyze.
            start_year: First issue year, inclusive.
            end_year: Last issue year, inclusive. Defaults to the current year.

        Returns:
            Report with owned and wanted stamps and potential gaps.

        Raises:
            RecordNotFoundError: If the country does not exist.
        """
        country = self.library.get_country(country_id)
        if end_year is None:
            end_year = date.today().year

        stamps = self._stamps_in_window(country_id, start_year, end_year)

        owned = sorted(
            (s for s in stamps if s.collection_status is CollectionStatus.OWNED),
            key=lambda s: s.year_for_sort,
        )
        wanted = sorted(
            (s for s in stamps if s.collection_status is CollectionStatus.WANTED),
            key=lambda s: s.year_for_sort,
        )

        analysis = analyze_gaps(
            self._numbers(owned),
            self._numbers(wanted),
            max_span=self.settings.gaps.max_span,
        )

        wanted_entries = [self._to_report_stamp(s) for s in wanted]
        return GapReport(
            country_id=country.id,
            country_name=country.name,
            start_year=start_year,
            end_year=end_year,
            owned_stamps=[self._to_report_stamp(s) for s in owned],
            wanted_stamps=wanted_entries,
            wanted_by_year=self._group_by_year(wanted_entries),
            potential_gaps=analysis.missing,
        )

    def _stamps_in_window(self, country_id: str, start_year: int, end_year: int) -> list[Stamp]:
        result = []
        for stamp in self.library.stamps.values():
            country = self.library.collection_country(stamp)
            if country is None or country.id != country_id:
                continue
            if stamp.year_within(start_year, end_year):
                result.append(stamp)
        return result

    @staticmethod
    def _numbers(stamps: list[Stamp]) -> set[int]:
        numbers = set()
        for stamp in stamps:
            number = extract_numeric_part(stamp.catalog_number)
            if number is not None:
                numbers.add(number)
        return numbers

    def _to_report_stamp(self, stamp: Stamp) -> ReportStamp:
        return ReportStamp(
            id=stamp.id,
            catalog_number=stamp.catalog_number,
            display_catalog_number=self.library.display_catalog_number(stamp),
            year_start=stamp.year_start,
            year_end=stamp.year_end,
            denomination=stamp.denomination,
            color=stamp.color,
        )

    @staticmethod
    def _group_by_year(stamps: list[ReportStamp]) -> list[YearGroup]:
        grouped: dict[int, list[ReportStamp]] = defaultdict(list)
        for stamp in stamps:
            grouped[stamp.year_start or 0].append(stamp)
        return [YearGroup(year=year, stamps=grouped[year]) for year in sorted(grouped)]
