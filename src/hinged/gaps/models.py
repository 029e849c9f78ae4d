"""Data models for gap report results."""

from __future__ import annotations

from pydantic import BaseModel, Field

from hinged.gaps.analyzer import DEFAULT_DISPLAY_LIMIT, GapAnalysis
from hinged.models.mixins import YearRangeMixin


class ReportStamp(YearRangeMixin, BaseModel):
    """A stamp as listed in a gap report."""

    id: str
    catalog_number: str
    display_catalog_number: str
    year_start: int | None = None
    year_end: int | None = None
    denomination: str = ""
    color: str = ""


class YearGroup(BaseModel):
    """Wanted stamps issued in one year (0 when the year is unknown)."""

    year: int
    stamps: list[ReportStamp] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return str(self.year) if self.year else "Unknown year"


class GapReport(BaseModel):
    """Collection completeness for one country over a span of years."""

    country_id: str
    country_name: str
    start_year: int
    end_year: int
    owned_stamps: list[ReportStamp] = Field(default_factory=list)
    wanted_stamps: list[ReportStamp] = Field(default_factory=list)
    wanted_by_year: list[YearGroup] = Field(default_factory=list)
    potential_gaps: list[int] = Field(default_factory=list)

    @property
    def total_owned(self) -> int:
        return len(self.owned_stamps)

    @property
    def total_wanted(self) -> int:
        return len(self.wanted_stamps)

    @property
    def completion_percentage(self) -> float:
        """Owned share of owned + wanted, 0 when there are neither."""
        total = self.total_owned + self.total_wanted
        if total == 0:
            return 0.0
        return self.total_owned / total * 100

    @property
    def gap_count(self) -> int:
        return len(self.potential_gaps)

    @property
    def gap_analysis(self) -> GapAnalysis:
        return GapAnalysis(missing=self.potential_gaps)

    @property
    def compressed_gaps(self) -> list[str]:
        return self.gap_analysis.compressed_ranges

    def displayed_gaps(self, limit: int = DEFAULT_DISPLAY_LIMIT) -> tuple[list[str], int]:
        """Compressed labels for the first `limit` gaps and the hidden count."""
        return self.gap_analysis.displayed_ranges(limit)

    @property
    def year_range_label(self) -> str:
        return f"{self.start_year}-{self.end_year}"
