"""Gap detection over catalog numbers and stamp collections."""

from hinged.gaps.analyzer import GapAnalysis, analyze_gaps, compress_gaps_to_ranges
from hinged.gaps.models import GapReport, ReportStamp, YearGroup
from hinged.gaps.report import GapReportFinder, year_presets

__all__ = [
    # Numeric analysis
    "analyze_gaps",
    "compress_gaps_to_ranges",
    "GapAnalysis",
    # Stamp-level reports
    "GapReportFinder",
    "GapReport",
    "ReportStamp",
    "YearGroup",
    "year_presets",
]
