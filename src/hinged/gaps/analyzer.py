"""Numeric gap analysis over sets of catalog numbers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

# Spans at or above this are considered too sparse to enumerate
DEFAULT_MAX_SPAN = 1000

# Missing numbers listed before the "...and N more" line
DEFAULT_DISPLAY_LIMIT = 50


def compress_gaps_to_ranges(values: Iterable[int]) -> list[str]:
    """Collapse numbers into "#n" and "#a-b" labels.

    Args:
        values: Numbers in ascending order.

    Returns:
        One label per run of consecutive numbers.
    """
    ranges: list[str] = []
    run_start: int | None = None
    run_end: int | None = None

    for value in values:
        if run_start is None:
            run_start = run_end = value
        elif value == run_end + 1:
            run_end = value
        else:
            ranges.append(_format_run(run_start, run_end))
            run_start = run_end = value

    if run_start is not None:
        ranges.append(_format_run(run_start, run_end))

    return ranges


def _format_run(start: int, end: int | None) -> str:
    if end is None or end == start:
        return f"#{start}"
    return f"#{start}-{end}"


@dataclass(frozen=True)
class GapAnalysis:
    """Missing numbers between the lowest and highest known number."""

    missing: list[int] = field(default_factory=list)

    @property
    def has_gaps(self) -> bool:
        return bool(self.missing)

    @property
    def compressed_ranges(self) -> list[str]:
        """All missing numbers as "#n" / "#a-b" labels."""
        return compress_gaps_to_ranges(self.missing)

    def displayed_ranges(self, limit: int = DEFAULT_DISPLAY_LIMIT) -> tuple[list[str], int]:
        """Labels for the first `limit` missing numbers.

        Returns:
            The labels, and how many missing numbers were left out.
        """
        shown = self.missing[: max(limit, 0)]
        return compress_gaps_to_ranges(shown), len(self.missing) - len(shown)


def analyze_gaps(
    owned: Iterable[int],
    wanted: Iterable[int],
    max_span: int = DEFAULT_MAX_SPAN,
) -> GapAnalysis:
    """Find numbers nobody has recorded between the lowest and highest known.

    Owned and wanted numbers both count as known. When the highest minus
    the lowest reaches `max_span`, the numbering is too sparse to be useful
    and no gaps are reported.

    Args:
        owned: Numbers of owned stamps.
        wanted: Numbers of wanted stamps.
        max_span: Span cap for enumerating missing numbers.

    Returns:
        The analysis, with missing numbers ascending.
    """
    known = set(owned) | set(wanted)
    if not known:
        return GapAnalysis()

    low, high = min(known), max(known)
    if high - low >= max_span:
        return GapAnalysis()

    return GapAnalysis(missing=[n for n in range(low, high + 1) if n not in known])
