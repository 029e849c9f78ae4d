"""Mixin classes for Pydantic models.

Provides reusable properties for common model patterns.
"""

from __future__ import annotations

import sys


class YearRangeMixin:
    """Mixin providing display and sort helpers for an issue-year range.

    Requires the model to have optional year_start and year_end fields.

    Example:
        ```python
        class Issue(YearRangeMixin, BaseModel):
            year_start: int | None = None
            year_end: int | None = None

        Issue(year_start=1958, year_end=1964).display_year  # "1958-1964"
        ```
    """

    year_start: int | None
    year_end: int | None

    @property
    def display_year(self) -> str:
        """Single year, "start-end" range, or empty when unknown."""
        if self.year_start is None:
            return ""
        if self.year_end is not None and self.year_end != self.year_start:
            return f"{self.year_start}-{self.year_end}"
        return str(self.year_start)

    @property
    def year_for_sort(self) -> int:
        """Start year for sorting, with unknown years sorted last."""
        return self.year_start if self.year_start is not None else sys.maxsize

    def year_within(self, start_year: int | None, end_year: int | None) -> bool:
        """Check the start year against an inclusive window.

        A missing start year counts as 0 against the lower bound and as
        unbounded against the upper bound, so undated stamps only pass
        windows that leave one side open.
        """
        if start_year is not None and (self.year_start or 0) < start_year:
            return False
        if end_year is not None and self.year_for_sort > end_year:
            return False
        return True
