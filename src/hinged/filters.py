"""Stamp list filtering and smart collections."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from pydantic import BaseModel

from hinged.catalog import NaturalCatalogComparator, catalog_number_in_range
from hinged.enums import CenteringGrade, CollectionStatus, GumCondition, SmartCollectionType

if TYPE_CHECKING:
    from hinged.models import Stamp
    from hinged.store import Library

# Default window for the Recent Additions smart collection
RECENT_ADDITIONS_DAYS = 30


class StampFilter(BaseModel):
    """Criteria for narrowing down a stamp list.

    Empty strings and None mean "no constraint".
    """

    search_text: str = ""
    gum_condition: GumCondition | None = None
    centering_grade: CenteringGrade | None = None
    country_id: str | None = None
    collection_status: CollectionStatus | None = None
    year_start: int | None = None
    year_end: int | None = None
    catalog_start: str = ""
    catalog_end: str = ""

    @property
    def has_active_filters(self) -> bool:
        """Whether any filter other than the search text is set."""
        return (
            self.gum_condition is not None
            or self.centering_grade is not None
            or self.country_id is not None
            or self.collection_status is not None
            or self.year_start is not None
            or self.year_end is not None
            or bool(self.catalog_start)
            or bool(self.catalog_end)
        )

    def clear(self) -> None:
        """Reset every filter except the search text."""
        self.gum_condition = None
        self.centering_grade = None
        self.country_id = None
        self.collection_status = None
        self.year_start = None
        self.year_end = None
        self.catalog_start = ""
        self.catalog_end = ""

    def catalog_number_in_range(self, catalog_number: str) -> bool:
        return catalog_number_in_range(catalog_number, self.catalog_start, self.catalog_end)

    def matches(self, library: Library, stamp: Stamp) -> bool:
        """Check a single stamp against every active criterion."""
        country = library.collection_country(stamp)

        if self.search_text:
            search = self.search_text.lower()
            if not (
                search in stamp.catalog_number.lower()
                or (country is not None and search in country.name.lower())
                or search in stamp.display_year
            ):
                return False

        if self.gum_condition is not None and stamp.gum_condition is not self.gum_condition:
            return False
        if self.centering_grade is not None and stamp.centering_grade is not self.centering_grade:
            return False
        if self.country_id is not None and (country is None or country.id != self.country_id):
            return False
        if (
            self.collection_status is not None
            and stamp.collection_status is not self.collection_status
        ):
            return False
        if not stamp.year_within(self.year_start, self.year_end):
            return False
        if (self.catalog_start or self.catalog_end) and not self.catalog_number_in_range(
            stamp.catalog_number
        ):
            return False
        return True

    def apply(self, library: Library, stamps: list[Stamp]) -> list[Stamp]:
        """Filter stamps and sort them naturally by catalog number."""
        matching = [s for s in stamps if self.matches(library, s)]
        return NaturalCatalogComparator().sorted(matching, key=lambda s: s.catalog_number)


def smart_collection(
    library: Library,
    collection_type: SmartCollectionType,
    now: datetime | None = None,
    recent_days: int = RECENT_ADDITIONS_DAYS,
) -> list[Stamp]:
    """Evaluate a smart collection over the whole library.

    Args:
        library: Library to search.
        collection_type: Which saved predicate to apply.
        now: Reference time for Recent Additions (defaults to now, UTC).
        recent_days: Size of the Recent Additions window.

    Returns:
        Matching stamps, sorted naturally by catalog number.
    """
    stamps = list(library.stamps.values())

    if collection_type is SmartCollectionType.ALL_OWNED:
        stamps = [s for s in stamps if s.collection_status is CollectionStatus.OWNED]
    elif collection_type is SmartCollectionType.WANT_LIST:
        stamps = [s for s in stamps if s.collection_status is CollectionStatus.WANTED]
    elif collection_type is SmartCollectionType.NOT_COLLECTING:
        stamps = [s for s in stamps if s.collection_status is CollectionStatus.NOT_COLLECTING]
    elif collection_type is SmartCollectionType.RECENT_ADDITIONS:
        cutoff = (now or datetime.now(UTC)) - timedelta(days=recent_days)
        stamps = [s for s in stamps if s.created_at >= cutoff]

    return NaturalCatalogComparator().sorted(stamps, key=lambda s: s.catalog_number)
