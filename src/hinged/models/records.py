"""Data models for library records.

Records reference their parents by ID (album -> collection -> country)
rather than holding object references; the Library store resolves them
and applies cascade rules on removal.
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Annotated
from uuid import uuid4

from pydantic import AfterValidator, BaseModel, Field

from hinged.enums import CatalogSystem, CenteringGrade, CollectionStatus, GumCondition
from hinged.models.mixins import YearRangeMixin


def new_id() -> str:
    """Generate a fresh record ID."""
    return uuid4().hex


def _now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


Timestamp = Annotated[datetime, AfterValidator(as_utc)]


class Country(BaseModel):
    """A stamp-issuing country with per-catalog prefix codes."""

    id: str = Field(default_factory=new_id)
    name: str
    catalog_prefixes: dict[str, str] = Field(default_factory=dict)

    def prefix_for(self, system: CatalogSystem) -> str | None:
        """Get the country's prefix in a catalog system, if it has one."""
        return self.catalog_prefixes.get(system.value)

    def set_prefix(self, system: CatalogSystem, prefix: str | None) -> None:
        """Set or clear the country's prefix for a catalog system."""
        if prefix is None:
            self.catalog_prefixes.pop(system.value, None)
        else:
            self.catalog_prefixes[system.value] = prefix


class Collection(BaseModel):
    """Top-level grouping of albums, usually one country in one catalog."""

    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    catalog_system: CatalogSystem = CatalogSystem.SCOTT
    country_id: str | None = None
    created_at: Timestamp = Field(default_factory=_now)
    sort_order: int = 0

    @property
    def is_worldwide(self) -> bool:
        """A collection without a country spans the whole world."""
        return self.country_id is None


class Album(BaseModel):
    """A page grouping of stamps inside a collection."""

    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    collection_id: str
    created_at: Timestamp = Field(default_factory=_now)
    sort_order: int = 0


class Stamp(YearRangeMixin, BaseModel):
    """A single catalogued stamp, owned or wanted."""

    id: str = Field(default_factory=new_id)
    catalog_number: str
    year_start: int | None = None
    year_end: int | None = None
    denomination: str = ""
    color: str = ""
    perforation_gauge: Decimal | None = None
    watermark: str | None = None
    gum_condition: GumCondition = GumCondition.UNSPECIFIED
    centering_grade: CenteringGrade = CenteringGrade.UNSPECIFIED
    collection_status: CollectionStatus = CollectionStatus.OWNED
    notes: str = ""
    purchase_price: Decimal | None = None
    purchase_date: date | None = None
    acquisition_source: str = ""
    created_at: Timestamp = Field(default_factory=_now)
    updated_at: Timestamp = Field(default_factory=_now)
    album_id: str
    # Only used by worldwide collections; otherwise the collection's country applies
    country_id: str | None = None

    @property
    def is_owned(self) -> bool:
        return self.collection_status is CollectionStatus.OWNED

    @property
    def condition_shorthand(self) -> str:
        """Gum and centering shorthand, e.g. "MNH VF"."""
        return f"{self.gum_condition.shorthand} {self.centering_grade.shorthand}"

    def mark_updated(self) -> None:
        """Bump the modification timestamp."""
        self.updated_at = _now()
