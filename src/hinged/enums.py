"""Enumerations shared by records, filters, CSV and backups.

Member values are the raw strings stored on disk and in CSV files, so they
must never change.
"""

from __future__ import annotations

from enum import Enum
from typing import TypeVar


class CatalogSystem(str, Enum):
    """Stamp catalog used to number a collection."""

    SCOTT = "scott"
    STANLEY_GIBBONS = "stanleyGibbons"
    MICHEL = "michel"
    YVERT_TELLIER = "yvertTellier"
    SAKURA = "sakura"
    FACIT = "facit"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _CATALOG_DISPLAY[self][0]

    @property
    def prefix(self) -> str:
        """Short abbreviation of the catalog ("Sc", "SG", ...)."""
        return _CATALOG_DISPLAY[self][1]

    @property
    def catalog_number_label(self) -> str:
        """Column label for catalog numbers in this system."""
        return _CATALOG_DISPLAY[self][2]


_CATALOG_DISPLAY: dict[CatalogSystem, tuple[str, str, str]] = {
    CatalogSystem.SCOTT: ("Scott", "Sc", "Scott #"),
    CatalogSystem.STANLEY_GIBBONS: ("Stanley Gibbons", "SG", "SG #"),
    CatalogSystem.MICHEL: ("Michel", "Mi", "Michel #"),
    CatalogSystem.YVERT_TELLIER: ("Yvert et Tellier", "YT", "Y&T #"),
    CatalogSystem.SAKURA: ("Sakura", "Sk", "Sakura #"),
    CatalogSystem.FACIT: ("Facit", "Fa", "Facit #"),
    CatalogSystem.OTHER: ("Other", "", "Catalog #"),
}


class GumCondition(str, Enum):
    """State of the gum on the back of a stamp."""

    UNSPECIFIED = "unspecified"
    MINT_NEVER_HINGED = "mintNeverHinged"
    MINT_LIGHTLY_HINGED = "mintLightlyHinged"
    MINT_HINGED = "mintHinged"
    HINGE_REMNANT = "hingeRemnant"
    ORIGINAL_GUM = "originalGum"
    NO_GUM = "noGum"
    REGUMMED = "regummed"
    USED = "used"
    CANCELLED_TO_ORDER = "cancelledToOrder"

    @property
    def display_name(self) -> str:
        return _GUM_DISPLAY[self][0]

    @property
    def shorthand(self) -> str:
        return _GUM_DISPLAY[self][1]


_GUM_DISPLAY: dict[GumCondition, tuple[str, str]] = {
    GumCondition.UNSPECIFIED: ("Unspecified", "—"),
    GumCondition.MINT_NEVER_HINGED: ("Mint Never Hinged", "MNH"),
    GumCondition.MINT_LIGHTLY_HINGED: ("Mint Lightly Hinged", "MLH"),
    GumCondition.MINT_HINGED: ("Mint Hinged", "MH"),
    GumCondition.HINGE_REMNANT: ("Hinge Remnant", "HR"),
    GumCondition.ORIGINAL_GUM: ("Original Gum", "OG"),
    GumCondition.NO_GUM: ("No Gum", "NG"),
    GumCondition.REGUMMED: ("Regummed", "RG"),
    GumCondition.USED: ("Used", "U"),
    GumCondition.CANCELLED_TO_ORDER: ("Cancelled to Order", "CTO"),
}


class CenteringGrade(str, Enum):
    """How well the design is centered within the perforations."""

    UNSPECIFIED = "unspecified"
    SUPERB = "superb"
    EXTREMELY_FINE = "extremelyFine"
    VERY_FINE = "veryFine"
    FINE_VERY_FINE = "fineVeryFine"
    FINE = "fine"
    VERY_GOOD = "veryGood"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"
    SPACE_FILLER = "spaceFiller"

    @property
    def display_name(self) -> str:
        return _GRADE_DISPLAY[self][0]

    @property
    def shorthand(self) -> str:
        return _GRADE_DISPLAY[self][1]


_GRADE_DISPLAY: dict[CenteringGrade, tuple[str, str]] = {
    CenteringGrade.UNSPECIFIED: ("Unspecified", "—"),
    CenteringGrade.SUPERB: ("Superb", "S"),
    CenteringGrade.EXTREMELY_FINE: ("Extremely Fine", "XF"),
    CenteringGrade.VERY_FINE: ("Very Fine", "VF"),
    CenteringGrade.FINE_VERY_FINE: ("Fine-Very Fine", "FVF"),
    CenteringGrade.FINE: ("Fine", "F"),
    CenteringGrade.VERY_GOOD: ("Very Good", "VG"),
    CenteringGrade.GOOD: ("Good", "G"),
    CenteringGrade.AVERAGE: ("Average", "AVG"),
    CenteringGrade.POOR: ("Poor", "P"),
    CenteringGrade.SPACE_FILLER: ("Space Filler", "SF"),
}


class CollectionStatus(str, Enum):
    """Whether a stamp is owned, wanted or deliberately skipped."""

    OWNED = "owned"
    WANTED = "wanted"
    NOT_COLLECTING = "notCollecting"

    @property
    def display_name(self) -> str:
        return {
            CollectionStatus.OWNED: "Owned",
            CollectionStatus.WANTED: "Wanted",
            CollectionStatus.NOT_COLLECTING: "Not Collecting",
        }[self]

    @property
    def short_display_name(self) -> str:
        return {
            CollectionStatus.OWNED: "Owned",
            CollectionStatus.WANTED: "Want",
            CollectionStatus.NOT_COLLECTING: "Skip",
        }[self]


class SmartCollectionType(str, Enum):
    """Saved filters evaluated across the whole library."""

    ALL_OWNED = "allOwned"
    WANT_LIST = "wantList"
    NOT_COLLECTING = "notCollecting"
    RECENT_ADDITIONS = "recentAdditions"

    @property
    def display_name(self) -> str:
        return {
            SmartCollectionType.ALL_OWNED: "All Owned",
            SmartCollectionType.WANT_LIST: "Want List",
            SmartCollectionType.NOT_COLLECTING: "Not Collecting",
            SmartCollectionType.RECENT_ADDITIONS: "Recent Additions",
        }[self]


E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], value: str | None, default: E) -> E:
    """Look up an enum member by raw value, returning default when unknown."""
    if not value:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        return default
