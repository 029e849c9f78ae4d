"""Whole-library backup and restore.

Backups are a single JSON document:
    {
        "version": 1,
        "exportDate": "2025-01-25T10:00:00Z",
        "appVersion": "1.0.42",
        "countries": [{"id": "...", "name": "...", "catalogPrefixes": {...}}],
        "collections": [{"id": "...", "countryId": "...", ...}],
        "albums": [{"id": "...", "collectionId": "...", ...}],
        "stamps": [{"id": "...", "albumId": "...", "catalogNumber": "C5", ...}]
    }

IDs inside a backup are fresh per export and only link records within the
file; restoring always creates new library IDs.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from hinged._version import __version__
from hinged.catalog import NaturalCatalogComparator
from hinged.enums import CatalogSystem, CenteringGrade, CollectionStatus, GumCondition, parse_enum
from hinged.errors import InvalidBackupError, UnsupportedBackupVersionError
from hinged.models import Album, Collection, Country, Stamp, Timestamp, new_id

if TYPE_CHECKING:
    from hinged.store import Library

BACKUP_VERSION = 1

BACKUP_EXTENSION = ".hingedbackup"


def _now() -> datetime:
    return datetime.now(UTC)


class CountryBackup(BaseModel):
    id: str
    name: str
    catalog_prefixes: dict[str, str] = Field(default_factory=dict, alias="catalogPrefixes")

    model_config = {"populate_by_name": True}


class CollectionBackup(BaseModel):
    id: str
    name: str
    description: str = ""
    catalog_system_raw: str = Field(default=CatalogSystem.SCOTT.value, alias="catalogSystemRaw")
    created_at: Timestamp = Field(default_factory=_now, alias="createdAt")
    sort_order: int = Field(default=0, alias="sortOrder")
    country_id: str | None = Field(default=None, alias="countryId")

    model_config = {"populate_by_name": True}


class AlbumBackup(BaseModel):
    id: str
    name: str
    description: str = ""
    created_at: Timestamp = Field(default_factory=_now, alias="createdAt")
    sort_order: int = Field(default=0, alias="sortOrder")
    collection_id: str = Field(alias="collectionId")

    model_config = {"populate_by_name": True}


class StampBackup(BaseModel):
    """A stamp in a backup. Image data is never written and ignored on restore."""

    id: str
    catalog_number: str = Field(alias="catalogNumber")
    year_start: int | None = Field(default=None, alias="yearStart")
    year_end: int | None = Field(default=None, alias="yearEnd")
    denomination: str = ""
    color: str = ""
    perforation_gauge: float | None = Field(default=None, alias="perforationGauge")
    watermark: str | None = None
    gum_condition_raw: str = Field(default=GumCondition.UNSPECIFIED.value, alias="gumConditionRaw")
    centering_grade_raw: str = Field(
        default=CenteringGrade.UNSPECIFIED.value, alias="centeringGradeRaw"
    )
    collection_status_raw: str = Field(
        default=CollectionStatus.WANTED.value, alias="collectionStatusRaw"
    )
    notes: str = ""
    purchase_price: float | None = Field(default=None, alias="purchasePrice")
    purchase_date: Timestamp | None = Field(default=None, alias="purchaseDate")
    acquisition_source: str = Field(default="", alias="acquisitionSource")
    created_at: Timestamp = Field(default_factory=_now, alias="createdAt")
    updated_at: Timestamp = Field(default_factory=_now, alias="updatedAt")
    album_id: str = Field(alias="albumId")
    country_id: str | None = Field(default=None, alias="countryId")

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def _migrate_year_of_issue(cls, data: Any) -> Any:
        # Older backups stored a single yearOfIssue
        if isinstance(data, dict) and data.get("yearOfIssue") is not None:
            data = {k: v for k, v in data.items() if k not in ("yearStart", "yearEnd")}
            data["yearStart"] = data.pop("yearOfIssue")
        return data


class HingedBackup(BaseModel):
    """A full library snapshot."""

    version: int
    export_date: Timestamp = Field(default_factory=_now, alias="exportDate")
    app_version: str = Field(default=__version__, alias="appVersion")
    countries: list[CountryBackup] = Field(default_factory=list)
    collections: list[CollectionBackup] = Field(default_factory=list)
    albums: list[AlbumBackup] = Field(default_factory=list)
    stamps: list[StampBackup] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class ImportMode(Enum):
    """How a restore treats existing library data."""

    REPLACE = "replace"  # Delete existing data first
    MERGE = "merge"  # Keep existing data, add new


@dataclass
class RestoreResult:
    """Per-kind counts from a restore."""

    countries_imported: int = 0
    countries_skipped: int = 0
    collections_imported: int = 0
    collections_skipped: int = 0
    albums_imported: int = 0
    albums_skipped: int = 0
    stamps_imported: int = 0
    stamps_skipped: int = 0

    @property
    def total_imported(self) -> int:
        return (
            self.countries_imported
            + self.collections_imported
            + self.albums_imported
            + self.stamps_imported
        )

    @property
    def total_skipped(self) -> int:
        return (
            self.countries_skipped
            + self.collections_skipped
            + self.albums_skipped
            + self.stamps_skipped
        )

    @property
    def summary(self) -> str:
        """One-line description of what was imported."""
        parts = []
        if self.collections_imported:
            parts.append(f"{self.collections_imported} collection(s)")
        if self.albums_imported:
            parts.append(f"{self.albums_imported} album(s)")
        if self.stamps_imported:
            parts.append(f"{self.stamps_imported} stamp(s)")
        if self.countries_imported:
            parts.append(f"{self.countries_imported} country/countries")

        if not parts:
            return "No data imported"
        return "Imported " + ", ".join(parts)


def _to_float(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def _to_decimal(value: float | None) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


def create_backup(library: Library) -> HingedBackup:
    """Snapshot the library into a backup document.

    Albums without a known collection and stamps without a known album
    are left out.
    """
    country_ids: dict[str, str] = {}
    collection_ids: dict[str, str] = {}
    album_ids: dict[str, str] = {}

    countries = []
    for country in sorted(library.countries.values(), key=lambda c: c.name):
        country_ids[country.id] = new_id()
        countries.append(
            CountryBackup(
                id=country_ids[country.id],
                name=country.name,
                catalog_prefixes=dict(country.catalog_prefixes),
            )
        )

    collections = []
    for collection in sorted(library.collections.values(), key=lambda c: c.sort_order):
        collection_ids[collection.id] = new_id()
        collections.append(
            CollectionBackup(
                id=collection_ids[collection.id],
                name=collection.name,
                description=collection.description,
                catalog_system_raw=collection.catalog_system.value,
                created_at=collection.created_at,
                sort_order=collection.sort_order,
                country_id=country_ids.get(collection.country_id or ""),
            )
        )

    albums = []
    for album in sorted(library.albums.values(), key=lambda a: a.sort_order):
        collection_id = collection_ids.get(album.collection_id)
        if collection_id is None:
            continue
        album_ids[album.id] = new_id()
        albums.append(
            AlbumBackup(
                id=album_ids[album.id],
                name=album.name,
                description=album.description,
                created_at=album.created_at,
                sort_order=album.sort_order,
                collection_id=collection_id,
            )
        )

    stamps = []
    ordered = NaturalCatalogComparator().sorted(
        library.stamps.values(), key=lambda s: s.catalog_number
    )
    for stamp in ordered:
        album_id = album_ids.get(stamp.album_id)
        if album_id is None:
            continue
        stamps.append(
            StampBackup(
                id=new_id(),
                catalog_number=stamp.catalog_number,
                year_start=stamp.year_start,
                year_end=stamp.year_end,
                denomination=stamp.denomination,
                color=stamp.color,
                perforation_gauge=_to_float(stamp.perforation_gauge),
                watermark=stamp.watermark,
                gum_condition_raw=stamp.gum_condition.value,
                centering_grade_raw=stamp.centering_grade.value,
                collection_status_raw=stamp.collection_status.value,
                notes=stamp.notes,
                purchase_price=_to_float(stamp.purchase_price),
                purchase_date=(
                    datetime(
                        stamp.purchase_date.year,
                        stamp.purchase_date.month,
                        stamp.purchase_date.day,
                        tzinfo=UTC,
                    )
                    if stamp.purchase_date
                    else None
                ),
                acquisition_source=stamp.acquisition_source,
                created_at=stamp.created_at,
                updated_at=stamp.updated_at,
                album_id=album_id,
                country_id=country_ids.get(stamp.country_id or ""),
            )
        )

    return HingedBackup(
        version=BACKUP_VERSION,
        countries=countries,
        collections=collections,
        albums=albums,
        stamps=stamps,
    )


def backup_to_json(backup: HingedBackup) -> str:
    """Serialize a backup as pretty-printed JSON with sorted keys."""
    data = backup.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(data, indent=2, sort_keys=True)


def backup_from_json(text: str | bytes) -> HingedBackup:
    """Parse and validate a backup document.

    Raises:
        UnsupportedBackupVersionError: If the backup is newer than this version.
        InvalidBackupError: If the text is not a valid backup.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidBackupError(f"Backup is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidBackupError("Backup root must be an object")

    version = data.get("version")
    if isinstance(version, int) and version > BACKUP_VERSION:
        raise UnsupportedBackupVersionError(version)

    try:
        backup = HingedBackup.model_validate(data)
    except ValidationError as e:
        raise InvalidBackupError(f"Backup data is invalid ({e.error_count()} errors)") from e

    # Versions given as "2" or 2.0 only show up after coercion
    if backup.version > BACKUP_VERSION:
        raise UnsupportedBackupVersionError(backup.version)
    return backup


def save_backup(backup: HingedBackup, path: Path) -> Path:
    """Write a backup file and return its path."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(backup_to_json(backup))
    return path


def load_backup(path: Path) -> HingedBackup:
    """Read a backup file. See `backup_from_json`."""
    return backup_from_json(path.read_bytes())


def restore_backup(library: Library, backup: HingedBackup, mode: ImportMode) -> RestoreResult:
    """Load a backup's records into the library.

    In replace mode the library is emptied first. In merge mode backup
    countries that match an existing country by name (ignoring case) are
    mapped onto it and counted as skipped. Albums and stamps whose parent
    is not in the backup are skipped.

    Args:
        library: Library to restore into.
        backup: Parsed backup.
        mode: Replace or merge.

    Returns:
        Counts of imported and skipped records.
    """
    result = RestoreResult()

    if mode is ImportMode.REPLACE:
        library.clear()

    country_map: dict[str, str] = {}
    collection_map: dict[str, str] = {}
    album_map: dict[str, str] = {}

    existing_names: set[str] = set()
    if mode is ImportMode.MERGE:
        for country in library.countries.values():
            existing_names.add(country.name.lower())
            for backup_country in backup.countries:
                if backup_country.name.lower() == country.name.lower():
                    country_map[backup_country.id] = country.id

    for backup_country in backup.countries:
        if mode is ImportMode.MERGE and backup_country.name.lower() in existing_names:
            result.countries_skipped += 1
            continue
        country = library.add_country(
            Country(name=backup_country.name, catalog_prefixes=dict(backup_country.catalog_prefixes))
        )
        country_map[backup_country.id] = country.id
        result.countries_imported += 1

    for backup_collection in backup.collections:
        collection = library.add_collection(
            Collection(
                name=backup_collection.name,
                description=backup_collection.description,
                catalog_system=parse_enum(
                    CatalogSystem, backup_collection.catalog_system_raw, CatalogSystem.SCOTT
                ),
                country_id=country_map.get(backup_collection.country_id or ""),
                created_at=backup_collection.created_at,
                sort_order=backup_collection.sort_order,
            )
        )
        collection_map[backup_collection.id] = collection.id
        result.collections_imported += 1

    for backup_album in backup.albums:
        collection_id = collection_map.get(backup_album.collection_id)
        if collection_id is None:
            result.albums_skipped += 1
            continue
        album = library.add_album(
            Album(
                name=backup_album.name,
                description=backup_album.description,
                collection_id=collection_id,
                created_at=backup_album.created_at,
                sort_order=backup_album.sort_order,
            )
        )
        album_map[backup_album.id] = album.id
        result.albums_imported += 1

    for backup_stamp in backup.stamps:
        album_id = album_map.get(backup_stamp.album_id)
        if album_id is None:
            result.stamps_skipped += 1
            continue
        library.add_stamp(
            Stamp(
                catalog_number=backup_stamp.catalog_number,
                year_start=backup_stamp.year_start,
                year_end=backup_stamp.year_end,
                denomination=backup_stamp.denomination,
                color=backup_stamp.color,
                perforation_gauge=_to_decimal(backup_stamp.perforation_gauge),
                watermark=backup_stamp.watermark,
                gum_condition=parse_enum(
                    GumCondition, backup_stamp.gum_condition_raw, GumCondition.UNSPECIFIED
                ),
                centering_grade=parse_enum(
                    CenteringGrade, backup_stamp.centering_grade_raw, CenteringGrade.UNSPECIFIED
                ),
                collection_status=parse_enum(
                    CollectionStatus, backup_stamp.collection_status_raw, CollectionStatus.WANTED
                ),
                notes=backup_stamp.notes,
                purchase_price=_to_decimal(backup_stamp.purchase_price),
                purchase_date=backup_stamp.purchase_date.date() if backup_stamp.purchase_date else None,
                acquisition_source=backup_stamp.acquisition_source,
                created_at=backup_stamp.created_at,
                updated_at=backup_stamp.updated_at,
                album_id=album_id,
                country_id=country_map.get(backup_stamp.country_id or ""),
            )
        )
        result.stamps_imported += 1

    return result
