"""Single-file JSON library store.

The whole library lives in one file, `hinged.library.json` next to the
config file or executable by default, so it can be copied around as-is.

File structure:
    {
        "_meta": {
            "version": 1,
            "created_at": "2025-01-25T10:00:00+00:00"
        },
        "countries": [{"id": "...", "name": "Canada", "catalog_prefixes": {...}}],
        "collections": [{"id": "...", "name": "...", "country_id": "...", ...}],
        "albums": [{"id": "...", "collection_id": "...", ...}],
        "stamps": [{"id": "...", "album_id": "...", "catalog_number": "C5", ...}]
    }

Records point at their parents by ID. Removing a collection removes its
albums and their stamps; removing a country only detaches it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from hinged.countries import COUNTRIES_WITH_PREFIXES, OTHER_COUNTRIES
from hinged.enums import CatalogSystem, CollectionStatus
from hinged.errors import HingedValueError, LibraryLoadError, RecordNotFoundError
from hinged.models import Album, Collection, Country, Stamp, as_utc

# Library file version for future migrations
LIBRARY_VERSION = 1

LIBRARY_FILENAME = "hinged.library.json"

# Largest span populate_range will create in one go
MAX_POPULATE_SPAN = 5000


@dataclass
class StampCounts:
    """Stamp tallies for an album or collection.

    Anything not owned counts as wanted here, matching the sidebar badges.
    """

    total: int = 0
    owned: int = 0

    @property
    def wanted(self) -> int:
        return self.total - self.owned


def _apply_fields(record: BaseModel, fields: dict[str, Any], protected: tuple[str, ...]) -> None:
    """Set validated field values on a record."""
    for name in fields:
        if name not in type(record).model_fields or name in protected:
            raise HingedValueError(f"Cannot update field {name!r}")
    try:
        updated = type(record).model_validate({**record.model_dump(), **fields})
    except ValidationError as e:
        raise HingedValueError(f"Invalid value for {', '.join(fields)}") from e
    for name in fields:
        setattr(record, name, getattr(updated, name))


class Library:
    """In-memory arena of records with JSON persistence.

    Construct with a path and call `load()`, or use `Library.open(path)`.
    A library with no path is purely in-memory and `save()` is a no-op.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self.created_at = datetime.now(UTC)
        self.countries: dict[str, Country] = {}
        self.collections: dict[str, Collection] = {}
        self.albums: dict[str, Album] = {}
        self.stamps: dict[str, Stamp] = {}

    @classmethod
    def open(cls, path: Path) -> Library:
        """Open the library file at path and load it."""
        library = cls(path)
        library.load()
        return library

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Load records from disk. A missing file leaves the library empty.

        Raises:
            LibraryLoadError: If the file exists but can't be read or parsed.
        """
        if self.path is None or not self.path.exists():
            return

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise LibraryLoadError(self.path, str(e)) from e

        if not isinstance(data, dict):
            raise LibraryLoadError(self.path, "not a library file")

        meta = data.get("_meta", {})
        if not isinstance(meta, dict):
            raise LibraryLoadError(self.path, "_meta header is not an object")

        version = meta.get("version", LIBRARY_VERSION)
        if not isinstance(version, int) or isinstance(version, bool):
            raise LibraryLoadError(self.path, f"library version {version!r} is not a number")
        if version > LIBRARY_VERSION:
            raise LibraryLoadError(self.path, f"library version {version} is newer than supported")

        for section in ("countries", "collections", "albums", "stamps"):
            if not isinstance(data.get(section, []), list):
                raise LibraryLoadError(self.path, f"{section} is not a list")

        try:
            self._load_records(data)
        except ValidationError as e:
            raise LibraryLoadError(self.path, f"invalid record data ({e.error_count()} errors)") from e

    def _load_records(self, data: dict[str, Any]) -> None:
        created_at = data.get("_meta", {}).get("created_at")
        if isinstance(created_at, str):
            try:
                self.created_at = as_utc(datetime.fromisoformat(created_at))
            except ValueError:
                pass  # Keep the load time

        self.countries = {c.id: c for c in map(Country.model_validate, data.get("countries", []))}
        self.collections = {
            c.id: c for c in map(Collection.model_validate, data.get("collections", []))
        }
        self.albums = {a.id: a for a in map(Album.model_validate, data.get("albums", []))}
        self.stamps = {s.id: s for s in map(Stamp.model_validate, data.get("stamps", []))}

    def to_dict(self) -> dict[str, Any]:
        """Serialize the library to a JSON-ready dict."""
        return {
            "_meta": {
                "version": LIBRARY_VERSION,
                "created_at": self.created_at.isoformat(),
            },
            "countries": [c.model_dump(mode="json") for c in self.countries.values()],
            "collections": [c.model_dump(mode="json") for c in self.collections.values()],
            "albums": [a.model_dump(mode="json") for a in self.albums.values()],
            "stamps": [s.model_dump(mode="json") for s in self.stamps.values()],
        }

    def save(self) -> None:
        """Write the library to disk."""
        if self.path is None:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    def clear(self) -> None:
        """Delete every record."""
        self.stamps.clear()
        self.albums.clear()
        self.collections.clear()
        self.countries.clear()

    # ------------------------------------------------------------------
    # Countries
    # ------------------------------------------------------------------

    def add_country(self, country: Country) -> Country:
        self.countries[country.id] = country
        return country

    def get_country(self, country_id: str) -> Country:
        try:
            return self.countries[country_id]
        except KeyError:
            raise RecordNotFoundError("country", country_id) from None

    def find_country(self, name: str) -> Country | None:
        """Find a country by name, ignoring case."""
        wanted = name.strip().lower()
        for country in self.countries.values():
            if country.name.lower() == wanted:
                return country
        return None

    def list_countries(self) -> list[Country]:
        return sorted(self.countries.values(), key=lambda c: c.name.lower())

    def update_country(self, country_id: str, **fields: Any) -> Country:
        country = self.get_country(country_id)
        _apply_fields(country, fields, protected=("id",))
        return country

    def remove_country(self, country_id: str) -> None:
        """Remove a country, detaching it from collections and stamps."""
        self.get_country(country_id)
        for collection in self.collections.values():
            if collection.country_id == country_id:
                collection.country_id = None
        for stamp in self.stamps.values():
            if stamp.country_id == country_id:
                stamp.country_id = None
        del self.countries[country_id]

    def ensure_default_countries(self) -> int:
        """Add any built-in countries that are missing.

        Returns:
            Number of countries inserted.
        """
        existing = {c.name.lower() for c in self.countries.values()}
        inserted = 0

        for name, prefixes in COUNTRIES_WITH_PREFIXES:
            if name.lower() in existing:
                continue
            self.add_country(
                Country(name=name, catalog_prefixes={k.value: v for k, v in prefixes.items()})
            )
            inserted += 1

        for name in OTHER_COUNTRIES:
            if name.lower() in existing:
                continue
            self.add_country(Country(name=name))
            inserted += 1

        return inserted

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def add_collection(self, collection: Collection) -> Collection:
        if collection.country_id is not None:
            self.get_country(collection.country_id)
        self.collections[collection.id] = collection
        return collection

    def get_collection(self, collection_id: str) -> Collection:
        try:
            return self.collections[collection_id]
        except KeyError:
            raise RecordNotFoundError("collection", collection_id) from None

    def list_collections(self) -> list[Collection]:
        return sorted(self.collections.values(), key=lambda c: (c.sort_order, c.name.lower()))

    def update_collection(self, collection_id: str, **fields: Any) -> Collection:
        collection = self.get_collection(collection_id)
        if fields.get("country_id") is not None:
            self.get_country(fields["country_id"])
        _apply_fields(collection, fields, protected=("id", "created_at"))
        return collection

    def remove_collection(self, collection_id: str) -> None:
        """Remove a collection together with its albums and their stamps."""
        self.get_collection(collection_id)
        for album in self.albums_in(collection_id):
            self.remove_album(album.id)
        del self.collections[collection_id]

    # ------------------------------------------------------------------
    # Albums
    # ------------------------------------------------------------------

    def add_album(self, album: Album) -> Album:
        self.get_collection(album.collection_id)
        self.albums[album.id] = album
        return album

    def get_album(self, album_id: str) -> Album:
        try:
            return self.albums[album_id]
        except KeyError:
            raise RecordNotFoundError("album", album_id) from None

    def albums_in(self, collection_id: str) -> list[Album]:
        albums = [a for a in self.albums.values() if a.collection_id == collection_id]
        return sorted(albums, key=lambda a: (a.sort_order, a.name.lower()))

    def update_album(self, album_id: str, **fields: Any) -> Album:
        album = self.get_album(album_id)
        if "collection_id" in fields:
            self.get_collection(fields["collection_id"])
        _apply_fields(album, fields, protected=("id", "created_at"))
        return album

    def remove_album(self, album_id: str) -> None:
        """Remove an album and every stamp in it."""
        self.get_album(album_id)
        for stamp_id in [s.id for s in self.stamps.values() if s.album_id == album_id]:
            del self.stamps[stamp_id]
        del self.albums[album_id]

    # ------------------------------------------------------------------
    # Stamps
    # ------------------------------------------------------------------

    def add_stamp(self, stamp: Stamp) -> Stamp:
        self.get_album(stamp.album_id)
        if stamp.country_id is not None:
            self.get_country(stamp.country_id)
        self.stamps[stamp.id] = stamp
        return stamp

    def get_stamp(self, stamp_id: str) -> Stamp:
        try:
            return self.stamps[stamp_id]
        except KeyError:
            raise RecordNotFoundError("stamp", stamp_id) from None

    def update_stamp(self, stamp_id: str, **fields: Any) -> Stamp:
        """Change fields of a stamp and bump its modification time.

        Raises:
            RecordNotFoundError: If the stamp, a new album or a new country
                does not exist.
            HingedValueError: If a field name is not a stamp field.
        """
        stamp = self.get_stamp(stamp_id)
        if "album_id" in fields:
            self.get_album(fields["album_id"])
        if fields.get("country_id") is not None:
            self.get_country(fields["country_id"])
        _apply_fields(stamp, fields, protected=("id", "created_at", "updated_at"))
        stamp.mark_updated()
        return stamp

    def remove_stamp(self, stamp_id: str) -> None:
        self.get_stamp(stamp_id)
        del self.stamps[stamp_id]

    def list_stamps(
        self,
        album_id: str | None = None,
        collection_id: str | None = None,
    ) -> list[Stamp]:
        """List stamps, optionally restricted to one album or collection."""
        stamps = list(self.stamps.values())
        if album_id is not None:
            stamps = [s for s in stamps if s.album_id == album_id]
        if collection_id is not None:
            album_ids = {a.id for a in self.albums_in(collection_id)}
            stamps = [s for s in stamps if s.album_id in album_ids]
        return stamps

    def populate_range(
        self,
        album_id: str,
        start: int,
        end: int,
        prefix: str = "",
        status: CollectionStatus = CollectionStatus.WANTED,
    ) -> list[Stamp]:
        """Create placeholder stamps for a run of catalog numbers.

        Args:
            album_id: Album to add the stamps to.
            start: First number (must be positive).
            end: Last number, inclusive.
            prefix: Series prefix such as "C" for airmail.
            status: Collection status for the new stamps.

        Returns:
            The created stamps, in number order.

        Raises:
            HingedValueError: If the range is empty, starts below 1 or spans
                more than MAX_POPULATE_SPAN numbers.
        """
        self.get_album(album_id)
        if start <= 0 or end < start or (end - start) > MAX_POPULATE_SPAN:
            raise HingedValueError(
                f"Invalid range {start}-{end}: start must be positive, end at least start, "
                f"and the span at most {MAX_POPULATE_SPAN}"
            )

        created = []
        for number in range(start, end + 1):
            stamp = Stamp(
                catalog_number=f"{prefix}{number}",
                collection_status=status,
                album_id=album_id,
            )
            created.append(self.add_stamp(stamp))
        return created

    # ------------------------------------------------------------------
    # Relationship helpers
    # ------------------------------------------------------------------

    def collection_for_stamp(self, stamp: Stamp) -> Collection | None:
        album = self.albums.get(stamp.album_id)
        if album is None:
            return None
        return self.collections.get(album.collection_id)

    def collection_country(self, stamp: Stamp) -> Country | None:
        """The collection's country if set, otherwise the stamp's own."""
        collection = self.collection_for_stamp(stamp)
        if collection is not None and collection.country_id is not None:
            country = self.countries.get(collection.country_id)
            if country is not None:
                return country
        if stamp.country_id is not None:
            return self.countries.get(stamp.country_id)
        return None

    def catalog_system_for(self, stamp: Stamp) -> CatalogSystem:
        collection = self.collection_for_stamp(stamp)
        return collection.catalog_system if collection else CatalogSystem.SCOTT

    def display_catalog_number(self, stamp: Stamp) -> str:
        """Catalog number with the country's catalog prefix, e.g. "CAN 5"."""
        country = self.collection_country(stamp)
        prefix = country.prefix_for(self.catalog_system_for(stamp)) if country else None
        if not prefix:
            return stamp.catalog_number
        return f"{prefix} {stamp.catalog_number}"

    def counts_for_album(self, album_id: str) -> StampCounts:
        stamps = self.list_stamps(album_id=album_id)
        return StampCounts(total=len(stamps), owned=sum(1 for s in stamps if s.is_owned))

    def counts_for_collection(self, collection_id: str) -> StampCounts:
        stamps = self.list_stamps(collection_id=collection_id)
        return StampCounts(total=len(stamps), owned=sum(1 for s in stamps if s.is_owned))
