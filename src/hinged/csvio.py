"""CSV export and import of stamp lists."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from hinged.enums import CenteringGrade, CollectionStatus, GumCondition, parse_enum
from hinged.errors import CSVImportError
from hinged.models import Stamp

if TYPE_CHECKING:
    from hinged.store import Library

CSV_HEADER = [
    "Catalog Number",
    "Country",
    "Year",
    "Denomination",
    "Color",
    "Gum Condition",
    "Centering Grade",
    "Status",
    "Notes",
]

# Column -> accepted header names, display header first
_COLUMN_ALIASES: dict[str, tuple[str, str]] = {
    "catalog_number": ("Catalog Number", "catalogNumber"),
    "year": ("Year", "yearOfIssue"),
    "denomination": ("Denomination", "denomination"),
    "color": ("Color", "color"),
    "status": ("Status", "collectionStatus"),
    "gum_condition": ("Gum Condition", "gumCondition"),
    "centering_grade": ("Centering Grade", "centeringGrade"),
    "notes": ("Notes", "notes"),
}

_OWNED_VALUES = {"TRUE", "YES", "1", "OWNED"}
_WANTED_VALUES = {"FALSE", "NO", "0", "WANTED"}
_NOT_COLLECTING_VALUES = {"NOTCOLLECTING", "SKIP"}


class DuplicateAction(Enum):
    """What to do with a row whose catalog number already exists in the album."""

    SKIP = "skip"
    UPDATE = "update"
    CREATE = "create"


@dataclass
class ImportSummary:
    """Counts from a CSV import."""

    imported: int = 0
    updated: int = 0
    skipped: int = 0

    def __str__(self) -> str:
        return f"{self.imported} imported, {self.updated} updated, {self.skipped} skipped"


def export_csv(library: Library, stamps: list[Stamp]) -> str:
    """Render stamps as CSV text with the standard header.

    Enum columns carry their raw values so the file can be imported again.
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for stamp in stamps:
        country = library.collection_country(stamp)
        writer.writerow(
            [
                stamp.catalog_number,
                country.name if country else "",
                stamp.display_year,
                stamp.denomination,
                stamp.color,
                stamp.gum_condition.value,
                stamp.centering_grade.value,
                stamp.collection_status.value,
                stamp.notes,
            ]
        )

    return output.getvalue()


def save_csv(library: Library, stamps: list[Stamp], path: Path) -> Path:
    """Write stamps to a CSV file and return its path."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(export_csv(library, stamps))
    return path


def parse_year_range(value: str) -> tuple[int | None, int | None]:
    """Parse a year cell: "1958", "1958-1964" or "1958-".

    Returns:
        (start, end); anything unparseable gives (None, None).
    """
    trimmed = value.strip()
    if not trimmed:
        return None, None

    if "-" in trimmed:
        parts = [p.strip() for p in trimmed.split("-") if p.strip()]
        try:
            if len(parts) == 2:
                return int(parts[0]), int(parts[1])
            if len(parts) == 1:
                return int(parts[0]), None
        except ValueError:
            pass

    try:
        return int(trimmed), None
    except ValueError:
        return None, None


def parse_status(value: str, default: CollectionStatus = CollectionStatus.WANTED) -> CollectionStatus:
    """Parse a status cell, accepting spreadsheet booleans."""
    upper = value.strip().upper()
    if upper in _OWNED_VALUES:
        return CollectionStatus.OWNED
    if upper in _WANTED_VALUES:
        return CollectionStatus.WANTED
    if upper in _NOT_COLLECTING_VALUES:
        return CollectionStatus.NOT_COLLECTING
    return parse_enum(CollectionStatus, value.strip(), default)


def _column_indices(header: list[str]) -> dict[str, int]:
    indices = {}
    for column, names in _COLUMN_ALIASES.items():
        for name in names:
            if name in header:
                indices[column] = header.index(name)
                break
    return indices


def import_csv(
    library: Library,
    album_id: str,
    text: str,
    duplicate_action: DuplicateAction = DuplicateAction.SKIP,
    default_status: CollectionStatus = CollectionStatus.WANTED,
) -> ImportSummary:
    """Import stamps from CSV text into an album.

    Duplicates are detected against the stamps already in the album before
    the import starts, by exact catalog number.

    Args:
        library: Library to import into.
        album_id: Target album.
        text: CSV content including the header row.
        duplicate_action: How to treat rows matching an existing stamp.
        default_status: Status for rows with an unrecognised status cell.

    Returns:
        Import counts.

    Raises:
        RecordNotFoundError: If the album does not exist.
        CSVImportError: If there are no data rows or no catalog number column.
    """
    library.get_album(album_id)

    rows = [
        [cell.strip() for cell in row]
        for row in csv.reader(io.StringIO(text))
        if any(cell.strip() for cell in row)
    ]
    if len(rows) < 2:
        raise CSVImportError("CSV file has no data rows")

    header, data_rows = rows[0], rows[1:]
    columns = _column_indices(header)
    if "catalog_number" not in columns:
        raise CSVImportError(f"No 'Catalog Number' column found. Headers: {', '.join(header)}")

    existing: dict[str, Stamp] = {}
    for stamp in library.list_stamps(album_id=album_id):
        existing.setdefault(stamp.catalog_number, stamp)

    summary = ImportSummary()

    for row in data_rows:

        def cell(column: str) -> str:
            index = columns.get(column)
            if index is None or index >= len(row):
                return ""
            return row[index]

        catalog_number = cell("catalog_number")
        if not catalog_number:
            continue

        year_start, year_end = parse_year_range(cell("year"))
        fields = {
            "year_start": year_start,
            "year_end": year_end,
            "denomination": cell("denomination"),
            "color": cell("color"),
            "gum_condition": parse_enum(GumCondition, cell("gum_condition"), GumCondition.UNSPECIFIED),
            "centering_grade": parse_enum(
                CenteringGrade, cell("centering_grade"), CenteringGrade.UNSPECIFIED
            ),
            "collection_status": parse_status(cell("status"), default_status),
            "notes": cell("notes"),
        }

        match = existing.get(catalog_number)
        if match is not None:
            if duplicate_action is DuplicateAction.SKIP:
                summary.skipped += 1
                continue
            if duplicate_action is DuplicateAction.UPDATE:
                for name, value in fields.items():
                    setattr(match, name, value)
                match.mark_updated()
                summary.updated += 1
                continue

        library.add_stamp(Stamp(catalog_number=catalog_number, album_id=album_id, **fields))
        summary.imported += 1

    return summary


def load_csv(
    library: Library,
    album_id: str,
    path: Path,
    duplicate_action: DuplicateAction = DuplicateAction.SKIP,
    default_status: CollectionStatus = CollectionStatus.WANTED,
) -> ImportSummary:
    """Import stamps from a CSV file. See `import_csv`."""
    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise CSVImportError(f"Could not read {path}: not UTF-8 text") from e
    return import_csv(library, album_id, text, duplicate_action, default_status)
