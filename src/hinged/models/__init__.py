"""Record models for countries, collections, albums and stamps."""

from hinged.models.mixins import YearRangeMixin
from hinged.models.records import Album, Collection, Country, Stamp, Timestamp, as_utc, new_id

__all__ = [
    "Album",
    "Collection",
    "Country",
    "Stamp",
    "Timestamp",
    "YearRangeMixin",
    "as_utc",
    "new_id",
]
