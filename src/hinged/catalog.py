"""Catalog number parsing, natural ordering and range filtering.

Catalog numbers mix alphabetic series ("C" for airmail, "O" for officials)
with plain numeric series and minor-variety suffixes ("300d"). A plain string
sort puts "10" before "2", so every comparison here goes through the parsed
(prefix, number, suffix) triple instead.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from functools import cmp_to_key
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CatalogNumber:
    """A parsed catalog number.

    Only the first run of digits is the number; anything after it, later
    digits included, is kept verbatim as the suffix ("12A34" -> "", 12, "a34").
    """

    prefix: str = ""
    number: int = 0
    suffix: str = ""
    digits: str = field(default="", compare=False, repr=False)

    @property
    def sort_key(self) -> tuple[str, int, str]:
        """The (prefix, number, suffix) triple used for ordering."""
        return (self.prefix, self.number, self.suffix)

    @property
    def normalized(self) -> str:
        """The case-folded catalog number (prefix + digits + suffix)."""
        return f"{self.prefix}{self.digits}{self.suffix}"


def _to_int(digits: str) -> int:
    """Convert a digit string to int, 0 for empty or unconvertible input."""
    if not digits:
        return 0
    try:
        return int(digits)
    except ValueError:
        # Exceeds the interpreter's int conversion limit
        return 0


def parse_catalog_number(raw: str) -> CatalogNumber:
    """Split a catalog number into prefix, number and suffix.

    Leading non-digits become the prefix (uppercased), the first digit run
    becomes the number (0 when absent) and the rest becomes the suffix
    (lowercased). Never raises.

    Args:
        raw: Catalog number as entered, e.g. "C5" or "300d".

    Returns:
        The parsed catalog number.
    """
    prefix: list[str] = []
    digits: list[str] = []
    suffix: list[str] = []
    in_number = False
    number_done = False

    for char in raw or "":
        if number_done:
            suffix.append(char)
        elif char.isdecimal():
            in_number = True
            digits.append(char)
        elif in_number:
            number_done = True
            suffix.append(char)
        else:
            prefix.append(char)

    digit_text = "".join(digits)
    return CatalogNumber(
        prefix="".join(prefix).upper(),
        number=_to_int(digit_text),
        suffix="".join(suffix).lower(),
        digits=digit_text,
    )


def extract_numeric_part(catalog_number: str) -> int | None:
    """Concatenate every digit of a catalog number into one integer.

    Used by the gap report, which compares stamps by their digits alone
    ("C-12" and "12" both count as 12).

    Returns:
        The integer, or None when the string holds no digits.
    """
    digits = "".join(c for c in catalog_number or "" if c.isdecimal())
    if not digits:
        return None
    try:
        return int(digits)
    except ValueError:
        return None


def _compare_text(a: str, b: str) -> int:
    """Compare two strings independent of the process locale.

    Case-insensitive first, exact text as the tie-breaker, so the result
    is the same on every machine.
    """
    folded_a, folded_b = a.casefold(), b.casefold()
    if folded_a != folded_b:
        return -1 if folded_a < folded_b else 1
    if a != b:
        return -1 if a < b else 1
    return 0


def compare_parsed(a: CatalogNumber, b: CatalogNumber) -> int:
    """Compare two parsed catalog numbers: prefix, then number, then suffix."""
    result = _compare_text(a.prefix, b.prefix)
    if result != 0:
        return result
    if a.number != b.number:
        return -1 if a.number < b.number else 1
    return _compare_text(a.suffix, b.suffix)


def compare_catalog_numbers(a: str, b: str, descending: bool = False) -> int:
    """Compare two catalog number strings naturally.

    Args:
        a: Left catalog number.
        b: Right catalog number.
        descending: Invert the result.

    Returns:
        -1 if a sorts first, 1 if b sorts first, 0 if they are equivalent.
    """
    result = compare_parsed(parse_catalog_number(a), parse_catalog_number(b))
    return -result if descending else result


class SortOrder(Enum):
    """Sort direction for the natural comparator."""

    FORWARD = "forward"
    REVERSE = "reverse"


class NaturalCatalogComparator:
    """Orders catalog numbers by prefix, number and suffix.

    Example:
        ```python
        comparator = NaturalCatalogComparator()
        comparator.sorted(["10", "2", "C1", "1"])  # ["1", "2", "10", "C1"]
        ```
    """

    def __init__(self, order: SortOrder = SortOrder.FORWARD) -> None:
        self.order = order

    @property
    def descending(self) -> bool:
        """Whether the comparator sorts in reverse."""
        return self.order is SortOrder.REVERSE

    def compare(self, a: str, b: str) -> int:
        """Compare two catalog numbers, honouring the sort order."""
        return compare_catalog_numbers(a, b, descending=self.descending)

    @property
    def sort_key(self) -> Callable[[str], Any]:
        """Key function for `sorted()` and `list.sort()`."""
        return cmp_to_key(self.compare)

    def sorted(self, items: Iterable[T], key: Callable[[T], str] | None = None) -> list[T]:
        """Return the items sorted by catalog number.

        Args:
            items: Catalog number strings, or records when ``key`` is given.
            key: Extracts the catalog number from each item.
        """
        if key is None:
            return sorted(items, key=self.sort_key)

        def cmp(left: T, right: T) -> int:
            return self.compare(key(left), key(right))

        return sorted(items, key=cmp_to_key(cmp))


def sort_catalog_numbers(values: Iterable[str], descending: bool = False) -> list[str]:
    """Sort catalog number strings naturally."""
    order = SortOrder.REVERSE if descending else SortOrder.FORWARD
    return NaturalCatalogComparator(order).sorted(values)


def catalog_number_in_range(
    candidate: str,
    start: str | None = None,
    end: str | None = None,
) -> bool:
    """Check whether a catalog number falls between two bounds.

    A bound only constrains candidates with the same prefix. When prefixes
    differ the answer comes from comparing the prefixes alone, and a
    mismatched start bound decides the result without looking at the end
    bound. So "C10" passes the range "1" to "50" because "C" sorts after "".
    Suffixes never constrain.

    Args:
        candidate: Catalog number to test.
        start: Inclusive lower bound, or empty/None for no lower bound.
        end: Inclusive upper bound, or empty/None for no upper bound.

    Returns:
        True if the candidate is within range.
    """
    if not start and not end:
        return True

    parsed = parse_catalog_number(candidate)

    if start:
        lower = parse_catalog_number(start)
        if parsed.prefix != lower.prefix:
            return parsed.prefix > lower.prefix
        if parsed.number < lower.number:
            return False

    if end:
        upper = parse_catalog_number(end)
        if parsed.prefix != upper.prefix:
            return parsed.prefix < upper.prefix
        if parsed.number > upper.number:
            return False

    return True
