"""ISBN-10 <-> ISBN-13 conversion."""

from __future__ import annotations

from .checksum import isbn10_check_char, isbn13_check_char
from .errors import InvalidInput
from .models import Identifier
from .normalize import Kind
from .rules import ISBN10_EAN_PREFIX


def to_isbn13(identifier: Identifier) -> str:
    if not identifier.is_valid:
        raise InvalidInput(f"cannot convert invalid ISBN {identifier.raw!r}")
    if identifier.kind is Kind.ISBN13:
        return identifier.normalized
    body = ISBN10_EAN_PREFIX + identifier.normalized[:-1]
    return body + isbn13_check_char(body)


def to_isbn10(identifier: Identifier) -> str:
    """Only 978-prefixed ISBN-13 numbers have an ISBN-10 form."""
    if not identifier.is_valid:
        raise InvalidInput(f"cannot convert invalid ISBN {identifier.raw!r}")
    if identifier.kind is Kind.ISBN10:
        return identifier.normalized
    if not identifier.normalized.startswith(ISBN10_EAN_PREFIX):
        raise InvalidInput(f"{identifier.normalized} has no ISBN-10 form")
    body = identifier.normalized[len(ISBN10_EAN_PREFIX):-1]
    return body + isbn10_check_char(body)
