"""
ISBN-10 and ISBN-13 check digits.

ISBN-10 weights the first nine digits 10 down to 2 and takes the sum modulo 11;
a check value of ten is written as X. ISBN-13 weights the first twelve digits
alternately 1 and 3 and takes the sum modulo 10.
See https://en.wikipedia.org/wiki/ISBN#Check_digits
"""

from __future__ import annotations

import enum

from .errors import InvalidInput, UnsupportedLength
from .normalize import Kind
from .rules import CHECK_TEN, ISBN10_LENGTH, ISBN13_LENGTH


class Outcome(str, enum.Enum):
    VALID = "valid"
    UNKNOWN_KIND = "unknown_kind"
    CHECKSUM_MISMATCH = "checksum_mismatch"
    MALFORMED_DIGITS = "malformed_digits"


def _check_char(checksum: int) -> str:
    return str(checksum) if checksum < 10 else CHECK_TEN


def isbn10_check_char(first9: str) -> str:
    total = sum((10 - i) * int(digit) for i, digit in enumerate(first9[:9]))
    return _check_char((11 - total % 11) % 11)


def isbn13_check_char(first12: str) -> str:
    total = sum((3 if i % 2 else 1) * int(digit) for i, digit in enumerate(first12[:12]))
    # mod 10 never reaches ten, the X branch only mirrors ISBN-10
    return _check_char((10 - total % 10) % 10)


_CHECKERS = {
    ISBN10_LENGTH - 1: isbn10_check_char,
    ISBN13_LENGTH - 1: isbn13_check_char,
}


def check_digit(partial: str) -> str:
    """
    Compute the check character for a 9-digit (ISBN-10) or 12-digit (ISBN-13) prefix.

    Raises:
        UnsupportedLength: ``partial`` is neither 9 nor 12 characters long.
        InvalidInput: ``partial`` contains anything but digits.
    """
    if not isinstance(partial, str):
        raise InvalidInput("digits must be a string")
    checker = _CHECKERS.get(len(partial))
    if checker is None:
        raise UnsupportedLength(partial, tuple(_CHECKERS))
    if not (partial.isascii() and partial.isdigit()):
        raise InvalidInput(f"digits must be 0-9 only: {partial!r}")
    return checker(partial)


def verify(normalized: str, kind: Kind) -> Outcome:
    """
    Check ``normalized`` against the algorithm selected by ``kind``; never raises.

    ``MALFORMED_DIGITS`` only comes back for strings that did not pass through
    ``normalize``, which already drops any X before the last position.
    """
    if kind is Kind.ISBN10:
        checker = isbn10_check_char
    elif kind is Kind.ISBN13:
        checker = isbn13_check_char
    else:
        return Outcome.UNKNOWN_KIND

    body, control = normalized[:-1], normalized[-1]
    if not (body.isascii() and body.isdigit()):
        return Outcome.MALFORMED_DIGITS
    if checker(body) != control.upper():
        return Outcome.CHECKSUM_MISMATCH
    return Outcome.VALID
