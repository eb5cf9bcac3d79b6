"""
Digit normalization and length classification.

Responsibilities:
- strip formatting from user input down to digits and a trailing X
- classify the result as ISBN-10, ISBN-13 or neither
"""

from __future__ import annotations

import enum
import re

from .rules import CHECK_TEN, ISBN10_LENGTH, ISBN13_LENGTH

_NOT_ISBN_CHAR = re.compile(r"[^0-9Xx]")


class Kind(str, enum.Enum):
    ISBN10 = "ISBN10"
    ISBN13 = "ISBN13"
    UNKNOWN = "Unknown"


def normalize(value: str) -> str:
    """
    Reduce ``value`` to its canonical digit form.

    Rules:
    - Every character other than 0-9, x and X is removed.
    - x is upper-cased.
    - X survives only as the final character; an X anywhere else is dropped.

    Never fails. An empty result is legal and classifies as ``Kind.UNKNOWN``.
    """
    cleaned = _NOT_ISBN_CHAR.sub("", value).upper()
    if CHECK_TEN not in cleaned[:-1]:
        return cleaned
    return cleaned[:-1].replace(CHECK_TEN, "") + cleaned[-1]


def classify(normalized: str) -> Kind:
    length = len(normalized)
    if length == ISBN10_LENGTH:
        return Kind.ISBN10
    if length == ISBN13_LENGTH:
        return Kind.ISBN13
    return Kind.UNKNOWN
