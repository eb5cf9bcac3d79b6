"""
ISBN validation, classification and range-based hyphenation.

    >>> from isbnkit import parse, hyphenate, load_range_table
    >>> table = load_range_table("RangeMessage.xml", "ranges.json")
    >>> hyphenate(parse("0-8044-2957-x"), table)
    '0-8044-2957-X'
"""

from isbnkit.checksum import Outcome, check_digit, verify
from isbnkit.convert import to_isbn10, to_isbn13
from isbnkit.errors import (
    HyphenationError,
    InvalidInput,
    IsbnError,
    NoMatchingRange,
    NotHyphenatable,
    RangeTableUnavailable,
    UnknownRangeKey,
    UnsupportedLength,
)
from isbnkit.hyphenate import hyphenate, segment
from isbnkit.models import Identifier, RangeRule, Segments, parse
from isbnkit.normalize import Kind, classify, normalize
from isbnkit.ranges import RangeTable, load_range_table, parse_range_message

__all__ = [
    "parse",
    "normalize",
    "classify",
    "check_digit",
    "verify",
    "hyphenate",
    "segment",
    "to_isbn10",
    "to_isbn13",
    "Identifier",
    "Kind",
    "Outcome",
    "RangeRule",
    "RangeTable",
    "Segments",
    "load_range_table",
    "parse_range_message",
    "IsbnError",
    "InvalidInput",
    "UnsupportedLength",
    "HyphenationError",
    "NotHyphenatable",
    "UnknownRangeKey",
    "NoMatchingRange",
    "RangeTableUnavailable",
]
