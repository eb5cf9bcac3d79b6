"""
Hyphenation: split an ISBN into its elements using the range table.

ISBN-13 = EAN prefix - registration group - registrant - publication - check digit
ISBN-10 = registration group - registrant - publication - check digit

Group and registrant lengths are not fixed. The group is found by the longest
table key that prefixes the number; the registrant length comes from the rule
whose range covers the next seven digits.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from .errors import NoMatchingRange, NotHyphenatable, UnknownRangeKey
from .models import Identifier, RangeRule, Segments
from .normalize import Kind
from .rules import DEFAULT_SEPARATOR, EAN_PREFIX_LENGTH, ISBN10_EAN_PREFIX, RANGE_WIDTH


def _working_digits(identifier: Identifier) -> str:
    if identifier.kind is Kind.ISBN10:
        # check digit kept as-is, only the lookup needs a 13-digit shape
        return ISBN10_EAN_PREFIX + identifier.normalized
    return identifier.normalized


def resolve_key(working: str, table: Mapping[str, Sequence[RangeRule]]) -> str:
    """Longest prefix of ``working`` present in ``table``; keys are at least 3 characters."""
    key = working
    while len(key) > EAN_PREFIX_LENGTH - 1:
        if key in table:
            return key
        key = key[:-1]
    raise UnknownRangeKey(working)


def lookup_value(working: str, key: str) -> str:
    """The digits after ``key``, cut or right-padded with zeros to the range width."""
    return working[len(key):][:RANGE_WIDTH].ljust(RANGE_WIDTH, "0")


def registrant_length(rules: Sequence[RangeRule], key: str, remainder: str) -> int:
    for rule in rules:
        if rule.contains(remainder):
            return rule.length
    raise NoMatchingRange(key, remainder)


def segment(identifier: Identifier, table: Mapping[str, Sequence[RangeRule]]) -> Segments:
    """
    Split a valid identifier into its five elements.

    Raises:
        NotHyphenatable: the identifier did not validate.
        UnknownRangeKey: no table key prefixes the number.
        NoMatchingRange: the key's rules do not cover the registrant digits.
    """
    if not identifier.is_valid:
        raise NotHyphenatable(identifier)

    working = _working_digits(identifier)
    key = resolve_key(working, table)
    length = registrant_length(table[key], key, lookup_value(working, key))

    body = working[len(key):-1]
    return Segments(
        kind=identifier.kind,
        ean_prefix=key[:EAN_PREFIX_LENGTH],
        group=key[EAN_PREFIX_LENGTH:],
        registrant=body[:length],
        publication=body[length:],
        check_digit=working[-1],
    )


def hyphenate(
    identifier: Identifier,
    table: Mapping[str, Sequence[RangeRule]],
    separator: str = DEFAULT_SEPARATOR,
) -> str:
    """Format ``identifier`` with its elements joined by ``separator``; ISBN-10 omits the EAN prefix."""
    return separator.join(segment(identifier, table).parts())
