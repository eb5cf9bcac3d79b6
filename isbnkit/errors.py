"""Exceptions raised by isbnkit."""

from __future__ import annotations


class IsbnError(Exception):
    """Base class for every isbnkit error."""


class InvalidInput(IsbnError, ValueError):
    """Input is not a usable, non-empty string."""


class UnsupportedLength(IsbnError, ValueError):
    """Digit string has a length no algorithm accepts."""

    def __init__(self, value: str, expected: tuple[int, ...]):
        self.value = value
        self.expected = expected
        lengths = " or ".join(str(n) for n in expected)
        super().__init__(f"expected {lengths} digits, got {len(value)}: {value!r}")


class HyphenationError(IsbnError):
    """An identifier could not be split into its elements."""


class NotHyphenatable(HyphenationError):
    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"cannot hyphenate invalid ISBN {identifier.raw!r}")


class UnknownRangeKey(HyphenationError):
    def __init__(self, working: str):
        self.working = working
        super().__init__(f"no range table key is a prefix of {working}")


class NoMatchingRange(HyphenationError):
    def __init__(self, key: str, remainder: str):
        self.key = key
        self.remainder = remainder
        super().__init__(f"no rule under {key} covers {remainder}")


class RangeTableUnavailable(IsbnError):
    """Neither a range message document nor a cached table could be read."""
