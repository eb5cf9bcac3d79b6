"""
Fixed ISBN rules.

Values here come from the ISBN standard and the registration authority's
range message; nothing in this file is configurable.
"""

ISBN10_LENGTH = 10
ISBN13_LENGTH = 13

# ISBN-10 numbers are looked up as if they carried this EAN prefix.
ISBN10_EAN_PREFIX = "978"
EAN_PREFIX_LENGTH = 3

RANGE_WIDTH = 7  # range message boundaries are 7-digit strings
FALLBACK_RANGE = ("0000000", "9999999")

CHECK_TEN = "X"
DEFAULT_SEPARATOR = "-"
