"""
Range table: prefix key -> ordered registrant-length rules.

The table is built once from the registration authority's RangeMessage.xml
(https://www.isbn-international.org/range_file_generation), optionally cached
as JSON next to it, and then only read.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from .errors import RangeTableUnavailable
from .models import RangeRule
from .rules import FALLBACK_RANGE

logger = logging.getLogger(__name__)

Rules = Tuple[RangeRule, ...]


def _rules_from_dict(rules: Any) -> list:
    if isinstance(rules, (int, str)):
        return [RangeRule(start=FALLBACK_RANGE[0], end=FALLBACK_RANGE[1], length=int(rules))]
    return [RangeRule.from_range(span, length) for span, length in rules.items()]


class RangeTable(Mapping):
    """Read-only mapping of prefix keys (EAN prefix + registration group, no hyphens) to rules."""

    def __init__(self, ranges: Mapping[str, Any], agencies: Optional[Mapping[str, str]] = None):
        self._ranges = MappingProxyType({key: tuple(rules) for key, rules in ranges.items()})
        self._agencies = MappingProxyType(dict(agencies or {}))

    def __getitem__(self, key: str) -> Rules:
        return self._ranges[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def __repr__(self) -> str:
        return f"RangeTable({len(self)} keys)"

    def agency(self, key: str) -> Optional[str]:
        return self._agencies.get(key)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RangeTable":
        """
        Accepts ``{"ranges": {key: {"start-end": length}}, "agencies": {...}}``
        or the bare ``{key: {"start-end": length}}`` mapping. A bare length in place
        of the rule mapping means one rule covering the whole range.
        """
        if "ranges" in data and isinstance(data["ranges"], Mapping):
            raw_ranges = data["ranges"]
            agencies = data.get("agencies") or {}
        else:
            raw_ranges, agencies = data, {}

        ranges = {key: _rules_from_dict(rules) for key, rules in raw_ranges.items()}
        return cls(ranges, agencies)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ranges": {key: {rule.span: rule.length for rule in rules} for key, rules in self._ranges.items()},
            "agencies": dict(self._agencies),
        }


def _text(element: ET.Element, tag: str) -> str:
    return (element.findtext(tag) or "").strip()


def parse_range_message(source: Union[bytes, str]) -> RangeTable:
    """
    Parse RangeMessage.xml content into a ``RangeTable``.

    Both ``EAN.UCC`` prefixes (978, 979) and registration ``Group`` entries are read.
    Rules with Length 0 mark ranges not defined for use and are left out, so a
    remainder falling there matches no rule.
    """
    root = ET.fromstring(source)

    ranges: Dict[str, list] = {}
    agencies: Dict[str, str] = {}
    skipped = 0

    for entry in root.iter():
        if entry.tag not in ("EAN.UCC", "Group"):
            continue
        key = _text(entry, "Prefix").replace("-", "")
        if not key:
            continue

        rules = []
        for rule in entry.iterfind("Rules/Rule"):
            length = int(_text(rule, "Length") or 0)
            if length == 0:
                skipped += 1
                continue
            rules.append(RangeRule.from_range(_text(rule, "Range"), length))

        if rules:
            ranges[key] = rules
            agency = _text(entry, "Agency")
            if agency:
                agencies[key] = agency

    logger.debug("range message parsed: %d keys, %d unused ranges skipped", len(ranges), skipped)
    return RangeTable(ranges, agencies)


def _read_cache(cache_path: Path) -> Optional[RangeTable]:
    try:
        with open(cache_path, encoding="utf-8") as f:
            return RangeTable.from_dict(json.load(f))
    except (OSError, ValueError, TypeError, AttributeError) as e:
        # ValueError covers JSONDecodeError and pydantic's ValidationError
        logger.warning("ignoring unreadable range cache %s: %s", cache_path, e)
        return None


def _write_cache(table: RangeTable, cache_path: Path) -> None:
    """Write to a temporary file beside ``cache_path`` and swap it in, readers never see a partial file."""
    fd, tmp = tempfile.mkstemp(dir=cache_path.parent, prefix=cache_path.name, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(table.to_dict(), f)
        os.replace(tmp, cache_path)
    except OSError:
        os.unlink(tmp)
        raise


def load_range_table(xml_path: Optional[Path], cache_path: Optional[Path] = None) -> RangeTable:
    """
    Return the range table, reading ``cache_path`` if it holds a usable table.

    Otherwise ``xml_path`` is parsed and, when ``cache_path`` is given, the
    result is written there for the next call. A damaged cache is rebuilt.

    Raises:
        RangeTableUnavailable: neither the cache nor the range message can be read.
    """
    cache_path = Path(cache_path) if cache_path is not None else None
    if cache_path is not None and cache_path.is_file():
        logger.info("loading range table from cache %s", cache_path)
        table = _read_cache(cache_path)
        if table is not None:
            return table

    if xml_path is None or not Path(xml_path).is_file():
        raise RangeTableUnavailable(f"Missing range message {xml_path}; download RangeMessage.xml first")

    logger.info("parsing range message %s", xml_path)
    try:
        table = parse_range_message(Path(xml_path).read_bytes())
    except (OSError, ET.ParseError, ValueError) as e:
        raise RangeTableUnavailable(f"Unreadable range message {xml_path}: {e}") from e

    if cache_path is not None:
        try:
            _write_cache(table, cache_path)
            logger.info("range table cached to %s", cache_path)
        except OSError as e:
            logger.warning("could not cache range table to %s: %s", cache_path, e)

    return table
