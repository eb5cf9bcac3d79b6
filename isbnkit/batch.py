"""
Normalize an uploaded list of ISBNs.

Responsibilities:
- encoding detection + decode
- newline and delimiter detection
- per-row parse, validation and hyphenation
- report of rows that are not ISBNs, fail their checksum, or fall outside the range table
"""

from __future__ import annotations

import base64
import csv
import hashlib
import io
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from charset_normalizer import from_bytes

from .errors import NoMatchingRange, UnknownRangeKey
from .hyphenate import hyphenate
from .models import parse
from .normalize import Kind
from .ranges import RangeTable
from .rules import DEFAULT_SEPARATOR

logger = logging.getLogger(__name__)

OUTPUT_COLUMNS = ["raw", "normalized", "kind", "outcome", "hyphenated"]
HEADER_RE = re.compile(r"^isbn[\s_-]*(10|13)?$", re.IGNORECASE)


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def decode_upload(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    """
    Decode uploaded bytes to text with LF newlines.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - If decode fails, fall back to UTF-8, then to UTF-8 with replacement characters.
    """
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    # A UTF-8 BOM would otherwise end up glued to the first ISBN.
    if raw.startswith(b"\xef\xbb\xbf") and (decode_used.lower().replace("-", "_") in ("utf_8", "utf8")):
        decode_used = "utf-8-sig"

    decode_fallback = False
    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8")
            decode_used = "utf-8"
        except UnicodeDecodeError:
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"
        decode_fallback = True
        logger.warning("decode with %s failed, fell back to %s", detected, decode_used)

    crlf = text.count("\r\n")
    cr = text.count("\r") - crlf
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    return text, {
        "encoding": {
            "detected": detected,
            "decode_used": decode_used,
            "decode_fallback": decode_fallback,
        },
        "newlines": {
            "policy": "lf",
            "changed": crlf > 0 or cr > 0,
        },
    }


def _sniff_delimiter(text: str) -> Tuple[str, bool]:
    try:
        dialect = csv.Sniffer().sniff(text[:4096], delimiters=[",", ";", "\t", "|"])
        return dialect.delimiter, True
    except csv.Error:
        return ",", False


def _first_cells(text: str, delimiter: str) -> List[Tuple[int, str]]:
    cells = []
    for i, row in enumerate(csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)):
        if row and row[0].strip():
            cells.append((i + 1, row[0].strip()))
    # a first row without any digit, or named like "ISBN-13", is a header
    if cells and (not any(c.isdigit() for c in cells[0][1]) or HEADER_RE.match(cells[0][1])):
        return cells[1:]
    return cells


def normalize_isbn_bytes(
    raw: bytes,
    table: Optional[RangeTable] = None,
    separator: str = DEFAULT_SEPARATOR,
) -> Dict[str, Any]:
    """
    Returns a dict matching the API's response envelope.
    Without a range table rows are validated but left unhyphenated.
    """
    text, normalizations = decode_upload(raw)
    delimiter, sniffed = _sniff_delimiter(text)
    normalizations["delimiter"] = {"detected": delimiter, "sniffed": sniffed}
    normalizations["hyphenation"] = {"separator": separator, "range_table": table is not None}

    warnings: List[dict] = []
    errors: List[dict] = []
    valid = hyphenated_rows = 0

    outp = io.StringIO(newline="")
    writer = csv.writer(outp, delimiter=",", lineterminator="\n")
    writer.writerow(OUTPUT_COLUMNS)

    rows = _first_cells(text, delimiter)
    for row_no, cell in rows:
        identifier = parse(cell)

        hyphenated = ""
        if identifier.kind is Kind.UNKNOWN:
            errors.append({
                "row": row_no,
                "column": "raw",
                "issue": "unknown_length",
                "value": cell,
                "action": "expected_10_or_13_digits",
            })
        elif not identifier.is_valid:
            errors.append({
                "row": row_no,
                "column": "raw",
                "issue": identifier.outcome.value,
                "value": cell,
                "action": "left_unhyphenated",
            })
        else:
            valid += 1
            if table is not None:
                try:
                    hyphenated = hyphenate(identifier, table, separator)
                    hyphenated_rows += 1
                except (UnknownRangeKey, NoMatchingRange) as e:
                    warnings.append({
                        "row": row_no,
                        "column": "hyphenated",
                        "issue": "unknown_range_key" if isinstance(e, UnknownRangeKey) else "no_matching_range",
                        "value": identifier.normalized,
                        "action": "left_unhyphenated",
                    })

        writer.writerow([
            cell,
            identifier.normalized,
            identifier.kind.value,
            identifier.outcome.value,
            hyphenated,
        ])

    logger.info("normalized %d rows: %d valid, %d hyphenated", len(rows), valid, hyphenated_rows)

    normalized_bytes = outp.getvalue().encode("utf-8-sig")
    b64 = base64.b64encode(normalized_bytes).decode("ascii")
    return {
        "normalized_csv": {
            "sha256": _sha256_hex(normalized_bytes),
            "encoding": "utf-8-sig",
            "content_b64": b64,
        },
        "report": {
            "summary": {
                "rows": len(rows),
                "valid": valid,
                "hyphenated": hyphenated_rows,
                "warnings": len(warnings),
                "errors": len(errors),
                "deterministic": True,
            },
            "normalizations": normalizations,
            "warnings": warnings,
            "errors": errors,
        },
    }
