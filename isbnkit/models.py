from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .checksum import Outcome, verify
from .errors import InvalidInput
from .normalize import Kind, classify, normalize
from .rules import RANGE_WIDTH


class Identifier(BaseModel):
    """
    An ISBN candidate. Derived fields must agree with ``raw``; build it with
    ``from_raw`` (or ``parse``) rather than passing them in by hand.
    """

    model_config = ConfigDict(frozen=True)

    raw: str = Field(min_length=1)
    normalized: str
    kind: Kind
    outcome: Outcome

    @model_validator(mode="after")
    def _derived_from_raw(self) -> "Identifier":
        normalized = normalize(self.raw)
        kind = classify(normalized)
        if (self.normalized, self.kind, self.outcome) != (normalized, kind, verify(normalized, kind)):
            raise ValueError(f"normalized, kind and outcome do not match raw {self.raw!r}")
        return self

    @classmethod
    def from_raw(cls, raw: Any) -> "Identifier":
        if not isinstance(raw, str) or not raw:
            raise InvalidInput("ISBN must be a string and cannot be empty.")
        normalized = normalize(raw)
        kind = classify(normalized)
        return cls(raw=raw, normalized=normalized, kind=kind, outcome=verify(normalized, kind))

    @property
    def length(self) -> int:
        return len(self.normalized)

    @property
    def is_valid(self) -> bool:
        return self.outcome is Outcome.VALID


def parse(raw: Any) -> Identifier:
    return Identifier.from_raw(raw)


class RangeRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str
    end: str
    length: int = Field(ge=1, le=RANGE_WIDTH)

    @field_validator("start", "end")
    @classmethod
    def _seven_digits(cls, v: str) -> str:
        if len(v) != RANGE_WIDTH or not (v.isascii() and v.isdigit()):
            raise ValueError(f"range bound must be {RANGE_WIDTH} digits: {v!r}")
        return v

    @classmethod
    def from_range(cls, span: str, length: int) -> "RangeRule":
        """Build a rule from the registry's ``"0000000-1999999"`` notation."""
        start, _, end = span.partition("-")
        return cls(start=start.strip(), end=end.strip(), length=int(length))

    @property
    def span(self) -> str:
        return f"{self.start}-{self.end}"

    def contains(self, remainder: str) -> bool:
        # equal-width decimal strings compare like the numbers they spell
        return self.start <= remainder <= self.end


class Segments(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Kind
    ean_prefix: str
    group: str
    registrant: str
    publication: str
    check_digit: str

    def parts(self) -> List[str]:
        head = [self.ean_prefix] if self.kind is Kind.ISBN13 else []
        return head + [self.group, self.registrant, self.publication, self.check_digit]


class IdentifierResponse(BaseModel):
    raw: str
    normalized: str
    kind: Kind
    valid: bool
    outcome: Outcome

    @classmethod
    def of(cls, identifier: Identifier) -> "IdentifierResponse":
        return cls(
            raw=identifier.raw,
            normalized=identifier.normalized,
            kind=identifier.kind,
            valid=identifier.is_valid,
            outcome=identifier.outcome,
        )


class HyphenateResponse(IdentifierResponse):
    hyphenated: str
    segments: Segments
    agency: Optional[str] = None


class CheckDigitResponse(BaseModel):
    digits: str
    kind: Kind
    check_digit: str


class NormalizedCsv(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8-sig")
    content_b64: str


class ReportSummary(BaseModel):
    rows: Optional[int] = Field(default=None, examples=[None])
    valid: int = 0
    hyphenated: int = 0
    warnings: int = 0
    errors: int = 0
    deterministic: bool = True


class ReportItem(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class NormalizationReport(BaseModel):
    summary: ReportSummary
    normalizations: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[ReportItem] = Field(default_factory=list)
    errors: List[ReportItem] = Field(default_factory=list)


class NormalizeResponse(BaseModel):
    normalized_csv: NormalizedCsv
    report: NormalizationReport

class HealthResponse(BaseModel):
    ok: bool = True
