import logging
import threading
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import JSONResponse

from .batch import normalize_isbn_bytes
from .checksum import check_digit
from .config import Settings, configure_logging
from .errors import IsbnError, RangeTableUnavailable
from .hyphenate import segment
from .models import (
    CheckDigitResponse,
    HealthResponse,
    HyphenateResponse,
    IdentifierResponse,
    NormalizeResponse,
    parse,
)
from .normalize import classify
from .ranges import RangeTable, load_range_table

logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    return Settings()


_range_table_lock = threading.Lock()


@lru_cache
def _build_range_table() -> Optional[RangeTable]:
    settings = get_settings()
    if settings.RANGE_MESSAGE_PATH is None and settings.RANGE_CACHE_PATH is None:
        return None
    return load_range_table(settings.RANGE_MESSAGE_PATH, settings.RANGE_CACHE_PATH)


def get_range_table() -> Optional[RangeTable]:
    """Built once per process; ``None`` when no range message is configured."""
    with _range_table_lock:
        return _build_range_table()


def require_range_table(table: Optional[RangeTable] = Depends(get_range_table)) -> RangeTable:
    if table is None:
        raise HTTPException(status_code=503, detail="No ISBN range table configured")
    return table


configure_logging(get_settings().LOG_LEVEL)

app = FastAPI(
    title="isbnkit",
    description="ISBN validation, classification and range-based hyphenation",
    version="0.1.0",
)


@app.exception_handler(RangeTableUnavailable)
async def range_table_unavailable(request: Request, exc: RangeTableUnavailable):
    logger.error("range table unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(IsbnError)
async def isbn_error(request: Request, exc: IsbnError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "error": type(exc).__name__})


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/validate", response_model=IdentifierResponse)
def validate(isbn: str = Query(...)):
    return IdentifierResponse.of(parse(isbn))


@app.get("/hyphenate", response_model=HyphenateResponse)
def hyphenate_isbn(
    isbn: str = Query(...),
    separator: Optional[str] = Query(default=None, max_length=3),
    table: RangeTable = Depends(require_range_table),
):
    if separator is None:
        separator = get_settings().DEFAULT_SEPARATOR
    identifier = parse(isbn)
    segments = segment(identifier, table)
    return HyphenateResponse(
        **IdentifierResponse.of(identifier).model_dump(),
        hyphenated=separator.join(segments.parts()),
        segments=segments,
        agency=table.agency(segments.ean_prefix + segments.group),
    )


@app.get("/check-digit", response_model=CheckDigitResponse)
def compute_check_digit(digits: str = Query(...)):
    char = check_digit(digits)
    return CheckDigitResponse(digits=digits, kind=classify(digits + char), check_digit=char)


@app.post("/normalize", response_model=NormalizeResponse)
async def normalize_list(
    file: UploadFile = File(...),
    table: Optional[RangeTable] = Depends(get_range_table),
):
    if not file.filename.lower().endswith((".csv", ".txt")):
        raise HTTPException(status_code=422, detail="Only CSV or text files are supported")

    raw = await file.read()
    return normalize_isbn_bytes(raw, table, get_settings().DEFAULT_SEPARATOR)
