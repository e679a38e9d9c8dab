"""Statements API router.

Endpoints:
- POST /api/statements/analyze: upload a CSV / XLSX / PDF statement and get the analysis
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from statement_engine.errors import (
    IngestError,
    MalformedSource,
    NoDataFound,
    NoTransactions,
    SecretIncorrect,
    SecretRequired,
    UnsupportedFormat,
)
from statement_engine.pipeline import ingest, kind_for_filename
from statement_engine.settings_store import load_settings

log = logging.getLogger("statement_engine.api.statements")

router = APIRouter(prefix="/api/statements", tags=["statements"])

_STATUS_CODES = (
    (UnsupportedFormat, 415),
    (NoDataFound, 422),
    (NoTransactions, 422),
    (SecretRequired, 401),
    (SecretIncorrect, 401),
    (MalformedSource, 400),
)


def status_for(error: IngestError) -> int:
    for cls, status in _STATUS_CODES:
        if isinstance(error, cls):
            return status
    return 400


def _too_large(max_mb: int) -> JSONResponse:
    return JSONResponse(
        {"error": "file_too_large", "detail": f"File exceeds {max_mb} MB", "retryable": False},
        status_code=413,
    )


@router.post("/analyze")
async def analyze_statement(
    file: UploadFile = File(...),
    password: str = Form(""),
    kind: str = Form(""),
):
    """Analyze an uploaded statement.

    A protected PDF without (or with a wrong) password answers 401 with
    ``retryable: true``; the client asks for the password and re-uploads.
    """
    settings = load_settings()
    limit = settings.max_upload_mb * 1024 * 1024

    # Reject by declared size before pulling the body into memory
    size = getattr(file, "size", None)
    if size is not None and size > limit:
        return _too_large(settings.max_upload_mb)

    content = await file.read()
    if len(content) > limit:
        return _too_large(settings.max_upload_mb)

    try:
        file_kind = kind or kind_for_filename(file.filename or "")
        result = await run_in_threadpool(ingest, content, file_kind, password or None, settings)
    except IngestError as e:
        log.info("Statement %r rejected: %s (%s)", file.filename, e, e.code)
        return JSONResponse(e.to_dict(), status_code=status_for(e))
    except Exception as e:
        log.exception("Statement pipeline error")
        return JSONResponse(
            {"error": "internal_error", "detail": f"Error processing file: {e!r}", "retryable": False},
            status_code=500,
        )

    return JSONResponse(result.to_dict())
