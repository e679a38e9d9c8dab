"""Statement ingestion pipeline: orchestrates the full flow.

bytes → (page extraction | row extraction) → parse / infer → canonical
transactions → aggregation → AnalysisResult.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .aggregate import analyze
from .column_roles import map_rows
from .errors import UnsupportedFormat
from .models import CANONICAL_COLUMNS, AnalysisResult
from .page_extractor import extract_document
from .parsers import select_transactions
from .readers import read_delimited, read_workbook
from .settings import Settings

log = logging.getLogger("statement_engine.pipeline")


class FileKind(str, Enum):
    TABULAR_SPREADSHEET = "tabular-spreadsheet"
    TABULAR_DELIMITED = "tabular-delimited"
    PAGE_DOCUMENT = "page-document"


_EXTENSION_KINDS = {
    ".csv": FileKind.TABULAR_DELIMITED,
    ".tsv": FileKind.TABULAR_DELIMITED,
    ".txt": FileKind.TABULAR_DELIMITED,
    ".xlsx": FileKind.TABULAR_SPREADSHEET,
    ".xls": FileKind.TABULAR_SPREADSHEET,
    ".xlsm": FileKind.TABULAR_SPREADSHEET,
    ".pdf": FileKind.PAGE_DOCUMENT,
}


def kind_for_filename(filename: str) -> FileKind:
    """Map a file name to its FileKind by extension."""
    ext = Path(filename or "").suffix.lower()
    try:
        return _EXTENSION_KINDS[ext]
    except KeyError:
        raise UnsupportedFormat(
            f"Unsupported file format {ext or '(none)'!r}. Please upload CSV, Excel (.xlsx, .xls) or PDF files."
        ) from None


def _coerce_kind(file_kind: Union[FileKind, str]) -> FileKind:
    try:
        return FileKind(file_kind)
    except ValueError:
        raise UnsupportedFormat(f"Unsupported file kind: {file_kind!r}") from None


def _ingest_tabular(data: bytes, kind: FileKind, settings: Settings) -> AnalysisResult:
    table = read_delimited(data) if kind is FileKind.TABULAR_DELIMITED else read_workbook(data)
    transactions = map_rows(table, settings)
    return analyze(transactions, table.columns, parse_method="tabular")


def _ingest_document(data: bytes, secret: Optional[str], settings: Settings) -> AnalysisResult:
    document = extract_document(data, secret=secret, tolerance=settings.line_tolerance)
    chosen = select_transactions(document, settings=settings)
    return analyze(chosen.transactions, CANONICAL_COLUMNS, parse_method=chosen.name)


def ingest(
    file_bytes: bytes,
    file_kind: Union[FileKind, str],
    secret: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> AnalysisResult:
    """Ingest one statement file.

    Raises an IngestError subclass on failure; never returns a partial
    result.  SecretRequired / SecretIncorrect may be retried with a new
    secret, which re-runs extraction from scratch.
    """
    kind = _coerce_kind(file_kind)
    settings = settings or Settings()
    log.info("Ingesting %d bytes as %s", len(file_bytes), kind.value)

    if kind is FileKind.PAGE_DOCUMENT:
        result = _ingest_document(file_bytes, secret, settings)
    else:
        result = _ingest_tabular(file_bytes, kind, settings)

    log.info(
        "Ingested %d transactions (%s)",
        result.summary.total_transactions, result.parse_method,
    )
    return result


def ingest_path(
    path: Union[str, Path],
    secret: Optional[str] = None,
    settings: Optional[Settings] = None,
    file_kind: Optional[Union[FileKind, str]] = None,
) -> AnalysisResult:
    """Ingest a file from disk, deriving its kind from the extension if not given."""
    p = Path(path)
    kind = file_kind or kind_for_filename(p.name)
    return ingest(p.read_bytes(), kind, secret=secret, settings=settings)
