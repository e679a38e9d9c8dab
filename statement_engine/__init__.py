"""Statement ingestion & normalization engine.

Provides:
- Page text extraction from PDF statements (positioned tokens -> lines)
- Structured and flat-text line parsers for page-derived text
- Column-role inference for CSV / spreadsheet statements
- Canonical transaction model with summary and monthly aggregation
"""

from .errors import (
    IngestError,
    MalformedSource,
    NoDataFound,
    NoTransactions,
    SecretIncorrect,
    SecretRequired,
    UnsupportedFormat,
)
from .models import AnalysisResult, MonthlyBucket, Summary, Transaction
from .pipeline import FileKind, ingest, ingest_path, kind_for_filename

__all__ = [
    "AnalysisResult",
    "FileKind",
    "IngestError",
    "MalformedSource",
    "MonthlyBucket",
    "NoDataFound",
    "NoTransactions",
    "SecretIncorrect",
    "SecretRequired",
    "Summary",
    "Transaction",
    "UnsupportedFormat",
    "ingest",
    "ingest_path",
    "kind_for_filename",
]
