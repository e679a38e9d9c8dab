"""Error taxonomy for statement ingestion.

Every failure that reaches the caller is an ``IngestError``.  Only the two
secret-related errors are ``retryable``: the caller may resubmit the same
file with a different password.  All others need a different file.
"""

from __future__ import annotations


class IngestError(RuntimeError):
    code: str = "ingest_error"
    retryable: bool = False

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": str(self), "retryable": self.retryable}


class UnsupportedFormat(IngestError):
    code = "unsupported_format"


class NoDataFound(IngestError):
    code = "no_data_found"


class NoTransactions(IngestError):
    code = "no_transactions"


class SecretRequired(IngestError):
    code = "secret_required"
    retryable = True


class SecretIncorrect(IngestError):
    code = "secret_incorrect"
    retryable = True


class MalformedSource(IngestError):
    code = "malformed_source"
