"""Summary statistics and monthly breakdown over canonical transactions.

Pure reduction: transactions are only read, never modified.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .errors import NoTransactions
from .models import CREDIT, ZERO, AnalysisResult, MonthlyBucket, Summary, Transaction
from .patterns import month_label, parse_calendar_date

log = logging.getLogger("statement_engine.aggregate")


def summarize(transactions: Sequence[Transaction]) -> Summary:
    total_credits = sum((t.abs_amount for t in transactions if t.type == CREDIT), ZERO)
    total_debits = sum((t.abs_amount for t in transactions if t.type != CREDIT), ZERO)
    count = len(transactions)
    average = (total_credits + total_debits) / count if count else ZERO
    return Summary(
        total_transactions=count,
        total_credits=total_credits,
        total_debits=total_debits,
        net_amount=total_credits - total_debits,
        average_transaction=average,
    )


def monthly_breakdown(transactions: Sequence[Transaction]) -> Dict[str, MonthlyBucket]:
    """Bucket by 'Month YYYY'; transactions with unparsable dates are left out."""
    buckets: Dict[str, MonthlyBucket] = {}
    skipped = 0
    for txn in transactions:
        d = parse_calendar_date(txn.date)
        if d is None:
            skipped += 1
            continue
        buckets.setdefault(month_label(d), MonthlyBucket()).add(txn)
    if skipped:
        log.debug("%d transactions without a parsable date left out of monthly breakdown", skipped)
    return buckets


def analyze(
    transactions: Sequence[Transaction],
    original_columns: List[str],
    parse_method: str = "",
) -> AnalysisResult:
    """Build the AnalysisResult; an empty input is an error, not an empty result."""
    if not transactions:
        raise NoTransactions("No transactions found in the statement")

    txns = list(transactions)
    return AnalysisResult(
        transactions=txns,
        summary=summarize(txns),
        monthly_breakdown=monthly_breakdown(txns),
        original_columns=list(original_columns),
        parse_method=parse_method,
    )
