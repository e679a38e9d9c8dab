"""Canonical data structures produced by the ingestion engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

ZERO = Decimal("0")

CREDIT = "credit"
DEBIT = "debit"

# Column list reported for page-derived input (no source headers exist)
CANONICAL_COLUMNS: List[str] = [
    "date",
    "narration",
    "chqRefNo",
    "valueDt",
    "withdrawalAmt",
    "depositAmt",
    "closingBalance",
    "amount",
    "type",
    "absAmount",
]


@dataclass(frozen=True)
class Transaction:
    """Single normalized transaction.

    Only the flows are stored; ``amount``, ``type`` and ``abs_amount`` are
    derived so they always agree with ``deposit_amt - withdrawal_amt``.
    """

    date: str
    narration: str = "Transaction"
    chq_ref_no: str = ""
    value_dt: str = ""
    withdrawal_amt: Decimal = ZERO
    deposit_amt: Decimal = ZERO
    closing_balance: Decimal = ZERO

    def __post_init__(self):
        if not self.value_dt:
            object.__setattr__(self, "value_dt", self.date)
        if self.withdrawal_amt < 0 or self.deposit_amt < 0:
            raise ValueError("withdrawal and deposit amounts must be non-negative")

    @property
    def amount(self) -> Decimal:
        return self.deposit_amt - self.withdrawal_amt

    @property
    def type(self) -> str:
        return CREDIT if self.amount >= 0 else DEBIT

    @property
    def abs_amount(self) -> Decimal:
        return abs(self.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "narration": self.narration,
            "chqRefNo": self.chq_ref_no,
            "valueDt": self.value_dt,
            "withdrawalAmt": float(self.withdrawal_amt),
            "depositAmt": float(self.deposit_amt),
            "closingBalance": float(self.closing_balance),
            "amount": float(self.amount),
            "type": self.type,
            "absAmount": float(self.abs_amount),
        }


def make_transaction(
    date: str,
    narration: str,
    withdrawal: Decimal = ZERO,
    deposit: Decimal = ZERO,
    closing_balance: Decimal = ZERO,
    chq_ref_no: str = "",
    value_dt: Optional[str] = None,
    placeholder: str = "Transaction",
) -> Transaction:
    """Build a Transaction, substituting the placeholder for empty narration."""
    return Transaction(
        date=date,
        narration=narration or placeholder,
        chq_ref_no=chq_ref_no or "",
        value_dt=value_dt or date,
        withdrawal_amt=withdrawal,
        deposit_amt=deposit,
        closing_balance=closing_balance,
    )


@dataclass
class MonthlyBucket:
    credits: Decimal = ZERO
    debits: Decimal = ZERO
    count: int = 0

    def add(self, txn: Transaction) -> None:
        if txn.type == CREDIT:
            self.credits += txn.abs_amount
        else:
            self.debits += txn.abs_amount
        self.count += 1

    def to_dict(self) -> Dict[str, Any]:
        return {"credits": float(self.credits), "debits": float(self.debits), "count": self.count}


@dataclass(frozen=True)
class Summary:
    total_transactions: int
    total_credits: Decimal
    total_debits: Decimal
    net_amount: Decimal
    average_transaction: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalTransactions": self.total_transactions,
            "totalCredits": float(self.total_credits),
            "totalDebits": float(self.total_debits),
            "netAmount": float(self.net_amount),
            "averageTransaction": float(self.average_transaction),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Complete result of ingesting one statement file."""

    transactions: List[Transaction]
    summary: Summary
    monthly_breakdown: Dict[str, MonthlyBucket] = field(default_factory=dict)
    original_columns: List[str] = field(default_factory=list)
    parse_method: str = ""  # "tabular", "structured" or "fallback"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "summary": self.summary.to_dict(),
            "monthlyBreakdown": {k: v.to_dict() for k, v in self.monthly_breakdown.items()},
            "originalColumns": list(self.original_columns),
            "parseMethod": self.parse_method,
        }
