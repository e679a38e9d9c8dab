"""Column-role inference for tabular bank statements.

Assigns semantic roles (date, description, amount, withdrawal, deposit)
to arbitrarily named columns using ordered keyword lists and positional
fallbacks, then maps each row into a canonical Transaction.

Role assignment depends on the header list only, never on row values.
Keywords are plain case-insensitive substrings and their order and the
fallbacks are fixed.  A header such as "Transaction Date" matches both the
amount and the date keywords; whichever column comes first wins.
"Description" contains "cr", so it can take the deposit role.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .models import ZERO, Transaction, make_transaction
from .patterns import parse_signed_amount
from .readers import TabularData
from .settings import Settings

log = logging.getLogger("statement_engine.column_roles")

AMOUNT_KEYWORDS = ("amount", "debit", "credit", "balance", "transaction")
DATE_KEYWORDS = ("date", "posted", "transaction")
DESCRIPTION_KEYWORDS = ("description", "memo", "details", "narration")
WITHDRAWAL_KEYWORDS = ("withdrawal", "debit", "dr")
DEPOSIT_KEYWORDS = ("deposit", "credit", "cr")

# Optional roles: only fill chqRefNo / closingBalance / valueDt
REFERENCE_KEYWORDS = ("chq", "cheque", "ref")
BALANCE_KEYWORDS = ("closing", "balance")
VALUE_DATE_KEYWORDS = ("value dt", "value date")


@dataclass(frozen=True)
class ColumnRoles:
    date: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[str] = None
    withdrawal: Optional[str] = None
    deposit: Optional[str] = None
    reference: Optional[str] = None
    balance: Optional[str] = None
    value_date: Optional[str] = None

    @property
    def has_split_flows(self) -> bool:
        return bool(self.withdrawal and self.deposit)


def find_column(
    columns: Sequence[str],
    keywords: Iterable[str],
    exclude: Iterable[Optional[str]] = (),
) -> Optional[str]:
    """First column (in column order) whose lowercased name contains any keyword."""
    keywords = tuple(keywords)
    skip = {c for c in exclude if c}
    for col in columns:
        if col in skip:
            continue
        col_l = str(col).lower()
        if any(k in col_l for k in keywords):
            return col
    return None


def infer_column_roles(columns: Sequence[str]) -> ColumnRoles:
    columns = list(columns)

    amount = find_column(columns, AMOUNT_KEYWORDS)
    if amount is None and columns:
        amount = columns[-1]  # usually amount is the last column

    date = find_column(columns, DATE_KEYWORDS)
    if date is None and len(columns) > 1:
        date = columns[0]

    description = find_column(columns, DESCRIPTION_KEYWORDS)
    if description is None and len(columns) > 2:
        description = columns[1]

    withdrawal = find_column(columns, WITHDRAWAL_KEYWORDS)
    deposit = find_column(columns, DEPOSIT_KEYWORDS)

    claimed = [date, description, withdrawal, deposit]
    if not (withdrawal and deposit):
        claimed.append(amount)

    roles = ColumnRoles(
        date=date,
        description=description,
        amount=amount,
        withdrawal=withdrawal,
        deposit=deposit,
        reference=find_column(columns, REFERENCE_KEYWORDS, exclude=claimed + [amount]),
        balance=find_column(columns, BALANCE_KEYWORDS, exclude=claimed),
        value_date=find_column(columns, VALUE_DATE_KEYWORDS, exclude=claimed + [amount]),
    )
    log.debug("Column roles: %s", roles)
    return roles


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _amount(row: Dict[str, Any], column: Optional[str]) -> Decimal:
    if not column:
        return ZERO
    parsed = parse_signed_amount(row.get(column))
    return parsed if parsed is not None else ZERO


def map_row(row: Dict[str, Any], roles: ColumnRoles, settings: Optional[Settings] = None) -> Optional[Transaction]:
    """Canonical Transaction for one row, or None when it nets to zero."""
    settings = settings or Settings()

    if roles.has_split_flows:
        withdrawal = abs(_amount(row, roles.withdrawal))
        deposit = abs(_amount(row, roles.deposit))
    else:
        signed = _amount(row, roles.amount)
        if signed >= 0:
            withdrawal, deposit = ZERO, signed
        else:
            withdrawal, deposit = -signed, ZERO

    if deposit - withdrawal == 0:
        return None

    date = _text(row.get(roles.date)) if roles.date else ""
    return make_transaction(
        date=date,
        narration=_text(row.get(roles.description)) if roles.description else "",
        withdrawal=withdrawal,
        deposit=deposit,
        closing_balance=_amount(row, roles.balance),
        chq_ref_no=_text(row.get(roles.reference)) if roles.reference else "",
        value_dt=_text(row.get(roles.value_date)) if roles.value_date else date,
        placeholder=settings.narration_placeholder,
    )


def map_rows(data: TabularData, settings: Optional[Settings] = None) -> List[Transaction]:
    """Infer column roles from the header and map every row."""
    roles = infer_column_roles(data.columns)
    transactions: List[Transaction] = []
    for row in data.rows:
        txn = map_row(row, roles, settings)
        if txn is not None:
            transactions.append(txn)
    log.info("Mapped %d of %d rows to transactions", len(transactions), len(data.rows))
    return transactions
