"""Base class and shared helpers for page-text transaction parsers."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Tuple

from ..models import ZERO, Transaction, make_transaction
from ..page_extractor import ExtractedDocument
from ..patterns import find_reference, parse_flow_amount, strip_date_and_amounts
from ..settings import Settings

_LEADING_NONWORD_RE = re.compile(r"^\W+")
_TRAILING_NONWORD_RE = re.compile(r"\W+$")


@dataclass
class StrategyResult:
    """Transactions recovered by one strategy plus its acceptance signal."""

    name: str
    transactions: List[Transaction] = field(default_factory=list)
    threshold: int = 0

    @property
    def accepted(self) -> bool:
        return len(self.transactions) >= self.threshold


class LineStrategy(ABC):
    """Abstract page-text parser.

    Strategies are tried in order; the first whose output clears its
    ``threshold`` wins.
    """

    NAME: str = ""

    def __init__(self, settings: Optional[Settings] = None, threshold: int = 0):
        self.settings = settings or Settings()
        self.threshold = threshold

    @abstractmethod
    def parse(self, document: ExtractedDocument) -> List[Transaction]:
        ...

    def run(self, document: ExtractedDocument) -> StrategyResult:
        return StrategyResult(
            name=self.NAME,
            transactions=self.parse(document),
            threshold=self.threshold,
        )

    # --- Helpers for subclasses ---

    def clean_narration(self, line: str, date_token: str) -> str:
        """Line minus its date and amounts, whitespace collapsed, edges trimmed."""
        text = strip_date_and_amounts(line, date_token).strip()
        text = re.sub(r"\s+", " ", text)
        text = _LEADING_NONWORD_RE.sub("", text)
        return _TRAILING_NONWORD_RE.sub("", text)

    def build(
        self,
        date_token: str,
        line: str,
        reference_scope: str,
        flows: Tuple[Decimal, Decimal, Decimal],
    ) -> Transaction:
        withdrawal, deposit, balance = flows
        return make_transaction(
            date=date_token,
            narration=self.clean_narration(line, date_token),
            withdrawal=withdrawal,
            deposit=deposit,
            closing_balance=balance,
            chq_ref_no=find_reference(reference_scope),
            placeholder=self.settings.narration_placeholder,
        )


def amounts_in_order(tokens: List[str]) -> List[Decimal]:
    return [parse_flow_amount(t) for t in tokens]


def positional_flows(amounts: List[Decimal]) -> Tuple[Decimal, Decimal, Decimal]:
    """(withdrawal, deposit, balance) by position: 3+ -> w/d/b, 2 -> w/d, 1 -> d."""
    if len(amounts) >= 3:
        return amounts[0], amounts[1], amounts[2]
    if len(amounts) == 2:
        return amounts[0], amounts[1], ZERO
    if len(amounts) == 1:
        return ZERO, amounts[0], ZERO
    return ZERO, ZERO, ZERO
