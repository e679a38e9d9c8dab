"""Structured line parser: date-led lines with a bounded amount lookahead.

Works on lines rebuilt from token positions.  A transaction starts at a
line that opens with a date; amounts are collected from that line and the
next few lines, because wrapped narrations often push the numbers down.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Tuple

from ..models import ZERO, Transaction
from ..page_extractor import ExtractedDocument
from ..patterns import find_amounts, match_line_date
from .base import LineStrategy, amounts_in_order, positional_flows

log = logging.getLogger("statement_engine.parsers.structured")


class StructuredLineParser(LineStrategy):
    NAME = "structured"

    def split_flows(self, amounts: List[Decimal]) -> Tuple[Decimal, Decimal, Decimal]:
        """(withdrawal, deposit, balance) for the amounts found in a window.

        With exactly two amounts far apart, the larger one is taken to be the
        running balance and the smaller one the flow.
        """
        if len(amounts) != 2:
            return positional_flows(amounts)

        first, second = amounts
        larger = max(first, second)
        gap_ratio = Decimal(str(self.settings.balance_gap_ratio))
        if abs(first - second) > larger * gap_ratio:
            if first > second:
                return ZERO, second, first
            return first, ZERO, second
        return first, second, ZERO

    def parse_lines(self, lines: List[str]) -> List[Transaction]:
        transactions: List[Transaction] = []
        lookahead = self.settings.lookahead_lines

        for i, raw in enumerate(lines):
            line = raw.strip()
            if len(line) < self.settings.min_line_length:
                continue

            date_token = match_line_date(line)
            if not date_token:
                continue

            window = " ".join([line] + lines[i + 1:i + 1 + lookahead])
            tokens = find_amounts(window)
            if not tokens:
                continue

            flows = self.split_flows(amounts_in_order(tokens))
            transactions.append(self.build(date_token, line, window, flows))

        log.debug("Structured parsing found %d transactions", len(transactions))
        return transactions

    def parse(self, document: ExtractedDocument) -> List[Transaction]:
        return self.parse_lines(document.lines)
