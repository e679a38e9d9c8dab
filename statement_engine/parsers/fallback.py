"""Flat-text fallback parser.

Safety net for layouts where line reconstruction fails (multi-column
statements).  Every raw text line is judged on its own: it needs at least
one date and one amount somewhere on it.  Less precise than the structured
parser: no lookahead and no balance heuristic.
"""

from __future__ import annotations

import logging
from typing import List

from ..models import Transaction
from ..page_extractor import ExtractedDocument
from ..patterns import find_amounts, find_dates
from .base import LineStrategy, amounts_in_order, positional_flows

log = logging.getLogger("statement_engine.parsers.fallback")


class FlatTextParser(LineStrategy):
    NAME = "fallback"

    def parse_text(self, text: str) -> List[Transaction]:
        transactions: List[Transaction] = []

        for raw in text.split("\n"):
            line = raw.strip()
            if not line:
                continue

            dates = find_dates(line)
            tokens = find_amounts(line)
            if not dates or not tokens:
                continue

            flows = positional_flows(amounts_in_order(tokens))
            transactions.append(self.build(dates[0], line, line, flows))

        log.debug("Fallback parsing found %d transactions", len(transactions))
        return transactions

    def parse(self, document: ExtractedDocument) -> List[Transaction]:
        return self.parse_text(document.text)
