"""Strategy registry: ordered page-text parsers and selection."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..page_extractor import ExtractedDocument
from ..settings import Settings
from .base import LineStrategy, StrategyResult
from .fallback import FlatTextParser
from .structured import StructuredLineParser

log = logging.getLogger("statement_engine.parsers")


def default_strategies(settings: Optional[Settings] = None) -> List[LineStrategy]:
    """Strategies in decreasing precision (checked in order)."""
    settings = settings or Settings()
    return [
        StructuredLineParser(settings, threshold=settings.min_structured_transactions),
        FlatTextParser(settings, threshold=0),
    ]


def select_transactions(
    document: ExtractedDocument,
    strategies: Optional[Sequence[LineStrategy]] = None,
    settings: Optional[Settings] = None,
) -> StrategyResult:
    """Run strategies in order and return the first accepted result.

    If no strategy clears its threshold, the last result is returned.
    """
    if strategies is None:
        strategies = default_strategies(settings)
    if not strategies:
        raise ValueError("at least one parsing strategy is required")

    result: Optional[StrategyResult] = None
    for strategy in strategies:
        result = strategy.run(document)
        if result.accepted:
            break
        log.info(
            "%s parsing found %d transactions (need %d), trying next strategy",
            result.name, len(result.transactions), result.threshold,
        )

    log.info("Using %s parser: %d transactions", result.name, len(result.transactions))
    return result
