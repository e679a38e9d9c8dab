"""Page-text transaction parsers."""

from .base import LineStrategy, StrategyResult
from .fallback import FlatTextParser
from .registry import default_strategies, select_transactions
from .structured import StructuredLineParser

__all__ = [
    "FlatTextParser",
    "LineStrategy",
    "StrategyResult",
    "StructuredLineParser",
    "default_strategies",
    "select_transactions",
]
