from __future__ import annotations
from dataclasses import dataclass

# ====== App identity (used by API + CLI) ======
APP_NAME: str = "statement-engine"
APP_VERSION: str = "0.3.0"

@dataclass
class Settings:
    # Page Text Extractor: max vertical distance (PDF points) for two tokens
    # to be considered part of the same visual line.
    line_tolerance: float = 5.0
    # Structured parser: how many following lines are scanned for amounts.
    lookahead_lines: int = 2
    min_line_length: int = 5
    # Below this many structured results the flat-text fallback takes over.
    min_structured_transactions: int = 5
    # Two amounts further apart than this share of the larger one are read
    # as (flow, closing balance) instead of (withdrawal, deposit).
    balance_gap_ratio: float = 0.10
    narration_placeholder: str = "Transaction"
    # HTTP upload limit
    max_upload_mb: int = 25
