"""Amount and date recognizers shared by all statement parsers.

Pure and stateless: compiled regexes plus small parse helpers.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

# Grouped-thousands decimal with exactly two fraction digits: 1,234.56 / 1234.56
AMOUNT_RE = re.compile(r"(\d{1,3}(?:,\d{3})*\.\d{2}|\d+\.\d{2})(?!\d)")

# Line-start date patterns, tried in this order (first match wins).
# 2-digit-year variants must not eat the head of a 4-digit year.
LINE_DATE_PATTERNS: List[re.Pattern] = [
    re.compile(r"^(\d{1,2}/\d{1,2}/\d{2})(?!\d)"),   # DD/MM/YY
    re.compile(r"^(\d{1,2}/\d{1,2}/\d{4})(?!\d)"),   # DD/MM/YYYY
    re.compile(r"^(\d{1,2}-\d{1,2}-\d{2})(?!\d)"),   # DD-MM-YY
    re.compile(r"^(\d{1,2}-\d{1,2}-\d{4})(?!\d)"),   # DD-MM-YYYY
]

# Date anywhere in a line (flat-text fallback)
ANY_DATE_RE = re.compile(r"(?<!\d)(\d{1,2}/\d{1,2}/\d{4}|\d{1,2}/\d{1,2}/\d{2}|\d{1,2}-\d{1,2}-\d{4}|\d{1,2}-\d{1,2}-\d{2})(?!\d)")

# Cheque / reference number heuristic
REFERENCE_RE = re.compile(r"([A-Z0-9]{8,}|[0-9]{10,})")

_CURRENCY_CHARS_RE = re.compile(r"[₹$€£¥\s ]|INR|USD|EUR|GBP|Rs\.?", re.IGNORECASE)
_SIGNED_NUMBER_RE = re.compile(r"^[+-]?\d*\.?\d+$")

_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_TEXT_DATE_FORMATS = (
    "%d %b %Y",
    "%d %B %Y",
    "%d-%b-%Y",
    "%d-%b-%y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
)


def match_line_date(line: str) -> Optional[str]:
    """Return the date a line opens with, or None."""
    for pattern in LINE_DATE_PATTERNS:
        m = pattern.match(line)
        if m:
            return m.group(1)
    return None


def find_amounts(text: str) -> List[str]:
    """All amount-shaped tokens in order of occurrence."""
    return AMOUNT_RE.findall(text)


def find_dates(text: str) -> List[str]:
    return ANY_DATE_RE.findall(text)


def find_reference(text: str) -> str:
    m = REFERENCE_RE.search(text)
    return m.group(1) if m else ""


def parse_flow_amount(token: str) -> Decimal:
    """'1,234.56' -> Decimal('1234.56'). Token must come from AMOUNT_RE."""
    return Decimal(token.replace(",", ""))


def parse_signed_amount(value: Any) -> Optional[Decimal]:
    """Parse a tabular cell into a signed Decimal.

    Handles numbers, currency symbols, thousands separators, trailing
    minus ('150.00-') and accounting parentheses ('(150.00)').
    Returns None for empty or unparsable cells.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            d = Decimal(str(value))
        except InvalidOperation:
            return None
        return d if d.is_finite() else None

    s = _CURRENCY_CHARS_RE.sub("", str(value)).replace(",", "")
    if not s:
        return None

    negative = False
    suffix = s[-2:].upper()
    if suffix in ("CR", "DR"):
        negative = suffix == "DR"
        s = s[:-2]
    if s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]
    if s.endswith("-"):
        negative = True
        s = s[:-1]

    if not _SIGNED_NUMBER_RE.match(s):
        return None
    try:
        d = Decimal(s)
    except InvalidOperation:
        return None
    return -abs(d) if negative else d


def _expand_year(yy: int) -> int:
    return 2000 + yy if yy < 80 else 1900 + yy


def parse_calendar_date(text: str) -> Optional[date]:
    """Parse a raw statement date into a calendar date (day-first).

    Accepts YYYY-MM-DD, D/M/Y, D-M-Y, D.M.Y (2- or 4-digit year) and a few
    textual forms ('15 Jan 2024', 'Jan 15, 2024').
    """
    if not text:
        return None
    s = str(text).strip()
    if not s:
        return None

    try:
        m = re.match(r"^(\d{4})-(\d{1,2})-(\d{1,2})", s)
        if m:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

        m = re.match(r"^(\d{1,2})[./\-](\d{1,2})[./\-](\d{4}|\d{2})(?!\d)", s)
        if m:
            year = int(m.group(3))
            if len(m.group(3)) == 2:
                year = _expand_year(year)
            return date(year, int(m.group(2)), int(m.group(1)))
    except ValueError:
        # Shape matched but not a real calendar date (e.g. 31/02/2024)
        return None

    for fmt in _TEXT_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def month_label(d: date) -> str:
    """'January 2024' (fixed English names, locale independent)."""
    return f"{_MONTH_NAMES[d.month - 1]} {d.year}"


def strip_date_and_amounts(line: str, date_token: str) -> str:
    """Remove the date (first occurrence) and every amount token from a line."""
    out = line.replace(date_token, "", 1) if date_token else line
    return AMOUNT_RE.sub("", out)
