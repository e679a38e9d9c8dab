"""Page text extraction for PDF bank statements.

Uses PyMuPDF word extraction to get every text fragment with its bounding
box, then rebuilds reading-order lines by clustering fragments that share
a vertical position:

1. Tokens are sorted top-to-bottom, then left-to-right, treating tokens
   whose vertical positions differ by less than a tolerance as one line
2. Consecutive same-line tokens are joined with a single space
3. Pages are processed in order; line order is page order, then in-page order

The raw page text (content-stream order) is kept alongside the rebuilt
lines for the flat-text fallback parser.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import fitz  # PyMuPDF

from .errors import MalformedSource, SecretIncorrect, SecretRequired

log = logging.getLogger("statement_engine.page_extractor")

DEFAULT_LINE_TOLERANCE = 5.0


@dataclass(frozen=True)
class PositionedToken:
    """A text fragment with its position on the page.

    ``y`` grows upward (PDF user space), so higher ``y`` means nearer the top.
    """
    text: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0


@dataclass
class PageText:
    page_number: int
    lines: List[str]
    text: str


@dataclass
class ExtractedDocument:
    pages: List[PageText] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def lines(self) -> List[str]:
        out: List[str] = []
        for page in self.pages:
            out.extend(page.lines)
        return out

    @property
    def text(self) -> str:
        return "\n".join(page.text for page in self.pages)


def _reading_order(tolerance: float):
    def compare(a: PositionedToken, b: PositionedToken) -> int:
        if abs(a.y - b.y) < tolerance:
            return (a.x > b.x) - (a.x < b.x)
        return (b.y > a.y) - (b.y < a.y)
    return functools.cmp_to_key(compare)


def tokens_to_lines(
    tokens: Iterable[PositionedToken],
    tolerance: float = DEFAULT_LINE_TOLERANCE,
) -> List[str]:
    """Group positioned tokens into reading-order text lines."""
    ordered = sorted(tokens, key=_reading_order(tolerance))

    lines: List[str] = []
    current: List[str] = []
    current_y: Optional[float] = None

    for tok in ordered:
        if current_y is None or abs(tok.y - current_y) < tolerance:
            current.append(tok.text)
        else:
            if current:
                lines.append(" ".join(current))
            current = [tok.text]
        current_y = tok.y

    if current:
        lines.append(" ".join(current))
    return lines


def page_tokens(page: "fitz.Page") -> List[PositionedToken]:
    """Positioned word tokens of one page, in bottom-origin coordinates."""
    page_height = float(page.rect.height)
    tokens: List[PositionedToken] = []
    for x0, y0, x1, y1, text, *_ in page.get_text("words"):
        if not text.strip():
            continue
        tokens.append(PositionedToken(
            text=text,
            x=float(x0),
            y=page_height - float(y1),
            width=float(x1 - x0),
            height=float(y1 - y0),
        ))
    return tokens


def open_document(data: bytes, secret: Optional[str] = None) -> "fitz.Document":
    """Open (and unlock) a PDF from memory.

    Raises SecretRequired / SecretIncorrect for protected documents so the
    caller can ask for a password and retry; anything else is MalformedSource.
    """
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise MalformedSource(f"Cannot open PDF document: {e}") from e

    if doc.needs_pass:
        if not secret:
            doc.close()
            raise SecretRequired("This PDF is password protected. Please provide a password.")
        if not doc.authenticate(secret):
            doc.close()
            raise SecretIncorrect("Incorrect password provided.")
    return doc


def extract_page(page: "fitz.Page", tolerance: float = DEFAULT_LINE_TOLERANCE) -> PageText:
    return PageText(
        page_number=page.number,
        lines=tokens_to_lines(page_tokens(page), tolerance),
        text=page.get_text("text") or "",
    )


def extract_document(
    data: bytes,
    secret: Optional[str] = None,
    tolerance: float = DEFAULT_LINE_TOLERANCE,
) -> ExtractedDocument:
    """Extract reconstructed lines and raw text from every page, in order."""
    doc = open_document(data, secret)
    try:
        pages = [extract_page(page, tolerance) for page in doc]
    except (RuntimeError, ValueError) as e:
        raise MalformedSource(f"Failed to extract page text: {e}") from e
    finally:
        doc.close()

    result = ExtractedDocument(pages=pages)
    log.info("Extracted %d lines from %d pages", len(result.lines), result.page_count)
    return result
