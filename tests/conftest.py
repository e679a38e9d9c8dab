"""Shared pytest fixtures for statement engine tests."""

from __future__ import annotations

import io
import os
import sys
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pytest

# Ensure the project root is importable
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# Override config directory so tests don't touch a real settings.json.
os.environ["STATEMENT_ENGINE_CONFIG_DIR"] = tempfile.mkdtemp(prefix="stmt_engine_test_cfg_")


def build_pdf(pages: Sequence[Sequence[str]], password: Optional[str] = None) -> bytes:
    """Render one text line per entry, 16pt apart, one list per page."""
    import fitz

    doc = fitz.open()
    for lines in pages:
        page = doc.new_page()
        y = 72
        for line in lines:
            page.insert_text((50, y), line, fontsize=10)
            y += 16
    kwargs = {}
    if password:
        kwargs = {
            "encryption": fitz.PDF_ENCRYPT_AES_256,
            "owner_pw": f"owner-{password}",
            "user_pw": password,
        }
    data = doc.tobytes(**kwargs)
    doc.close()
    return data


def build_xlsx(rows: List[list]) -> bytes:
    import openpyxl

    wb = openpyxl.Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture
def make_xlsx() -> Callable[[List[list]], bytes]:
    return build_xlsx


@pytest.fixture
def statement_lines() -> List[str]:
    """Six well-formed statement lines (enough for the structured parser)."""
    return [
        "01/02/2024 ATM WDL 500.00 100.00 9400.00",
        "03/02/2024 SALARY CREDIT 0.00 25,000.00 34,400.00",
        "05/02/2024 UPI SWIGGY 450.00 0.00 33,950.00",
        "09/02/2024 NEFT RENT 12,000.00 0.00 21,950.00",
        "14/03/2024 CHQ DEP 0.00 2,050.00 24,000.00",
        "20/03/2024 POS AMAZON 1,000.00 0.00 23,000.00",
    ]


@pytest.fixture
def sample_csv_file(tmp_path: Path) -> Path:
    """Create a simple debit/credit CSV statement."""
    p = tmp_path / "statement.csv"
    p.write_text(
        "Date,Narration,Debit,Credit\n"
        "01/02/2024,Coffee,150.00,\n"
        "05/02/2024,Salary,,5000.00\n"
        "20/03/2024,Rent,1200.00,\n",
        encoding="utf-8",
    )
    return p
