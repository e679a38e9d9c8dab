"""Row extraction for tabular statements.

Supported formats:
  - delimited text (.csv/.tsv/.txt): pandas, delimiter sniffed with csv.Sniffer
  - workbooks (.xlsx/.xlsm): openpyxl, first sheet only
  - legacy workbooks (.xls): pandas with the xlrd engine, first sheet only

All return the ordered header list plus one mapping per data row; the
first non-empty row is always the header.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, List
from zipfile import BadZipFile

import openpyxl
import pandas as pd
import xlrd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd.compdoc import CompDocError

from .errors import MalformedSource, NoDataFound

log = logging.getLogger("statement_engine.readers")

_ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")
_DELIMITERS = ",;\t|"

# Compound File header of legacy BIFF (.xls) workbooks
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


@dataclass
class TabularData:
    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)


def _decode(data: bytes) -> str:
    for encoding in _ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise MalformedSource(f"Could not decode delimited file with any of: {', '.join(_ENCODINGS)}")


def _sniff_delimiter(sample: str) -> str:
    try:
        return csv.Sniffer().sniff(sample, delimiters=_DELIMITERS).delimiter
    except csv.Error:
        # Single-column files have nothing to sniff
        return ","


def read_delimited(data: bytes) -> TabularData:
    """Parse delimited text with a header row into rows of strings."""
    text = _decode(data)
    if not text.strip():
        raise NoDataFound("No data found in the file")

    sep = _sniff_delimiter(text[:4096])
    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=sep,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as e:
        raise NoDataFound("No data found in the file") from e
    except (pd.errors.ParserError, csv.Error, ValueError) as e:
        raise MalformedSource(f"Error parsing delimited file: {e}") from e

    if df.empty:
        raise NoDataFound("No data found in the file")

    columns = [str(c) for c in df.columns]
    df.columns = columns
    log.info("Read %d rows x %d columns (delimiter %r)", len(df), len(columns), sep)
    return TabularData(columns=columns, rows=df.to_dict(orient="records"))


def _cell_value(v: Any) -> Any:
    if v is None or (not isinstance(v, str) and pd.isna(v)):
        return ""
    if isinstance(v, datetime):
        if v.time() == time(0, 0):
            return v.date().isoformat()
        return v.isoformat(sep=" ")
    if isinstance(v, date):
        return v.isoformat()
    if isinstance(v, str):
        return v.strip()
    return v


def _header_names(cells: List[Any]) -> List[str]:
    names: List[str] = []
    seen: Dict[str, int] = {}
    for i, cell in enumerate(cells):
        name = str(_cell_value(cell)).strip() or f"Column {i + 1}"
        if name in seen:
            seen[name] += 1
            name = f"{name} ({seen[name]})"
        else:
            seen[name] = 1
        names.append(name)
    return names


def _table_from_rows(raw_rows: List[List[Any]], source: str) -> TabularData:
    """First non-empty row is the header; fully empty rows are skipped."""
    rows = [r for r in raw_rows if any(str(c).strip() for c in r)]
    if len(rows) < 2:
        raise NoDataFound("No data found in the file")

    columns = _header_names(rows[0])
    records: List[Dict[str, Any]] = []
    for r in rows[1:]:
        padded = list(r) + [""] * (len(columns) - len(r))
        records.append(dict(zip(columns, padded)))

    log.info("Read %d rows x %d columns from %s", len(records), len(columns), source)
    return TabularData(columns=columns, rows=records)


def read_legacy_workbook(data: bytes) -> TabularData:
    """Read the first sheet of a BIFF (.xls) workbook via pandas + xlrd."""
    try:
        df = pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, dtype=object, engine="xlrd")
    except (xlrd.XLRDError, CompDocError, ValueError, OSError) as e:
        raise MalformedSource(f"Error reading legacy workbook: {e}") from e

    raw_rows = [[_cell_value(v) for v in r] for r in df.itertuples(index=False, name=None)]
    return _table_from_rows(raw_rows, "legacy workbook")


def read_workbook(data: bytes) -> TabularData:
    """Read the first worksheet; first non-empty row is the header."""
    if data[:8] == OLE2_SIGNATURE:
        return read_legacy_workbook(data)

    try:
        wb = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError, ValueError) as e:
        raise MalformedSource(f"Error reading workbook: {e}") from e

    try:
        ws = wb.worksheets[0]
        raw_rows = [
            [_cell_value(v) for v in r]
            for r in ws.iter_rows(values_only=True)
        ]
        sheet_name = ws.title
    finally:
        wb.close()

    return _table_from_rows(raw_rows, f"sheet {sheet_name!r}")
