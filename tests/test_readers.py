"""Tests for delimited and workbook row readers."""

from __future__ import annotations

from datetime import datetime

import pytest

from statement_engine.errors import MalformedSource, NoDataFound
from statement_engine.readers import read_delimited, read_workbook


class TestReadDelimited:
    def test_comma_separated(self):
        data = b"Date,Description,Amount\n01/02/2024,Coffee,-3.50\n02/02/2024,Pay,100\n"
        table = read_delimited(data)
        assert table.columns == ["Date", "Description", "Amount"]
        assert table.rows[0] == {"Date": "01/02/2024", "Description": "Coffee", "Amount": "-3.50"}
        assert len(table.rows) == 2

    def test_semicolon_separated(self):
        data = "Datum;Omschrijving;Bedrag\n01-02-2024;Koffie;3,50\n".encode("utf-8")
        table = read_delimited(data)
        assert table.columns == ["Datum", "Omschrijving", "Bedrag"]

    def test_cells_stay_text(self):
        table = read_delimited(b"Date,Ref,Amount\n01/02/2024,000123,10.00\n")
        assert table.rows[0]["Ref"] == "000123"
        assert table.rows[0]["Amount"] == "10.00"

    def test_bom_and_cp1252(self):
        table = read_delimited("\ufeffDate,Description,Amount\n01/02/2024,Café,5.00\n".encode("utf-8"))
        assert table.columns[0] == "Date"
        table = read_delimited("Date,Description,Amount\n01/02/2024,Café,5.00\n".encode("cp1252"))
        assert table.rows[0]["Description"] == "Café"

    def test_single_column(self):
        table = read_delimited(b"Amount\n10.00\n-5.00\n")
        assert table.columns == ["Amount"]
        assert len(table.rows) == 2

    @pytest.mark.parametrize("data", [b"", b"   \n\n", b"Date,Description,Amount\n"])
    def test_no_data(self, data):
        with pytest.raises(NoDataFound):
            read_delimited(data)


class TestReadWorkbook:
    def test_first_sheet_header_and_rows(self, make_xlsx):
        data = make_xlsx([
            ["Date", "Description", "Debit", "Credit"],
            [datetime(2024, 2, 1), "Coffee", 150.0, None],
            [None, None, None, None],
            [datetime(2024, 2, 5, 9, 30), "Salary", None, 5000],
        ])
        table = read_workbook(data)
        assert table.columns == ["Date", "Description", "Debit", "Credit"]
        assert len(table.rows) == 2
        assert table.rows[0]["Date"] == "2024-02-01"
        assert table.rows[0]["Debit"] == 150.0
        assert table.rows[0]["Credit"] == ""
        assert table.rows[1]["Date"].startswith("2024-02-05 09:30")

    def test_blank_and_duplicate_headers(self, make_xlsx):
        data = make_xlsx([["Date", None, "Amount", "Amount"], ["2024-01-01", "x", 1, 2]])
        table = read_workbook(data)
        assert table.columns == ["Date", "Column 2", "Amount", "Amount (2)"]

    def test_header_only(self, make_xlsx):
        with pytest.raises(NoDataFound):
            read_workbook(make_xlsx([["Date", "Amount"]]))

    def test_not_a_workbook(self):
        with pytest.raises(MalformedSource):
            read_workbook(b"definitely not a zip archive")


class TestReadLegacyWorkbook:
    @pytest.fixture
    def fake_read_excel(self, monkeypatch):
        import pandas as pd

        calls = []

        def _install(frame=None, error=None):
            def fake(buf, **kwargs):
                calls.append(kwargs)
                if error is not None:
                    raise error
                return frame

            monkeypatch.setattr(pd, "read_excel", fake)
            return calls

        return _install

    def test_dispatched_by_signature(self, fake_read_excel):
        import pandas as pd
        from statement_engine.readers import OLE2_SIGNATURE

        frame = pd.DataFrame([
            ["Date", "Narration", "Amount"],
            [float("nan"), None, float("nan")],
            ["01/02/2024", "Pay", 100.0],
            [datetime(2024, 2, 5), None, -5.5],
        ], dtype=object)
        calls = fake_read_excel(frame)

        table = read_workbook(OLE2_SIGNATURE + b"\x00" * 504)

        assert calls[0]["engine"] == "xlrd"
        assert calls[0]["header"] is None
        assert calls[0]["sheet_name"] == 0
        assert table.columns == ["Date", "Narration", "Amount"]
        assert len(table.rows) == 2
        assert table.rows[0] == {"Date": "01/02/2024", "Narration": "Pay", "Amount": 100.0}
        assert table.rows[1]["Date"] == "2024-02-05"
        assert table.rows[1]["Narration"] == ""

    def test_header_only(self, fake_read_excel):
        import pandas as pd
        from statement_engine.readers import OLE2_SIGNATURE

        fake_read_excel(pd.DataFrame([["Date", "Amount"]], dtype=object))
        with pytest.raises(NoDataFound):
            read_workbook(OLE2_SIGNATURE)

    def test_unreadable(self, fake_read_excel):
        import xlrd
        from statement_engine.readers import OLE2_SIGNATURE

        fake_read_excel(error=xlrd.XLRDError("Unsupported format, or corrupt file"))
        with pytest.raises(MalformedSource):
            read_workbook(OLE2_SIGNATURE + b"garbage")

    def test_xls_statement_through_pipeline(self, fake_read_excel):
        import pandas as pd
        from statement_engine import FileKind, ingest
        from statement_engine.readers import OLE2_SIGNATURE

        fake_read_excel(pd.DataFrame([
            ["Date", "Memo", "Amount"],
            ["2024-01-05", "Rent", -1200.0],
            ["2024-01-06", "Pay", 3000.0],
        ], dtype=object))

        result = ingest(OLE2_SIGNATURE, FileKind.TABULAR_SPREADSHEET)
        assert [t.type for t in result.transactions] == ["debit", "credit"]
        assert result.original_columns == ["Date", "Memo", "Amount"]
