import io
import re

import pandas as pd
import pytest
from PyPDF2 import PdfWriter
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from conftest import make_csv
from services.exceptions import ParseError, UnsupportedTypeError
from services.text_extractor import TextExtractor

ROW_LINE = re.compile(r"^Row (\d+): (.*)$", re.MULTILINE)


def _row_lines(text):
    return ROW_LINE.findall(text)


def create_test_excel():
    income_statement = pd.DataFrame({
        "Financial Item": ["Revenue", "Cost of Goods Sold", "Net Income"],
        "2022": [1000000, 600000, 180000],
        "2023": [1200000, 720000, 215000],
    })
    ledger = pd.DataFrame({
        "Entry": [f"Entry {i}" for i in range(1, 81)],
        "Amount": [i * 10.5 for i in range(1, 81)],
    })

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        income_statement.to_excel(writer, sheet_name="Income Statement", index=False)
        ledger.to_excel(writer, sheet_name="Ledger", index=False)
    return buffer.getvalue()


def create_test_pdf(lines):
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    y = 720
    for line in lines:
        pdf.drawString(72, y, line)
        y -= 18
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def test_csv_emits_one_row_line_per_data_row_in_order():
    parsed = TextExtractor.parse(make_csv(25), "ledger.csv", "csv")

    rows = _row_lines(parsed.text)
    assert [int(index) for index, _ in rows] == list(range(1, 26))
    assert rows[0][1] == "Line item 1,1000,2024"
    assert rows[-1][1] == "Line item 25,25000,2024"
    assert "Headers: Item | Amount | Period" in parsed.text
    assert "Total Rows: 25" in parsed.text
    assert "more rows" not in parsed.text


def test_csv_truncates_after_one_hundred_rows():
    parsed = TextExtractor.parse(make_csv(150), "big.csv", "csv")

    assert len(_row_lines(parsed.text)) == 100
    assert "... and 50 more rows" in parsed.text


def test_csv_passes_values_through_verbatim():
    data = b"Metric,Value\nRevenue,\"$1,200,000\"\n\n  Margin,15%  \n"
    parsed = TextExtractor.parse(data, "kpis.csv", "csv")

    assert _row_lines(parsed.text) == [("1", 'Revenue,"$1,200,000"'), ("2", "Margin,15%")]
    assert parsed.metadata.file_type == "csv"
    assert parsed.metadata.file_name == "kpis.csv"


def test_csv_without_content_fails():
    with pytest.raises(ParseError):
        TextExtractor.parse(b"\n  \n", "empty.csv", "csv")


def test_excel_emits_sheet_headers_and_caps_rows_per_sheet():
    parsed = TextExtractor.parse(create_test_excel(), "financials.xlsx", "excel")
    text = parsed.text

    assert parsed.metadata.sheet_count == 2
    assert re.findall(r"^Sheet (\d+): (.+)$", text, re.MULTILINE) == [
        ("1", "Income Statement"),
        ("2", "Ledger"),
    ]

    sections = re.split(r"^Sheet \d+: .+$", text, flags=re.MULTILINE)[1:]
    assert len(sections) == 2
    assert len(_row_lines(sections[0])) == 4
    assert len(_row_lines(sections[1])) == 50
    assert "Row 2: Revenue | 1000000 | 1200000" in sections[0]
    assert "Rows: 81" in sections[1]


def test_excel_with_invalid_bytes_raises_parse_error():
    with pytest.raises(ParseError) as exc_info:
        TextExtractor.parse(b"definitely not a workbook", "broken.xlsx", "excel")

    assert exc_info.value.__cause__ is not None


def test_pdf_text_is_extracted():
    data = create_test_pdf(["Quarterly Report", "Revenue: $1,200,000", "Net Income: $400,000"])
    parsed = TextExtractor.parse(data, "report.pdf", "pdf")

    assert parsed.metadata.page_count == 1
    assert "--- Page 1 ---" in parsed.text
    assert "Revenue: $1,200,000" in parsed.text
    assert "Net Income: $400,000" in parsed.text


def test_pdf_without_text_raises_parse_error():
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)

    with pytest.raises(ParseError):
        TextExtractor.parse(buffer.getvalue(), "scan.pdf", "pdf")


def test_corrupt_pdf_raises_parse_error():
    with pytest.raises(ParseError):
        TextExtractor.parse(b"%PDF-1.4 garbage", "corrupt.pdf", "pdf")


def test_unsupported_type_is_rejected():
    with pytest.raises(UnsupportedTypeError):
        TextExtractor.parse(b"hello", "notes.docx", "docx")


def test_parsed_content_is_immutable():
    parsed = TextExtractor.parse(make_csv(3), "small.csv", "csv")

    with pytest.raises(Exception):
        parsed.text = "changed"
