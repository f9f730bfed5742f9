import io
import json
from datetime import datetime, timezone

import docx
import pytest
from PyPDF2 import PdfReader

from services.dashboard_service import DashboardService
from services.exceptions import UnsupportedFormatError
from services.export_service import ExportService


@pytest.fixture(scope="module")
def export_service():
    return ExportService()


@pytest.fixture
def export_data(sample_analysis):
    dashboard = DashboardService.generate_dashboard(sample_analysis)
    return DashboardService.generate_export_data(
        sample_analysis,
        dashboard,
        analysis_id="an-1",
        file_name="Q3 report.csv",
        generated_at=datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc),
    )


def test_pdf_export_is_a_real_pdf(export_service, export_data):
    artifact = export_service.render(export_data, "pdf")

    assert artifact.content.startswith(b"%PDF")
    assert artifact.mimetype == "application/pdf"
    assert artifact.filename == "Q3_report_analysis_20260301_120000.pdf"

    reader = PdfReader(io.BytesIO(artifact.content))
    assert len(reader.pages) >= 1
    assert reader.metadata.title == "Financial Analysis Report"


def test_word_export_is_a_real_docx(export_service, export_data):
    artifact = export_service.render(export_data, "word")
    document = docx.Document(io.BytesIO(artifact.content))

    paragraphs = [paragraph.text for paragraph in document.paragraphs]
    assert "Financial Analysis Report" in paragraphs
    assert "Expansion into new regions" in paragraphs
    assert artifact.filename.endswith(".docx")

    table = document.tables[0]
    assert len(table.rows) == 11
    assert table.rows[3].cells[0].text == "Net Profit"
    assert table.rows[3].cells[1].text == "$400,000"


def test_notion_export_is_json(export_service, export_data):
    artifact = export_service.render(export_data, "notion")
    payload = json.loads(artifact.content.decode("utf-8"))

    assert artifact.filename.endswith(".json")
    assert payload["title"] == "Financial Analysis Report"
    assert payload["kpis"]["netProfit"] == "$400,000"
    assert payload["originalFile"] == "Q3 report.csv"
    assert payload["generatedAt"].startswith("2026-03-01T12:00:00")
    assert "instructions" in payload
    assert len(payload["insights"]) == len(export_data.insights)


def test_exports_are_deterministic(export_service, export_data):
    first = export_service.render(export_data, "notion")
    second = export_service.render(export_data, "notion")

    assert first == second


def test_filtered_sections_are_left_out(export_service, export_data):
    filtered = DashboardService.filter_sections(export_data, ["summary"])

    payload = json.loads(export_service.render(filtered, "notion").content)
    assert "risks" not in payload
    assert "kpis" not in payload

    pdf = export_service.render(filtered, "pdf")
    assert pdf.content.startswith(b"%PDF")

    document = docx.Document(io.BytesIO(export_service.render(filtered, "word").content))
    assert document.tables == []


def test_unsupported_format_is_rejected(export_service, export_data):
    with pytest.raises(UnsupportedFormatError):
        export_service.render(export_data, "pptx")


def test_non_string_format_is_rejected(export_service, export_data):
    with pytest.raises(UnsupportedFormatError):
        export_service.render(export_data, ["pdf"])
