import io
import json
import logging
import re
from dataclasses import dataclass

import docx
from docx.shared import Pt

from .exceptions import UnsupportedFormatError
from .formatting import humanize_key
from .pdf_generator import PDFGenerator

logger = logging.getLogger(__name__)

NOTION_INSTRUCTIONS = (
    "Import this JSON into Notion using the Notion API or a Notion integration tool."
)


@dataclass(frozen=True)
class ExportArtifact:
    content: bytes
    filename: str
    mimetype: str


class ExportService:
    FORMATS = {
        "pdf": (".pdf", "application/pdf"),
        "word": (
            ".docx",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ),
        "notion": (".json", "application/json"),
    }

    def __init__(self, pdf_generator=None):
        self.pdf_generator = pdf_generator or PDFGenerator()

    def render(self, export_data, fmt: str) -> ExportArtifact:
        if not isinstance(fmt, str) or fmt not in self.FORMATS:
            raise UnsupportedFormatError(
                f"Invalid format: {fmt}. Supported formats: {', '.join(self.FORMATS)}"
            )

        renderers = {
            "pdf": self.pdf_generator.generate_report,
            "word": self._render_word,
            "notion": self._render_notion,
        }
        content = renderers[fmt](export_data)

        extension, mimetype = self.FORMATS[fmt]
        filename = self.suggest_filename(export_data) + extension
        logger.info(f"Rendered {fmt} export {filename} ({len(content)} bytes)")
        return ExportArtifact(content=content, filename=filename, mimetype=mimetype)

    @staticmethod
    def suggest_filename(export_data):
        metadata = export_data.metadata
        stem = "financial_analysis"
        if metadata.file_name:
            base = re.sub(r"\.[A-Za-z0-9]+$", "", metadata.file_name)
            base = re.sub(r"[^A-Za-z0-9_-]+", "_", base).strip("_")
            if base:
                stem = f"{base}_analysis"
        return f"{stem}_{metadata.generated_at.strftime('%Y%m%d_%H%M%S')}"

    def _render_word(self, export_data) -> bytes:
        document = docx.Document()
        metadata = export_data.metadata

        document.add_heading(export_data.title, level=0)
        if metadata.file_name:
            document.add_paragraph(f"Original File: {metadata.file_name}")
        document.add_paragraph(
            f"Generated: {metadata.generated_at.strftime('%B %d, %Y %H:%M UTC')}"
        )

        if export_data.summary is not None:
            document.add_heading("Executive Summary", level=1)
            document.add_paragraph(export_data.summary)

        if export_data.kpis is not None:
            document.add_heading("Key Performance Indicators", level=1)
            kpis = export_data.kpis.to_dict()
            table = document.add_table(rows=1, cols=2)
            table.style = "Table Grid"
            header = table.rows[0].cells
            header[0].text = "Metric"
            header[1].text = "Value"
            for key, value in kpis.items():
                cells = table.add_row().cells
                cells[0].text = humanize_key(key)
                cells[1].text = value

        if export_data.insights:
            document.add_heading("Key Insights", level=1)
            for insight in export_data.insights:
                paragraph = document.add_paragraph(style="List Bullet")
                title_run = paragraph.add_run(f"{insight.title}: ")
                title_run.bold = True
                paragraph.add_run(insight.description)

        for title, items in (
            ("Identified Risks", export_data.risks),
            ("Growth Opportunities", export_data.opportunities),
            ("Recommendations", export_data.recommendations),
        ):
            if items is None:
                continue
            document.add_heading(title, level=1)
            if not items:
                document.add_paragraph("None identified.")
            for item in items:
                document.add_paragraph(item, style="List Bullet")

        footer = document.add_paragraph(
            "This report was generated automatically from an AI analysis of the uploaded document."
        )
        for run in footer.runs:
            run.font.size = Pt(8)

        buffer = io.BytesIO()
        document.save(buffer)
        return buffer.getvalue()

    def _render_notion(self, export_data) -> bytes:
        payload = export_data.to_dict()
        payload["originalFile"] = export_data.metadata.file_name
        payload["generatedAt"] = payload["metadata"]["generatedAt"]
        payload["instructions"] = NOTION_INSTRUCTIONS
        return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
