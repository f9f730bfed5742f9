import io
import logging
import os

from matplotlib.figure import Figure
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, Image, KeepTogether
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.pagesizes import A4
from reportlab.lib.colors import white, HexColor
from reportlab.lib.units import inch
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from .formatting import humanize_key

logger = logging.getLogger(__name__)

INSIGHT_COLORS = {
    "positive": "#059669",
    "negative": "#dc2626",
    "neutral": "#6b7280",
}


class PDFGenerator:
    def __init__(self):
        self.font_name = self._register_fonts()
        self._setup_styles()

    def _register_fonts(self):
        font_paths = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/TTF/DejaVuSans.ttf",
            "/Windows/Fonts/arial.ttf",
        ]

        for font_path in font_paths:
            if os.path.exists(font_path):
                try:
                    pdfmetrics.registerFont(TTFont("DejaVuSans", font_path))
                    return "DejaVuSans"
                except Exception as e:
                    logger.warning(f"Could not register font {font_path}: {e}")

        return "Helvetica"

    def _setup_styles(self):
        self.styles = getSampleStyleSheet()

        self.primary_color = HexColor("#1f2937")
        self.text_color = HexColor("#374151")
        self.light_grey = HexColor("#f9fafb")
        self.medium_grey = HexColor("#e5e7eb")

        self.title_style = ParagraphStyle(
            "ReportTitle",
            parent=self.styles["Heading1"],
            fontSize=24,
            spaceAfter=20,
            spaceBefore=10,
            textColor=self.primary_color,
            fontName=self.font_name,
            alignment=1,
        )

        self.section_header_style = ParagraphStyle(
            "SectionHeader",
            parent=self.styles["Heading2"],
            fontSize=14,
            spaceAfter=10,
            spaceBefore=18,
            textColor=white,
            fontName=self.font_name,
            backColor=self.primary_color,
            borderPadding=6,
        )

        self.normal_style = ParagraphStyle(
            "ReportNormal",
            parent=self.styles["Normal"],
            fontSize=10,
            fontName=self.font_name,
            spaceAfter=4,
            textColor=self.text_color,
            leading=13,
            leftIndent=5,
        )

        self.meta_style = ParagraphStyle(
            "ReportMeta",
            parent=self.normal_style,
            fontSize=9,
            textColor=HexColor("#6b7280"),
            alignment=1,
        )

        self.disclaimer_style = ParagraphStyle(
            "Disclaimer",
            parent=self.styles["Normal"],
            fontSize=8,
            fontName=self.font_name,
            textColor=HexColor("#6b7280"),
            alignment=1,
            spaceAfter=5,
        )

    def generate_report(self, export_data) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=40,
            leftMargin=40,
            topMargin=50,
            bottomMargin=50,
            title=export_data.title,
        )
        story = []

        self._add_title(story, export_data)

        if export_data.summary is not None:
            self._add_section_header(story, "Executive Summary")
            story.append(Paragraph(self._sanitize_text(export_data.summary), self.normal_style))

        if export_data.kpis is not None:
            self._add_kpi_table(story, export_data.kpis)

        if export_data.charts:
            self._add_charts(story, export_data.charts)

        if export_data.insights:
            self._add_insights(story, export_data.insights)

        for title, items in (
            ("Identified Risks", export_data.risks),
            ("Growth Opportunities", export_data.opportunities),
            ("Recommendations", export_data.recommendations),
        ):
            if items is not None:
                self._add_bullet_section(story, title, items)

        self._add_footer(story)
        doc.build(story)
        return buffer.getvalue()

    def _sanitize_text(self, text):
        if not isinstance(text, str):
            text = str(text)

        text = text.replace("&", "&amp;")
        text = text.replace("<", "&lt;")
        text = text.replace(">", "&gt;")

        return text

    def _add_title(self, story, export_data):
        metadata = export_data.metadata
        story.append(Paragraph(self._sanitize_text(export_data.title), self.title_style))
        if metadata.file_name:
            story.append(
                Paragraph(f"Original File: {self._sanitize_text(metadata.file_name)}", self.meta_style)
            )
        generated = metadata.generated_at.strftime("%B %d, %Y %H:%M UTC")
        story.append(Paragraph(f"Generated: {generated}", self.meta_style))
        story.append(Spacer(1, 10))

    def _add_section_header(self, story, title):
        story.append(Paragraph(title.upper(), self.section_header_style))
        story.append(Spacer(1, 6))

    def _add_kpi_table(self, story, kpis):
        self._add_section_header(story, "Key Performance Indicators")
        rows = [["Metric", "Value"]]
        for key, value in kpis.to_dict().items():
            rows.append(
                [
                    Paragraph(self._sanitize_text(humanize_key(key)), self.normal_style),
                    Paragraph(self._sanitize_text(value), self.normal_style),
                ]
            )

        table = Table(rows, colWidths=[3 * inch, 3.5 * inch])
        table.setStyle(self._get_kpi_table_style())
        story.append(table)

    def _add_charts(self, story, charts):
        images = []
        for chart in charts:
            image = self._create_chart_image(chart)
            if image is not None:
                images.append((chart.title, image))

        if not images:
            return

        self._add_section_header(story, "Financial Charts")
        for title, image in images:
            story.append(
                KeepTogether(
                    [
                        Paragraph(f"<b>{self._sanitize_text(title)}</b>", self.normal_style),
                        Spacer(1, 4),
                        image,
                        Spacer(1, 12),
                    ]
                )
            )

    def _create_chart_image(self, chart):
        label_key = chart.x_axis_key or "name"
        points = [
            (str(item.get(label_key, item.get("name", ""))), item.get("value"))
            for item in chart.data
        ]
        points = [(label, float(value)) for label, value in points if isinstance(value, (int, float))]
        if not points:
            return None

        labels = [label for label, _ in points]
        values = [value for _, value in points]

        fig = Figure(figsize=(7, 3.5))
        ax = fig.add_subplot(111)

        if chart.type == "pie":
            if sum(v for v in values if v > 0) <= 0:
                return None
            ax.pie(
                [max(v, 0.0) for v in values],
                labels=labels,
                autopct="%1.1f%%",
                colors=["#3b82f6", "#dc2626", "#059669"][: len(values)],
            )
            ax.axis("equal")
        elif chart.type in ("area", "line"):
            ax.plot(labels, values, color="#3b82f6", marker="o")
            if chart.type == "area":
                ax.fill_between(range(len(values)), values, alpha=0.3, color="#3b82f6")
            ax.grid(True, alpha=0.3)
        else:
            ax.bar(labels, values, color="#3b82f6", alpha=0.8, edgecolor="#1e40af", linewidth=1)
            ax.grid(True, axis="y", alpha=0.3)
            ax.set_axisbelow(True)

        ax.set_title(chart.title, fontsize=12, fontweight="bold")
        fig.tight_layout()

        img_buffer = io.BytesIO()
        fig.savefig(img_buffer, format="png", dpi=120)
        img_buffer.seek(0)

        return Image(img_buffer, width=6 * inch, height=3 * inch)

    def _add_insights(self, story, insights):
        self._add_section_header(story, "Key Insights")
        for insight in insights:
            color = INSIGHT_COLORS.get(insight.type, "#374151")
            story.append(
                Paragraph(
                    f'<font color="{color}"><b>{self._sanitize_text(insight.title)}</b></font> '
                    f"({insight.importance}): {self._sanitize_text(insight.description)}",
                    self.normal_style,
                )
            )

    def _add_bullet_section(self, story, title, items):
        self._add_section_header(story, title)
        if not items:
            story.append(Paragraph("None identified.", self.normal_style))
            return
        for item in items:
            story.append(Paragraph(f"• {self._sanitize_text(item)}", self.normal_style))

    def _add_footer(self, story):
        story.append(Spacer(1, 30))
        story.append(Paragraph(
            "This report was generated automatically from an AI analysis of the uploaded document.",
            self.disclaimer_style
        ))
        story.append(Paragraph(
            "Figures marked N/A were not present in the source document.",
            self.disclaimer_style
        ))

    def _get_kpi_table_style(self):
        return TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), self.primary_color),
            ('TEXTCOLOR', (0, 0), (-1, 0), white),
            ('FONTNAME', (0, 0), (-1, 0), self.font_name),
            ('FONTSIZE', (0, 0), (-1, 0), 11),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
            ('GRID', (0, 0), (-1, -1), 1, self.medium_grey),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LEFTPADDING', (0, 0), (-1, -1), 8),
            ('RIGHTPADDING', (0, 0), (-1, -1), 8),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [white, self.light_grey]),
        ])
