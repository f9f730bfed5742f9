import io
import logging
from datetime import datetime, timezone

import pandas as pd
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError, FileNotDecryptedError

from config import Config
from .exceptions import ParseError, UnsupportedTypeError
from .models import FileMetadata, ParsedFileContent

logger = logging.getLogger(__name__)


class TextExtractor:
    SUPPORTED_TYPES = ("pdf", "excel", "csv")

    @staticmethod
    def parse(data: bytes, file_name: str, file_type: str) -> ParsedFileContent:
        extractors = {
            "pdf": TextExtractor._extract_from_pdf,
            "excel": TextExtractor._extract_from_excel,
            "csv": TextExtractor._extract_from_csv,
        }

        if file_type not in extractors:
            raise UnsupportedTypeError(f"Unsupported file type: {file_type}")

        try:
            text, counts = extractors[file_type](data, file_name)
        except ParseError:
            raise
        except Exception as e:
            raise ParseError(f"Failed to parse {file_type} file: {str(e)}") from e

        metadata = FileMetadata(
            file_name=file_name,
            file_type=file_type,
            extracted_at=datetime.now(timezone.utc),
            **counts,
        )
        logger.info(f"Extracted {len(text)} characters from {file_type} file {file_name}")
        return ParsedFileContent(text=text, metadata=metadata)

    @staticmethod
    def _extract_from_csv(data: bytes, file_name: str):
        content = data.decode("utf-8-sig", errors="replace")
        lines = [line.strip() for line in content.splitlines() if line.strip()]

        if not lines:
            raise ParseError("CSV file is empty")

        headers = [h.strip() for h in lines[0].split(",")]
        rows = lines[1:]
        max_rows = Config.CSV_MAX_ROWS

        text = f"CSV File: {file_name}\n"
        text += f"Headers: {' | '.join(headers)}\n"
        text += f"Total Rows: {len(rows)}\n\n"

        for index, line in enumerate(rows[:max_rows], start=1):
            text += f"Row {index}: {line}\n"

        if len(rows) > max_rows:
            text += f"\n... and {len(rows) - max_rows} more rows\n"

        return text, {}

    @staticmethod
    def _extract_from_excel(data: bytes, file_name: str):
        sheets = pd.read_excel(io.BytesIO(data), sheet_name=None, header=None)
        sheet_names = list(sheets.keys())
        max_rows = Config.EXCEL_MAX_ROWS_PER_SHEET

        text = f"Excel Workbook: {file_name}\n"
        text += f"Sheets: {', '.join(str(name) for name in sheet_names)}\n\n"

        for sheet_index, sheet_name in enumerate(sheet_names, start=1):
            df = sheets[sheet_name]
            text += f"Sheet {sheet_index}: {sheet_name}\n"
            text += f"Rows: {len(df)}\n"

            for row_index, row in enumerate(df.head(max_rows).itertuples(index=False), start=1):
                row_text = " | ".join(TextExtractor._format_cell(value) for value in row)
                if row_text.replace("|", "").strip():
                    text += f"Row {row_index}: {row_text}\n"

            text += "\n"

        return text, {"sheet_count": len(sheet_names)}

    @staticmethod
    def _format_cell(value) -> str:
        if pd.isna(value):
            return ""
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value).strip()

    @staticmethod
    def _extract_from_pdf(data: bytes, file_name: str):
        try:
            reader = PdfReader(io.BytesIO(data))

            if reader.is_encrypted:
                try:
                    reader.decrypt("")
                except Exception as e:
                    raise ParseError(
                        "PDF is password-protected and cannot be read without the password"
                    ) from e

            page_count = len(reader.pages)
            if page_count == 0:
                raise ParseError("PDF file contains no pages")

            pages = []
            for page_num, page in enumerate(reader.pages, start=1):
                try:
                    page_text = page.extract_text()
                except Exception as e:
                    logger.warning(f"Could not extract text from page {page_num} of {file_name}: {str(e)}")
                    continue
                page_text = TextExtractor._clean_text(page_text)
                if page_text:
                    pages.append(f"--- Page {page_num} ---\n{page_text}")

            if not pages:
                raise ParseError(
                    "No text could be extracted from PDF; scanned documents are not supported"
                )

        except FileNotDecryptedError as e:
            raise ParseError("PDF is encrypted and requires a password") from e
        except PdfReadError as e:
            raise ParseError(f"PDF file could not be read: {str(e)}") from e

        text = f"PDF Document: {file_name}\n"
        text += f"Pages: {page_count}\n\n"
        text += "\n\n".join(pages) + "\n"
        return text, {"page_count": page_count}

    @staticmethod
    def _clean_text(text: str) -> str:
        if not text:
            return ""
        lines = text.split("\n")
        cleaned_lines = []

        for line in lines:
            cleaned_line = " ".join(line.split())
            if cleaned_line:
                cleaned_lines.append(cleaned_line)

        return "\n".join(cleaned_lines)
