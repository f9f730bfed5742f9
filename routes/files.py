from flask import Blueprint, request
import logging
from services.file_service import FileService
from services.text_extractor import TextExtractor
from services.response_formatter import ResponseFormatter
from services.error_handler import ErrorHandler, handle_exceptions

logger = logging.getLogger(__name__)

files_bp = Blueprint("files", __name__)


@files_bp.route("/files/parse", methods=["POST"])
@handle_exceptions
def parse_file():
    if "file" not in request.files:
        return ErrorHandler.validation_error("No file uploaded")

    data, filename, file_type = FileService.read_upload(request.files["file"])
    logger.info(f"Parsing {file_type} upload {filename} ({len(data)} bytes)")

    parsed = TextExtractor.parse(data, filename, file_type)
    return ResponseFormatter.format_parse_response(parsed)
