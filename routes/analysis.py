from flask import Blueprint, current_app, request
import logging
from services.file_service import FileService
from services.text_extractor import TextExtractor
from services.content_validator import ContentValidator
from services.dashboard_service import DashboardService
from services.response_formatter import ResponseFormatter
from services.error_handler import ErrorHandler, handle_exceptions

logger = logging.getLogger(__name__)

analysis_bp = Blueprint("analysis", __name__)


@analysis_bp.route("/analysis/generate", methods=["POST"])
@handle_exceptions
def generate_analysis():
    analysis_service = current_app.extensions.get("analysis_service")
    if not analysis_service:
        logger.error("Gemini service not available")
        return ErrorHandler.api_error(
            "Analysis service not available. Please ensure GEMINI_API_KEY is configured."
        )

    if "file" not in request.files:
        return ErrorHandler.validation_error("No file uploaded")

    data, filename, file_type = FileService.read_upload(request.files["file"])
    custom_prompt = request.form.get("custom_prompt") or request.form.get("customPrompt")

    parsed = TextExtractor.parse(data, filename, file_type)
    ContentValidator.validate(parsed.text)

    logger.info(f"Starting analysis of {filename}")
    analysis = analysis_service.analyze(parsed.text, filename, custom_prompt)
    dashboard = DashboardService.generate_dashboard(analysis)
    logger.info(
        f"Analysis of {filename} completed with {len(dashboard.chart_data)} charts "
        f"and {len(dashboard.insights)} insights"
    )

    return ResponseFormatter.format_analysis_response(analysis, dashboard, parsed)
