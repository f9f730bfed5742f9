import io
import logging

from flask import Blueprint, current_app, request, send_file
from services.models import AnalysisResult, Dashboard
from services.dashboard_service import DashboardService
from services.response_formatter import ResponseFormatter
from services.error_handler import ErrorHandler, handle_exceptions

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint("dashboard", __name__)


def _read_analysis(payload):
    analysis_data = payload.get("analysis")
    if not isinstance(analysis_data, dict):
        raise ValueError("Analysis data is required")
    return AnalysisResult.from_dict(analysis_data)


@dashboard_bp.route("/dashboard/generate", methods=["POST"])
@handle_exceptions
def generate_dashboard():
    if not request.is_json:
        return ErrorHandler.validation_error("Request must be JSON")

    payload = request.get_json(silent=True) or {}
    analysis = _read_analysis(payload)

    dashboard = DashboardService.generate_dashboard(analysis)
    return ResponseFormatter.format_dashboard_response(dashboard)


@dashboard_bp.route("/dashboard/export", methods=["POST"])
@handle_exceptions
def export_dashboard():
    if not request.is_json:
        return ErrorHandler.validation_error("Request must be JSON")

    payload = request.get_json(silent=True) or {}
    export_format = payload.get("format")
    if not export_format:
        return ErrorHandler.validation_error("Analysis and format are required")
    if not isinstance(export_format, str):
        return ErrorHandler.validation_error("Format must be a string")

    analysis = _read_analysis(payload)

    dashboard_data = payload.get("dashboard")
    if isinstance(dashboard_data, dict):
        dashboard = Dashboard.model_validate(dashboard_data)
    else:
        dashboard = DashboardService.generate_dashboard(analysis)

    export_data = DashboardService.generate_export_data(
        analysis,
        dashboard,
        analysis_id=payload.get("analysisId"),
        dashboard_id=payload.get("dashboardId"),
        file_name=payload.get("fileName"),
    )
    sections = payload.get("sections") or []
    if not isinstance(sections, list):
        return ErrorHandler.validation_error("Sections must be a list")
    export_data = DashboardService.filter_sections(export_data, sections)

    artifact = current_app.extensions["export_service"].render(export_data, export_format)

    return send_file(
        io.BytesIO(artifact.content),
        mimetype=artifact.mimetype,
        as_attachment=True,
        download_name=artifact.filename,
    )
