import logging
import uuid
from datetime import datetime, timezone

from flask import Blueprint, current_app, request
from config import Config
from services.exceptions import AIServiceError, RateLimitExceededError
from services.models import AnalysisResult
from services.response_formatter import ResponseFormatter
from services.error_handler import ErrorHandler, handle_exceptions

logger = logging.getLogger(__name__)

chat_bp = Blueprint("chat", __name__)

FALLBACK_CHAT_RESPONSE = (
    "I'm sorry, I'm having trouble processing your question right now. "
    "Please try again in a moment, or contact support if the issue persists."
)


def _client_id():
    return request.headers.get("X-Client-Id") or request.remote_addr or "anonymous"


@chat_bp.route("/chat/query", methods=["POST"])
@handle_exceptions
def chat_query():
    rate_limit = current_app.extensions["rate_limiter"].check(
        f"chat_{_client_id()}", Config.CHAT_RATE_LIMIT, Config.CHAT_RATE_WINDOW_MS
    )
    if not rate_limit.allowed:
        raise RateLimitExceededError(
            "Too many chat queries. Please wait before sending another message.",
            reset_time=rate_limit.reset_time,
        )

    analysis_service = current_app.extensions.get("analysis_service")
    if not analysis_service:
        return ErrorHandler.api_error(
            "Chat service not available. Please ensure GEMINI_API_KEY is configured."
        )

    if not request.is_json:
        return ErrorHandler.validation_error("Request must be JSON")

    payload = request.get_json(silent=True) or {}
    message = payload.get("message")
    if not isinstance(message, str) or not message.strip():
        return ErrorHandler.validation_error("Message is required")

    if len(message) > Config.CHAT_MAX_MESSAGE_LENGTH:
        return ErrorHandler.validation_error(
            f"Message too long. Maximum {Config.CHAT_MAX_MESSAGE_LENGTH} characters allowed."
        )

    analysis_context = None
    if isinstance(payload.get("analysis"), dict):
        analysis_context = AnalysisResult.from_dict(payload["analysis"])

    report_excerpt = payload.get("reportExcerpt")
    if not isinstance(report_excerpt, str):
        report_excerpt = None

    conversation_id = payload.get("conversationId") or str(uuid.uuid4())

    fallback = False
    try:
        response_text = analysis_service.respond_to_query(
            message.strip(), analysis_context, report_excerpt
        )
    except AIServiceError as e:
        logger.error(f"Chat AI error: {str(e)}")
        response_text = FALLBACK_CHAT_RESPONSE
        fallback = True

    response, status = ResponseFormatter.format_chat_response(
        response_text,
        conversation_id,
        datetime.now(timezone.utc),
        analysis_context is not None,
        fallback=fallback,
    )
    response.headers["X-RateLimit-Remaining"] = str(rate_limit.remaining)
    response.headers["X-RateLimit-Reset"] = str(rate_limit.reset_time)
    return response, status
