from flask import jsonify
import logging
from functools import wraps

from .exceptions import (
    AIServiceError,
    ContentValidationError,
    ParseError,
    RateLimitExceededError,
    UnsupportedFormatError,
    UnsupportedTypeError,
)

logger = logging.getLogger(__name__)


class ErrorHandler:
    @staticmethod
    def create_error_response(message, status_code=500, error_type="server_error"):
        return jsonify({
            "error": message,
            "error_type": error_type,
            "success": False
        }), status_code

    @staticmethod
    def validation_error(message):
        return ErrorHandler.create_error_response(message, 400, "validation_error")

    @staticmethod
    def file_error(message):
        return ErrorHandler.create_error_response(message, 400, "file_error")

    @staticmethod
    def parse_error(message):
        return ErrorHandler.create_error_response(message, 422, "parse_error")

    @staticmethod
    def rate_limit_error(message, reset_time=None):
        response, status = ErrorHandler.create_error_response(message, 429, "rate_limit_error")
        if reset_time is not None:
            response.headers["X-RateLimit-Remaining"] = "0"
            response.headers["X-RateLimit-Reset"] = str(reset_time)
        return response, status

    @staticmethod
    def processing_error(message):
        return ErrorHandler.create_error_response(message, 500, "processing_error")

    @staticmethod
    def api_error(message):
        return ErrorHandler.create_error_response(message, 503, "api_error")


def handle_exceptions(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (UnsupportedTypeError, UnsupportedFormatError) as e:
            logger.error(f"Unsupported input: {str(e)}")
            return ErrorHandler.file_error(str(e))
        except ParseError as e:
            logger.error(f"Parse error: {str(e)}")
            return ErrorHandler.parse_error(str(e))
        except ContentValidationError as e:
            logger.error(f"Content validation error: {str(e)}")
            return ErrorHandler.validation_error(str(e))
        except RateLimitExceededError as e:
            return ErrorHandler.rate_limit_error(str(e), e.reset_time)
        except AIServiceError as e:
            logger.error(f"AI service error: {str(e)}")
            return ErrorHandler.api_error(str(e))
        except ValueError as e:
            logger.error(f"Validation error: {str(e)}")
            return ErrorHandler.validation_error(str(e))
        except Exception as e:
            logger.exception(f"Unexpected error: {str(e)}")
            return ErrorHandler.processing_error(f"An unexpected error occurred: {str(e)}")

    return decorated_function
