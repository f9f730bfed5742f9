from flask import Flask, jsonify
from flask_cors import CORS
import logging
from config import Config
from routes.files import files_bp
from routes.analysis import analysis_bp
from routes.dashboard import dashboard_bp
from routes.chat import chat_bp
from services.gemini_service import GeminiAnalysisService, GeminiClient
from services.export_service import ExportService
from services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


def create_app(gemini_client=None, rate_limiter=None, export_service=None):
    app = Flask(__name__)

    app.config["MAX_CONTENT_LENGTH"] = Config.MAX_CONTENT_LENGTH
    app.json.sort_keys = False

    CORS(
        app,
        origins="*",
        methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization", "X-Client-Id"],
    )

    logging.basicConfig(level=logging.INFO)

    if gemini_client is None:
        try:
            gemini_client = GeminiClient()
        except ValueError as e:
            logger.warning(f"Gemini not initialized - {e}")

    app.extensions["analysis_service"] = (
        GeminiAnalysisService(gemini_client) if gemini_client is not None else None
    )
    app.extensions["rate_limiter"] = rate_limiter or RateLimiter(
        storage_uri=Config.RATE_LIMIT_STORAGE_URI
    )
    app.extensions["export_service"] = export_service or ExportService()

    app.register_blueprint(files_bp)
    app.register_blueprint(analysis_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(chat_bp)

    @app.route('/health', methods=['GET'])
    def health_check():
        return jsonify({
            'status': 'healthy',
            'message': 'Financial Report Analyzer API is running',
            'version': '1.0.0',
            'gemini_configured': app.extensions["analysis_service"] is not None
        })

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=Config.FLASK_DEBUG, host=Config.FLASK_HOST, port=Config.FLASK_PORT)
