import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", 0.2))
    GEMINI_MAX_OUTPUT_TOKENS = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", 8192))

    FLASK_DEBUG = os.getenv("FLASK_DEBUG", "True").lower() == "true"
    FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
    FLASK_PORT = int(os.getenv("FLASK_PORT", 5000))

    MAX_UPLOAD_SIZE = 10 * 1024 * 1024
    MAX_CONTENT_LENGTH = MAX_UPLOAD_SIZE + 1024 * 1024

    MIN_CONTENT_LENGTH = 100
    MAX_TEXT_LENGTH = 100_000

    CSV_MAX_ROWS = 100
    EXCEL_MAX_ROWS_PER_SHEET = 50

    CHAT_RATE_LIMIT = int(os.getenv("CHAT_RATE_LIMIT", 20))
    CHAT_RATE_WINDOW_MS = int(os.getenv("CHAT_RATE_WINDOW_MS", 60 * 1000))
    RATE_LIMIT_STORAGE_URI = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")
    CHAT_MAX_MESSAGE_LENGTH = 1000
    CHAT_REPORT_EXCERPT_CHARS = 2000
