from config import Config
from .exceptions import ContentTooLongError, ContentTooShortError, EmptyContentError


class ContentValidator:
    @staticmethod
    def validate(text: str) -> None:
        if not text or not text.strip():
            raise EmptyContentError("Content is empty")

        if len(text) < Config.MIN_CONTENT_LENGTH:
            raise ContentTooShortError("Content too short for meaningful analysis")

        if len(text) > Config.MAX_TEXT_LENGTH:
            raise ContentTooLongError("Content too long - please upload a smaller file")
