class FinancialAnalysisError(Exception):
    """Base class for every error raised by the analysis pipeline."""


class UnsupportedTypeError(FinancialAnalysisError):
    pass


class ParseError(FinancialAnalysisError):
    """Extraction failed; the underlying exception is chained as __cause__."""


class ContentValidationError(FinancialAnalysisError):
    pass


class EmptyContentError(ContentValidationError):
    pass


class ContentTooShortError(ContentValidationError):
    pass


class ContentTooLongError(ContentValidationError):
    pass


class AIServiceError(FinancialAnalysisError):
    pass


class ResponseParseError(FinancialAnalysisError):
    pass


class UnsupportedFormatError(FinancialAnalysisError):
    pass


class RateLimitExceededError(FinancialAnalysisError):
    def __init__(self, message, reset_time=None):
        super().__init__(message)
        self.reset_time = reset_time
