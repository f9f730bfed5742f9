import pytest

from services.content_validator import ContentValidator
from services.exceptions import (
    ContentTooLongError,
    ContentTooShortError,
    ContentValidationError,
    EmptyContentError,
)


@pytest.mark.parametrize("text", ["", "   ", "\n\t "])
def test_empty_content_is_rejected(text):
    with pytest.raises(EmptyContentError):
        ContentValidator.validate(text)


def test_short_content_is_rejected():
    with pytest.raises(ContentTooShortError):
        ContentValidator.validate("x" * 99)


def test_boundaries_are_accepted():
    ContentValidator.validate("x" * 100)
    ContentValidator.validate("x" * 100_000)


def test_long_content_is_rejected():
    with pytest.raises(ContentTooLongError):
        ContentValidator.validate("x" * 100_001)


def test_errors_share_a_base_class():
    with pytest.raises(ContentValidationError):
        ContentValidator.validate("x")
