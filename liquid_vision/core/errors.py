from __future__ import annotations

GENERIC_ERROR_DESCRIPTION = "The operation couldn't be completed."


class LiquidVisionError(RuntimeError):
    """Base error carrying a user-facing description."""

    description = GENERIC_ERROR_DESCRIPTION

    def __init__(self, description: str | None = None):
        super().__init__(description or self.description)

    @property
    def error_description(self) -> str:
        return str(self)


class ImageClassificationError(LiquidVisionError):
    """Raised by image classifiers."""


class NoClassificationResult(ImageClassificationError):
    description = "Unable to classify this image."


class UnsupportedImageFormat(ImageClassificationError):
    description = "The selected image format is not supported."


class SentimentAnalysisError(LiquidVisionError):
    """Raised by sentiment analyzers."""


class EmptyTextError(SentimentAnalysisError):
    description = "Please enter some text to analyze."


class NoSentimentScore(SentimentAnalysisError):
    description = "Unable to determine sentiment for this text."


def describe_error(exc: BaseException) -> str:
    """Return the text shown to the user for a failed request."""
    if isinstance(exc, LiquidVisionError):
        return exc.error_description
    return str(exc) or GENERIC_ERROR_DESCRIPTION
