from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PREDICTION = "Tap below to get started"
DEFAULT_SENTIMENT_LABEL = "Enter text and tap Analyze"
ANALYZING_SENTIMENT_LABEL = "Analyzing..."


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class ClassificationResult(BaseModel):
    """Top label produced by an image classifier."""

    model_config = ConfigDict(frozen=True)

    label: str
    confidence: float = Field(ge=0.0, le=1.0)


class SentimentResult(BaseModel):
    """Sentiment category plus its raw score in [-1, 1]."""

    model_config = ConfigDict(frozen=True)

    score: float
    sentiment: Sentiment


class ClassificationState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    selected_image: Optional[Any] = None  # PIL.Image.Image
    prediction: str = DEFAULT_PREDICTION
    confidence: float = 0.0
    is_loading: bool = False
    error_message: Optional[str] = None

    prediction_sentiment_label: str = ""
    prediction_sentiment_score: float = 0.0
    is_analyzing_sentiment: bool = False
    prediction_sentiment_error_message: Optional[str] = None


class SentimentState(BaseModel):
    input_text: str = ""
    sentiment_label: str = DEFAULT_SENTIMENT_LABEL
    sentiment_score: float = 0.0
    is_analyzing: bool = False
    error_message: Optional[str] = None

    @property
    def has_result(self) -> bool:
        return self.sentiment_label not in (DEFAULT_SENTIMENT_LABEL, ANALYZING_SENTIMENT_LABEL)
