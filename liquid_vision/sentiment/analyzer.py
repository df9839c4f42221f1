from __future__ import annotations

import logging
import math
from typing import Protocol

from liquid_vision.core.errors import EmptyTextError, NoSentimentScore
from liquid_vision.core.models import Sentiment, SentimentResult
from liquid_vision.vision.model_client import LocalModelError, ModelClient

logger = logging.getLogger(__name__)

POSITIVE_THRESHOLD = 0.1
NEGATIVE_THRESHOLD = -0.1


class SentimentAnalyzer(Protocol):
    async def analyze(self, text: str) -> SentimentResult: ...


def category_for_score(score: float) -> Sentiment:
    if score > POSITIVE_THRESHOLD:
        return Sentiment.POSITIVE
    if score < NEGATIVE_THRESHOLD:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


_SENTIMENT_PROMPT = """
Rate the sentiment of the text below on a scale from -1 (very negative)
through 0 (neutral) to 1 (very positive).

Return JSON only, shaped exactly as: { "score": 0.4 }

Text:
""".strip()


class ModelSentimentAnalyzer:
    """Sentiment analyzer backed by a local text model."""

    def __init__(self, client: ModelClient):
        self.client = client

    async def analyze(self, text: str) -> SentimentResult:
        trimmed = text.strip()
        if not trimmed:
            raise EmptyTextError()

        model = self.client.config.text_model
        try:
            parsed = await self.client.generate_json(
                f"{_SENTIMENT_PROMPT}\n{trimmed}", model=model
            )
        except LocalModelError as exc:
            logger.warning("Sentiment analyzer failed: %s", exc)
            raise NoSentimentScore() from exc

        raw_score = parsed.get("score")
        if isinstance(raw_score, bool):
            raise NoSentimentScore()
        try:
            score = float(raw_score)
        except (TypeError, ValueError) as exc:
            raise NoSentimentScore() from exc
        if not math.isfinite(score):
            raise NoSentimentScore()
        score = max(-1.0, min(score, 1.0))

        return SentimentResult(score=score, sentiment=category_for_score(score))
