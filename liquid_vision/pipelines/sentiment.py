from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set

from liquid_vision.core.errors import EmptyTextError, describe_error
from liquid_vision.core.models import (
    ANALYZING_SENTIMENT_LABEL,
    DEFAULT_SENTIMENT_LABEL,
    SentimentState,
)
from liquid_vision.core.observable import ObservableState
from liquid_vision.sentiment.analyzer import SentimentAnalyzer

logger = logging.getLogger(__name__)


class SentimentPipeline:
    """Analyze the sentiment of free-form text held in ``input_text``."""

    def __init__(self, analyzer: SentimentAnalyzer):
        self.analyzer = analyzer
        self.observable = ObservableState(SentimentState())
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> SentimentState:
        return self.observable.state

    @property
    def has_result(self) -> bool:
        return self.state.has_result

    def analyze(self, text: Optional[str] = None) -> Optional[asyncio.Task]:
        if text is not None:
            self.observable.update(input_text=text)
        trimmed = self.state.input_text.strip()

        if not trimmed:
            self.observable.update(
                is_analyzing=False,
                error_message=EmptyTextError().error_description,
                sentiment_label=DEFAULT_SENTIMENT_LABEL,
                sentiment_score=0.0,
            )
            return None

        self.observable.update(
            is_analyzing=True,
            error_message=None,
            sentiment_label=ANALYZING_SENTIMENT_LABEL,
        )
        task = asyncio.get_running_loop().create_task(self._analyze(trimmed))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _analyze(self, text: str) -> None:
        logger.debug("Analyzing sentiment of %d chars", len(text))
        try:
            result = await self.analyzer.analyze(text)
        except Exception as exc:
            logger.warning("Sentiment analysis failed: %s", exc)
            self.observable.update(
                is_analyzing=False,
                error_message=describe_error(exc),
                sentiment_label=DEFAULT_SENTIMENT_LABEL,
                sentiment_score=0.0,
            )
            return

        self.observable.update(
            sentiment_score=result.score,
            sentiment_label=result.sentiment.display_name,
            error_message=None,
            is_analyzing=False,
        )
