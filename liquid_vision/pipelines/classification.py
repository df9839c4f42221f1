from __future__ import annotations

import asyncio
import logging
import re
from typing import Optional, Set

from PIL import Image

from liquid_vision.core.errors import EmptyTextError, describe_error
from liquid_vision.core.models import ClassificationState
from liquid_vision.core.observable import ObservableState
from liquid_vision.sentiment.analyzer import SentimentAnalyzer
from liquid_vision.vision.classifier import ImageClassifier, load_image

logger = logging.getLogger(__name__)

LOAD_IMAGE_ERROR = "Unable to load image."


def capitalize_words(text: str) -> str:
    """Capitalize the first letter of each word and lowercase the rest."""
    return re.sub(r"\S+", lambda match: match.group(0).capitalize(), text)


class ClassificationPipeline:
    """
    Classify an image, then run sentiment analysis on the predicted label.

    Each submission runs as one task on the current event loop. Submissions
    are not cancelled; whichever call resolves last writes the state.
    """

    def __init__(self, classifier: ImageClassifier, sentiment_analyzer: SentimentAnalyzer):
        self.classifier = classifier
        self.sentiment_analyzer = sentiment_analyzer
        self.observable = ObservableState(ClassificationState())
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> ClassificationState:
        return self.observable.state

    async def process_picked_item(self, data: Optional[bytes]) -> Optional[asyncio.Task]:
        """Decode picked image bytes and submit the image for classification."""
        if data is None:
            return None

        try:
            image = await asyncio.to_thread(load_image, data)
        except Exception as exc:
            logger.warning("Picked item could not be loaded: %s", exc)
            self.observable.update(error_message=describe_error(exc))
            return None
        if image is None:
            logger.warning("Picked item could not be decoded as an image (%d bytes)", len(data))
            self.observable.update(error_message=LOAD_IMAGE_ERROR)
            return None
        self.observable.update(selected_image=image)
        return self.submit_image(image)

    def handle_captured_image(self, image: Image.Image) -> asyncio.Task:
        self.observable.update(selected_image=image)
        return self.submit_image(image)

    def submit_image(self, image: Image.Image) -> asyncio.Task:
        self.observable.update(
            is_loading=True,
            error_message=None,
            prediction_sentiment_label="",
            prediction_sentiment_score=0.0,
            prediction_sentiment_error_message=None,
            is_analyzing_sentiment=True,
        )
        task = asyncio.get_running_loop().create_task(self._classify(image))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _classify(self, image: Image.Image) -> None:
        logger.debug("Classifying image %s", getattr(image, "size", None))
        try:
            result = await self.classifier.classify(image)
        except Exception as exc:
            logger.warning("Image classification failed: %s", exc)
            self.observable.update(
                is_loading=False,
                is_analyzing_sentiment=False,
                error_message=describe_error(exc),
            )
            return

        prediction = capitalize_words(result.label)
        self.observable.update(
            prediction=prediction,
            confidence=result.confidence,
            is_loading=False,
        )
        await self._analyze_prediction_sentiment(prediction)

    async def _analyze_prediction_sentiment(self, text: str) -> None:
        trimmed = text.strip()
        if not trimmed:
            self.observable.update(
                prediction_sentiment_error_message=EmptyTextError().error_description,
                is_analyzing_sentiment=False,
            )
            return

        try:
            result = await self.sentiment_analyzer.analyze(trimmed)
        except Exception as exc:
            logger.warning("Sentiment analysis of prediction failed: %s", exc)
            self.observable.update(
                prediction_sentiment_error_message=describe_error(exc),
                prediction_sentiment_label="",
                prediction_sentiment_score=0.0,
            )
        else:
            self.observable.update(
                prediction_sentiment_label=result.sentiment.display_name,
                prediction_sentiment_score=result.score,
                prediction_sentiment_error_message=None,
            )

        self.observable.update(is_analyzing_sentiment=False)
