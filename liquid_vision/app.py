from __future__ import annotations

from typing import Optional

from liquid_vision.pipelines import ClassificationPipeline, SentimentPipeline
from liquid_vision.sentiment.analyzer import ModelSentimentAnalyzer, SentimentAnalyzer
from liquid_vision.vision.classifier import ImageClassifier, ModelImageClassifier
from liquid_vision.vision.model_client import ModelClient, ModelClientConfig


class AppServices:
    """Default classifier and sentiment analyzer shared by both flows."""

    def __init__(
        self,
        classifier: Optional[ImageClassifier] = None,
        sentiment_analyzer: Optional[SentimentAnalyzer] = None,
        client: Optional[ModelClient] = None,
    ):
        if client is None and (classifier is None or sentiment_analyzer is None):
            client = ModelClient(ModelClientConfig.from_env())
        self.client = client
        self.classifier = classifier or ModelImageClassifier(client)
        self.sentiment_analyzer = sentiment_analyzer or ModelSentimentAnalyzer(client)

    def classification_pipeline(self) -> ClassificationPipeline:
        return ClassificationPipeline(self.classifier, self.sentiment_analyzer)

    def sentiment_pipeline(self) -> SentimentPipeline:
        return SentimentPipeline(self.sentiment_analyzer)

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()
