from __future__ import annotations

from typing import List, Optional

import pytest
from PIL import Image

from liquid_vision.core.models import ClassificationResult, SentimentResult


class FakeClassifier:
    def __init__(self, result: Optional[ClassificationResult] = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.classify_call_count = 0

    async def classify(self, image: Image.Image) -> ClassificationResult:
        self.classify_call_count += 1
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


class FakeSentimentAnalyzer:
    def __init__(self, result: Optional[SentimentResult] = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.analyze_call_count = 0
        self.received_texts: List[str] = []

    async def analyze(self, text: str) -> SentimentResult:
        self.analyze_call_count += 1
        self.received_texts.append(text)
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


@pytest.fixture(autouse=True)
def isolate_model_env(monkeypatch):
    """Keep tests independent of any local Ollama configuration."""
    for name in (
        "OLLAMA_BASE_URL",
        "OLLAMA_VISION_MODEL",
        "OLLAMA_TEXT_MODEL",
        "OLLAMA_HTTP_TIMEOUT",
        "OLLAMA_TEMPERATURE",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def image() -> Image.Image:
    return Image.new("RGB", (8, 8), color="blue")


@pytest.fixture
def fake_classifier():
    return FakeClassifier


@pytest.fixture
def fake_sentiment():
    return FakeSentimentAnalyzer
