from __future__ import annotations

import asyncio
import struct
import zlib
from io import BytesIO

import pytest
from PIL import Image

from liquid_vision.core.errors import (
    EmptyTextError,
    NoClassificationResult,
    NoSentimentScore,
)
from liquid_vision.core.models import (
    DEFAULT_PREDICTION,
    ClassificationResult,
    Sentiment,
    SentimentResult,
)
from liquid_vision.pipelines import ClassificationPipeline
from liquid_vision.pipelines import classification as classification_mod
from liquid_vision.pipelines.classification import LOAD_IMAGE_ERROR, capitalize_words


def _run(pipeline: ClassificationPipeline, image: Image.Image) -> None:
    async def scenario() -> None:
        await pipeline.handle_captured_image(image)

    asyncio.run(scenario())


def test_captured_image_updates_prediction_and_sentiment(
    image, fake_classifier, fake_sentiment
) -> None:
    classifier = fake_classifier(ClassificationResult(label="happy dog", confidence=0.92))
    sentiment = fake_sentiment(SentimentResult(score=0.8, sentiment=Sentiment.POSITIVE))
    pipeline = ClassificationPipeline(classifier, sentiment)

    _run(pipeline, image)

    state = pipeline.state
    assert classifier.classify_call_count == 1
    assert sentiment.analyze_call_count == 1
    assert sentiment.received_texts == ["Happy Dog"]
    assert state.selected_image is image
    assert state.prediction == "Happy Dog"
    assert state.confidence == pytest.approx(0.92)
    assert state.prediction_sentiment_label == "Positive"
    assert state.prediction_sentiment_score == pytest.approx(0.8)
    assert state.prediction_sentiment_error_message is None
    assert state.error_message is None
    assert not state.is_loading
    assert not state.is_analyzing_sentiment


def test_classification_failure_skips_sentiment(image, fake_classifier, fake_sentiment) -> None:
    classifier = fake_classifier(error=NoClassificationResult())
    sentiment = fake_sentiment(SentimentResult(score=-0.2, sentiment=Sentiment.NEGATIVE))
    pipeline = ClassificationPipeline(classifier, sentiment)

    _run(pipeline, image)

    state = pipeline.state
    assert classifier.classify_call_count == 1
    assert sentiment.analyze_call_count == 0
    assert state.error_message == NoClassificationResult().error_description
    assert state.prediction == DEFAULT_PREDICTION
    assert not state.is_loading
    assert not state.is_analyzing_sentiment
    assert state.prediction_sentiment_label == ""
    assert state.prediction_sentiment_score == 0


def test_unexpected_classifier_error_uses_message(image, fake_classifier, fake_sentiment) -> None:
    pipeline = ClassificationPipeline(
        fake_classifier(error=ValueError("boom")), fake_sentiment()
    )

    _run(pipeline, image)

    assert pipeline.state.error_message == "boom"


def test_sentiment_failure_sets_error_message(image, fake_classifier, fake_sentiment) -> None:
    classifier = fake_classifier(ClassificationResult(label="uncertain", confidence=0.45))
    sentiment = fake_sentiment(error=NoSentimentScore())
    pipeline = ClassificationPipeline(classifier, sentiment)

    _run(pipeline, image)

    state = pipeline.state
    assert sentiment.analyze_call_count == 1
    assert state.prediction == "Uncertain"
    assert state.prediction_sentiment_label == ""
    assert state.prediction_sentiment_score == 0
    assert state.prediction_sentiment_error_message == NoSentimentScore().error_description
    assert not state.is_analyzing_sentiment


def test_blank_label_reports_empty_text(image, fake_classifier, fake_sentiment) -> None:
    classifier = fake_classifier(ClassificationResult(label="   ", confidence=0.5))
    sentiment = fake_sentiment(SentimentResult(score=0.9, sentiment=Sentiment.POSITIVE))
    pipeline = ClassificationPipeline(classifier, sentiment)

    _run(pipeline, image)

    state = pipeline.state
    assert classifier.classify_call_count == 1
    assert sentiment.analyze_call_count == 0
    assert state.prediction_sentiment_error_message == EmptyTextError().error_description
    assert state.prediction_sentiment_label == ""
    assert state.prediction_sentiment_score == 0
    assert not state.is_analyzing_sentiment


def test_new_submission_resets_sentiment_state(image, fake_classifier, fake_sentiment) -> None:
    classifier = fake_classifier(ClassificationResult(label="cat", confidence=0.7))
    sentiment = fake_sentiment(SentimentResult(score=0.0, sentiment=Sentiment.NEUTRAL))
    pipeline = ClassificationPipeline(classifier, sentiment)
    snapshots = []

    async def scenario() -> None:
        await pipeline.submit_image(image)
        pipeline.observable.subscribe(lambda state: snapshots.append(state.model_copy()))
        task = pipeline.submit_image(image)
        # state published before the task gets to run
        assert pipeline.state.is_loading
        assert pipeline.state.is_analyzing_sentiment
        assert pipeline.state.prediction_sentiment_label == ""
        await task

    asyncio.run(scenario())

    assert snapshots[0].is_loading
    assert snapshots[-1].prediction_sentiment_label == "Neutral"
    assert not snapshots[-1].is_analyzing_sentiment


def test_process_picked_item_decodes_bytes(fake_classifier, fake_sentiment) -> None:
    buf = BytesIO()
    Image.new("RGB", (4, 4), color="green").save(buf, format="PNG")
    classifier = fake_classifier(ClassificationResult(label="lawn", confidence=0.6))
    pipeline = ClassificationPipeline(
        classifier, fake_sentiment(SentimentResult(score=0.3, sentiment=Sentiment.POSITIVE))
    )

    async def scenario() -> None:
        task = await pipeline.process_picked_item(buf.getvalue())
        assert task is not None
        await task

    asyncio.run(scenario())

    assert pipeline.state.selected_image is not None
    assert pipeline.state.selected_image.size == (4, 4)
    assert pipeline.state.prediction == "Lawn"
    assert classifier.classify_call_count == 1


def test_process_picked_item_rejects_non_image(fake_classifier, fake_sentiment) -> None:
    classifier = fake_classifier(ClassificationResult(label="x", confidence=0.1))
    pipeline = ClassificationPipeline(classifier, fake_sentiment())

    async def scenario():
        return await pipeline.process_picked_item(b"not an image")

    assert asyncio.run(scenario()) is None
    assert pipeline.state.error_message == LOAD_IMAGE_ERROR
    assert pipeline.state.selected_image is None
    assert classifier.classify_call_count == 0


def test_process_picked_item_ignores_missing_item(fake_classifier, fake_sentiment) -> None:
    classifier = fake_classifier()
    pipeline = ClassificationPipeline(classifier, fake_sentiment())

    async def scenario():
        return await pipeline.process_picked_item(None)

    assert asyncio.run(scenario()) is None
    assert pipeline.state.error_message is None
    assert classifier.classify_call_count == 0


def test_capitalize_words() -> None:
    assert capitalize_words("happy dog") == "Happy Dog"
    assert capitalize_words("GOLDEN retriever") == "Golden Retriever"
    assert capitalize_words("   ").strip() == ""
    assert capitalize_words("happy\tdog") == "Happy\tDog"
    assert capitalize_words(" happy  dog\n") == " Happy  Dog\n"


def _png_header(width: int, height: int) -> bytes:
    """Minimal PNG declaring the given size, with no pixel data."""

    def chunk(kind: bytes, payload: bytes) -> bytes:
        crc = zlib.crc32(kind + payload) & 0xFFFFFFFF
        return struct.pack(">I", len(payload)) + kind + payload + struct.pack(">I", crc)

    ihdr = struct.pack(">IIBBBBB", width, height, 1, 0, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IEND", b"")


def test_process_picked_item_rejects_oversized_image(fake_classifier, fake_sentiment) -> None:
    classifier = fake_classifier(ClassificationResult(label="x", confidence=0.1))
    pipeline = ClassificationPipeline(classifier, fake_sentiment())

    async def scenario():
        return await pipeline.process_picked_item(_png_header(20000, 20000))

    assert asyncio.run(scenario()) is None
    assert pipeline.state.error_message == LOAD_IMAGE_ERROR
    assert classifier.classify_call_count == 0


def test_process_picked_item_reports_decoder_crash(
    monkeypatch, fake_classifier, fake_sentiment
) -> None:
    def crash(data: bytes):
        raise RuntimeError("decoder crashed")

    monkeypatch.setattr(classification_mod, "load_image", crash)
    classifier = fake_classifier(ClassificationResult(label="x", confidence=0.1))
    pipeline = ClassificationPipeline(classifier, fake_sentiment())

    async def scenario():
        return await pipeline.process_picked_item(b"\x89PNG")

    assert asyncio.run(scenario()) is None
    assert pipeline.state.error_message == "decoder crashed"
    assert classifier.classify_call_count == 0
