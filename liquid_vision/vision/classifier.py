from __future__ import annotations

import asyncio
import logging
import math
from io import BytesIO
from typing import Any, Optional, Protocol

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, ValidationError, field_validator

from liquid_vision.core.errors import NoClassificationResult, UnsupportedImageFormat
from liquid_vision.core.models import ClassificationResult
from liquid_vision.vision.model_client import LocalModelError, ModelClient

logger = logging.getLogger(__name__)


class ImageClassifier(Protocol):
    async def classify(self, image: Image.Image) -> ClassificationResult: ...


def load_image(data: bytes) -> Optional[Image.Image]:
    """Decode picked image bytes; returns None when the data is not an image."""
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            return img.copy()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
        return None


def _encode_jpeg(image: Image.Image, max_size: int) -> bytes:
    try:
        img = image.convert("RGB")
        img.thumbnail((max_size, max_size))
        buf = BytesIO()
        img.save(buf, format="JPEG", quality=90)
    except (OSError, ValueError) as exc:
        raise UnsupportedImageFormat() from exc
    return buf.getvalue()


def _normalize_conf(value: Any) -> float:
    try:
        conf = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(conf):
        raise ValueError("confidence must be finite")
    return round(max(0.0, min(conf, 1.0)), 4)


_CLASSIFIER_PROMPT = """
You are an image classifier. Name the single most prominent subject of the image.

Rules:
- "label" is a short, lowercase, 1-3 word name (e.g. "golden retriever", "coffee mug").
- "confidence" is a number between 0 and 1.
- Never add markdown, prose, or explanations.

Required JSON shape:
{ "label": "golden retriever", "confidence": 0.92 }
""".strip()


class _LabelResponse(BaseModel):
    label: str
    confidence: float = 0.0

    @field_validator("label")
    @classmethod
    def _clean_label(cls, v: str) -> str:
        return " ".join(v.strip().strip("`\"'").split())

    @field_validator("confidence", mode="before")
    @classmethod
    def _clean_conf(cls, v: Any) -> float:
        return _normalize_conf(v)


class ModelImageClassifier:
    """Image classifier backed by a local vision model."""

    def __init__(self, client: ModelClient, max_size: int = 512):
        self.client = client
        self.max_size = max_size

    async def classify(self, image: Image.Image) -> ClassificationResult:
        payload = await asyncio.to_thread(_encode_jpeg, image, self.max_size)
        model = self.client.config.vision_model

        logger.debug("Image classifier: calling %s (%d bytes)", model, len(payload))
        try:
            parsed = await self.client.generate_json(_CLASSIFIER_PROMPT, model=model, images=[payload])
        except LocalModelError as exc:
            logger.warning("Image classifier failed: %s", exc)
            raise NoClassificationResult() from exc

        try:
            response = _LabelResponse.model_validate(parsed)
        except ValidationError as exc:
            raise NoClassificationResult() from exc
        if not response.label:
            raise NoClassificationResult()

        return ClassificationResult(label=response.label, confidence=response.confidence)
