"""Image classification backed by a local vision model."""

from .classifier import ImageClassifier, ModelImageClassifier, load_image
from .model_client import LocalModelError, ModelClient, ModelClientConfig

__all__ = [
    "ImageClassifier",
    "LocalModelError",
    "ModelClient",
    "ModelClientConfig",
    "ModelImageClassifier",
    "load_image",
]
