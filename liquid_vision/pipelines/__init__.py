"""Orchestration pipelines publishing observable state."""

from .classification import ClassificationPipeline
from .sentiment import SentimentPipeline

__all__ = ["ClassificationPipeline", "SentimentPipeline"]
