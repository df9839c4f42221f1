"""Image classification and sentiment analysis pipelines."""

from .pipelines import ClassificationPipeline, SentimentPipeline

__all__ = ["ClassificationPipeline", "SentimentPipeline"]
