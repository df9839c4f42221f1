"""Text sentiment analysis."""

from .analyzer import ModelSentimentAnalyzer, SentimentAnalyzer, category_for_score

__all__ = ["ModelSentimentAnalyzer", "SentimentAnalyzer", "category_for_score"]
