"""Shared models, errors and state helpers."""
