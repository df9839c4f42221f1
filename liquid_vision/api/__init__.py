"""FastAPI surface for the classification and sentiment flows."""
