#!/usr/bin/env python
"""
Classify an image file and analyze the sentiment of the predicted label.

Usage:
  OLLAMA_VISION_MODEL=llava python scripts/classify_image.py ~/Pictures/dog.jpg
"""
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from liquid_vision.app import AppServices
from liquid_vision.core.env import configure_logging, load_dotenv_if_present


async def _run(path: Path) -> None:
    services = AppServices()
    pipeline = services.classification_pipeline()
    pipeline.observable.subscribe(
        lambda state: print(
            f"[loading={state.is_loading} sentiment={state.is_analyzing_sentiment}] "
            f"{state.prediction}"
        )
    )
    try:
        task = await pipeline.process_picked_item(path.read_bytes())
        if task is not None:
            await task
    finally:
        await services.aclose()

    state = pipeline.state
    if state.error_message:
        print(f"Classification failed: {state.error_message}")
        return
    print(f"Prediction: {state.prediction} ({state.confidence:.0%})")
    if state.prediction_sentiment_error_message:
        print(f"Sentiment failed: {state.prediction_sentiment_error_message}")
    else:
        print(
            f"Sentiment: {state.prediction_sentiment_label} "
            f"({state.prediction_sentiment_score:+.2f})"
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Classify an image and analyze its label.")
    parser.add_argument("image", type=Path, help="Path to the image file")
    args = parser.parse_args()

    load_dotenv_if_present()
    configure_logging()
    if not args.image.is_file():
        raise FileNotFoundError(f"Image not found: {args.image}")
    asyncio.run(_run(args.image))


if __name__ == "__main__":
    main()
