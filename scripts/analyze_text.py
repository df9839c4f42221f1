#!/usr/bin/env python
"""
Analyze the sentiment of a piece of text.

Usage:
  OLLAMA_TEXT_MODEL=llama3 python scripts/analyze_text.py "Great experience!"
"""
from __future__ import annotations

import argparse
import asyncio

from liquid_vision.app import AppServices
from liquid_vision.core.env import configure_logging, load_dotenv_if_present


async def _run(text: str) -> None:
    services = AppServices()
    pipeline = services.sentiment_pipeline()
    try:
        task = pipeline.analyze(text)
        if task is not None:
            await task
    finally:
        await services.aclose()

    state = pipeline.state
    if state.error_message:
        print(f"Sentiment failed: {state.error_message}")
    else:
        print(f"{state.sentiment_label} ({state.sentiment_score:+.2f})")


def main() -> None:
    parser = argparse.ArgumentParser(description="Analyze the sentiment of text.")
    parser.add_argument("text", help="Text to analyze")
    args = parser.parse_args()

    load_dotenv_if_present()
    configure_logging()
    asyncio.run(_run(args.text))


if __name__ == "__main__":
    main()
