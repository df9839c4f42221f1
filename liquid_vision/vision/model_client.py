from __future__ import annotations

import base64
import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from liquid_vision.core.env import env_float

logger = logging.getLogger(__name__)


class LocalModelError(RuntimeError):
    """Raised when a local model call fails."""


@dataclass
class ModelClientConfig:
    base_url: str
    vision_model: Optional[str]
    text_model: Optional[str]
    timeout: float
    temperature: float

    @classmethod
    def from_env(cls) -> "ModelClientConfig":
        vision_model = os.getenv("OLLAMA_VISION_MODEL")
        return cls(
            base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
            vision_model=vision_model,
            text_model=os.getenv("OLLAMA_TEXT_MODEL") or vision_model,
            timeout=env_float("OLLAMA_HTTP_TIMEOUT", 60.0, minimum=1.0),
            temperature=env_float("OLLAMA_TEMPERATURE", 0.0, minimum=0.0, maximum=1.0),
        )


def _strip_wrappers(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        parts = text.split("\n", 1)
        text = parts[1] if len(parts) > 1 else ""
    if text.endswith("```"):
        text = text.rsplit("```", 1)[0]
    return text.strip()


def parse_json_object(raw: str) -> Dict[str, Any]:
    """Parse a JSON object out of model output, tolerating fences and chatter."""
    text = _strip_wrappers(raw)
    if not text:
        raise LocalModelError("Empty response from model")

    parsed: Any = None
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", text, flags=re.DOTALL)
        if match:
            try:
                parsed = json.loads(match.group(0))
            except json.JSONDecodeError:
                parsed = None

    if not isinstance(parsed, dict):
        raise LocalModelError(f"Model output is not a JSON object: {raw[:200]}")
    return parsed


def encode_image(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


class ModelClient:
    """Async client for an Ollama-compatible generate endpoint."""

    def __init__(self, config: ModelClientConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.client = client or httpx.AsyncClient(
            base_url=config.base_url.rstrip("/"), timeout=config.timeout
        )

    async def generate(
        self,
        prompt: str,
        *,
        model: Optional[str],
        images: Optional[List[bytes]] = None,
        json_format: bool = False,
    ) -> str:
        if not model:
            raise LocalModelError("Model name not configured")

        payload: Dict[str, Any] = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": self.config.temperature},
        }
        if images:
            payload["images"] = [encode_image(img) for img in images]
        if json_format:
            payload["format"] = "json"

        try:
            response = await self.client.post("/api/generate", json=payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise LocalModelError(f"Model call failed: {exc}") from exc

        text = body.get("response") or (body.get("message") or {}).get("content")
        if not text:
            raise LocalModelError("No response text from model")
        return str(text).strip()

    async def generate_json(
        self, prompt: str, *, model: Optional[str], images: Optional[List[bytes]] = None
    ) -> Dict[str, Any]:
        raw = await self.generate(prompt, model=model, images=images, json_format=True)
        logger.debug("Model %s raw output:\n%s", model, raw)
        return parse_json_object(raw)

    async def aclose(self) -> None:
        await self.client.aclose()
