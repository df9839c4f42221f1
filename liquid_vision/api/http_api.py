from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel

from liquid_vision.app import AppServices
from liquid_vision.core.env import configure_logging, load_dotenv_if_present

app = FastAPI(title="LiquidVision API")

load_dotenv_if_present()
configure_logging()


class SentimentRequest(BaseModel):
    text: str


@lru_cache(maxsize=1)
def get_services() -> AppServices:
    return AppServices()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/classify")
async def classify(request: Request, services: AppServices = Depends(get_services)) -> dict:
    """Classify the raw image bytes in the request body and analyze the label's sentiment."""
    data = await request.body()
    if not data:
        raise HTTPException(status_code=400, detail="Image body is required")

    pipeline = services.classification_pipeline()
    task = await pipeline.process_picked_item(data)
    if task is not None:
        await task

    state = pipeline.state
    if task is None and state.error_message:
        raise HTTPException(status_code=400, detail=state.error_message)
    return {"classification": state.model_dump(exclude={"selected_image"})}


@app.post("/sentiment")
async def sentiment(req: SentimentRequest, services: AppServices = Depends(get_services)) -> dict:
    pipeline = services.sentiment_pipeline()
    task = pipeline.analyze(req.text)
    if task is not None:
        await task
    state = pipeline.state
    return {"sentiment": {**state.model_dump(), "has_result": state.has_result}}
