from __future__ import annotations

from dataclasses import dataclass

import structlog
from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .config import RecommenderConfig
from .engine import RecommendationEngine
from .errors import CardNotFoundError, DataAccessError
from .models import card_from_dict, list_from_dict, result_to_dict
from .service import RecommendationService

logger = structlog.get_logger()


@dataclass
class ApiContext:
    config: RecommenderConfig
    service: RecommendationService
    engine: RecommendationEngine


class CardPayload(BaseModel):
    id: str
    title: str
    description: str | None = ""
    priority: str = "medium"
    list_id: str = ""
    board_id: str = ""
    due_date: str | None = None
    archived: bool = False


class ListPayload(BaseModel):
    id: str
    title: str
    board_id: str = ""
    archived: bool = False


class RecommendRequest(BaseModel):
    card: CardPayload
    siblings: list[CardPayload] = Field(default_factory=list)
    lists: list[ListPayload] = Field(default_factory=list)


def build_router(ctx: ApiContext) -> APIRouter:
    router = APIRouter()

    @router.get("/api/health")
    def api_health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    @router.get("/api/cards/{card_id}/recommendations")
    def api_card_recommendations(card_id: str) -> JSONResponse:
        try:
            result = ctx.service.recommend_for_card(card_id)
        except CardNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except DataAccessError as exc:
            logger.error("Recommendation data unavailable", card_id=card_id, error=str(exc))
            raise HTTPException(status_code=503, detail="Board data unavailable") from exc
        return JSONResponse(result_to_dict(result))

    @router.post("/api/recommendations")
    def api_recommendations(payload: RecommendRequest) -> JSONResponse:
        try:
            card = card_from_dict(payload.card.model_dump())
            siblings = [card_from_dict(item.model_dump()) for item in payload.siblings]
            lists = [list_from_dict(item.model_dump()) for item in payload.lists]
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        result = ctx.engine.generate(card, siblings, lists)
        return JSONResponse(result_to_dict(result))

    return router
