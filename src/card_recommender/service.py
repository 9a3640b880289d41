from __future__ import annotations

from datetime import datetime

import structlog

from .board_source import BoardSource
from .config import EngineConfig
from .engine import RecommendationEngine
from .models import RecommendationResult

logger = structlog.get_logger()


class RecommendationService:
    """Loads a card's board context from a board source and runs the engine.

    Data access errors (including a missing card) propagate to the caller.
    """

    def __init__(self, source: BoardSource, config: EngineConfig | None = None):
        self.source = source
        self.engine = RecommendationEngine(config)

    def recommend_for_card(self, card_id: str, *, now: datetime | None = None) -> RecommendationResult:
        card = self.source.fetch_card(card_id)
        siblings = self.source.fetch_sibling_cards(
            card.board_id,
            exclude_card_id=card.id,
            limit=self.engine.config.sibling_limit,
        )
        lists = self.source.fetch_lists(card.board_id)
        logger.info("Generating recommendations", card_id=card.id, board_id=card.board_id, siblings=len(siblings))
        return self.engine.generate(card, siblings, lists, now=now)
