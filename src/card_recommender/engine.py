from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable

import structlog

from .config import EngineConfig
from .due_dates import suggest_due_date
from .errors import DataAccessError, SuggesterLogicError
from .list_movement import suggest_list_movement
from .models import BoardList, Card, RecommendationResult, RelatedCardsSuggestion, Suggestion
from .priority import suggest_priority
from .related_cards import candidate_siblings, card_text, find_related_cards
from .similarity import build_similarity
from .text import normalize_card_text

logger = structlog.get_logger()


class RecommendationEngine:
    """Runs every suggester for one card and collects what they return.

    Suggesters are independent; a failure inside one is logged and counted
    as "no suggestion" so the remaining ones still report. Failures loading
    sibling cards or lists are ``DataAccessError`` and abort the call.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def generate(
        self,
        card: Card,
        sibling_cards: Iterable[Card],
        lists: Iterable[BoardList],
        *,
        now: datetime | None = None,
    ) -> RecommendationResult:
        siblings = candidate_siblings(card, sibling_cards, limit=self.config.sibling_limit)
        board_lists = list(lists)
        current = now or datetime.now().astimezone()
        text = normalize_card_text(card.title, card.description)

        steps: list[tuple[str, Callable[[], Suggestion | None]]] = [
            (
                "due_date",
                lambda: suggest_due_date(
                    card, text, now=current, complex_text_length=self.config.complex_text_length
                ),
            ),
            ("list_movement", lambda: suggest_list_movement(card, text, board_lists)),
            ("priority", lambda: suggest_priority(card, text)),
            ("related_cards", lambda: self._related_cards(card, siblings)),
        ]

        suggestions: list[Suggestion] = []
        for name, step in steps:
            suggestion = self._run_suggester(name, card, step)
            if suggestion is not None:
                suggestions.append(suggestion)

        logger.debug(
            "Generated recommendations",
            card_id=card.id,
            suggestion_count=len(suggestions),
            sibling_count=len(siblings),
        )
        return RecommendationResult(card_id=card.id, suggestions=tuple(suggestions), generated_at=current)

    def _related_cards(self, card: Card, siblings: list[Card]) -> RelatedCardsSuggestion | None:
        documents = [card_text(card)] + [card_text(item) for item in siblings]
        similarity = build_similarity(self.config.similarity_strategy, documents)
        return find_related_cards(
            card,
            siblings,
            similarity=similarity,
            threshold=self.config.similarity_threshold,
            max_results=self.config.max_related_cards,
            sibling_limit=self.config.sibling_limit,
        )

    def _run_suggester(
        self,
        name: str,
        card: Card,
        step: Callable[[], Suggestion | None],
    ) -> Suggestion | None:
        try:
            return step()
        except DataAccessError:
            raise
        except Exception as exc:
            error = SuggesterLogicError(name, exc)
            logger.warning("Suggester failed", suggester=name, card_id=card.id, error=str(error))
            return None


def generate_recommendations(
    card: Card,
    sibling_cards: Iterable[Card],
    lists: Iterable[BoardList],
    *,
    now: datetime | None = None,
    config: EngineConfig | None = None,
) -> RecommendationResult:
    return RecommendationEngine(config).generate(card, sibling_cards, lists, now=now)
