from __future__ import annotations

from typing import Iterable

from .models import Card, RelatedCard, RelatedCardsSuggestion
from .similarity import OverlapSimilarity, Similarity, to_percent

SIMILARITY_THRESHOLD = 30
MAX_RELATED_CARDS = 3
SIBLING_LIMIT = 50


def card_text(card: Card) -> str:
    return f"{card.title or ''} {card.description or ''}".lower()


def candidate_siblings(card: Card, siblings: Iterable[Card], limit: int = SIBLING_LIMIT) -> list[Card]:
    candidates: list[Card] = []
    for sibling in siblings:
        if len(candidates) >= limit:
            break
        if sibling.archived or sibling.id == card.id:
            continue
        if card.board_id and sibling.board_id and sibling.board_id != card.board_id:
            continue
        candidates.append(sibling)
    return candidates


def find_related_cards(
    card: Card,
    siblings: Iterable[Card],
    similarity: Similarity | None = None,
    threshold: int = SIMILARITY_THRESHOLD,
    max_results: int = MAX_RELATED_CARDS,
    sibling_limit: int = SIBLING_LIMIT,
) -> RelatedCardsSuggestion | None:
    measure = similarity or OverlapSimilarity()
    subject = card_text(card)

    matches: list[RelatedCard] = []
    for sibling in candidate_siblings(card, siblings, limit=sibling_limit):
        percent = to_percent(measure.score(subject, card_text(sibling)))
        if percent > threshold:
            matches.append(RelatedCard(card_id=sibling.id, title=sibling.title, similarity_percent=percent))

    if not matches:
        return None

    ranked = sorted(matches, key=lambda item: -item.similarity_percent)
    return RelatedCardsSuggestion(
        items=tuple(ranked[:max_results]),
        reason="These cards have similar content and might be grouped together",
        confidence="high" if len(matches) >= 2 else "medium",
    )
