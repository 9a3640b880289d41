from __future__ import annotations

from typing import Callable

from .keywords import find_matches, first_match
from .models import Card, PrioritySuggestion
from .text import NormalizedText

PriorityRule = Callable[[NormalizedText], PrioritySuggestion | None]

# Substring checks, so "importantly" and "high-priority" count too.
HIGH_PRIORITY_TERMS = ("important", "priority")


def _multiple_urgent(text: NormalizedText) -> PrioritySuggestion | None:
    hits = find_matches("priority.urgent", text)
    if len(hits) < 2:
        return None
    return PrioritySuggestion(
        suggested_priority="urgent",
        reason=f"Multiple urgent indicators found: {', '.join(hits)}",
        confidence="high",
    )


def _single_urgent(text: NormalizedText) -> PrioritySuggestion | None:
    hits = find_matches("priority.urgent", text)
    if len(hits) != 1:
        return None
    return PrioritySuggestion(
        suggested_priority="high",
        reason=f"Urgent keyword '{hits[0]}' detected",
        confidence="medium",
    )


def _high_keyword(text: NormalizedText) -> PrioritySuggestion | None:
    for keyword in HIGH_PRIORITY_TERMS:
        if keyword in text.blob:
            return PrioritySuggestion(
                suggested_priority="high",
                reason=f"Priority keyword '{keyword}' mentioned",
                confidence="medium",
            )
    return None


def _low_keyword(text: NormalizedText) -> PrioritySuggestion | None:
    keyword = first_match("priority.low", text)
    if keyword is None:
        return None
    return PrioritySuggestion(
        suggested_priority="low",
        reason=f"Low-priority keyword '{keyword}' mentioned",
        confidence="medium",
    )


# A single urgent keyword only lifts a card to "high"; "urgent" needs two.
PRIORITY_RULES: tuple[PriorityRule, ...] = (_multiple_urgent, _single_urgent, _high_keyword, _low_keyword)


def suggest_priority(card: Card, text: NormalizedText) -> PrioritySuggestion | None:
    if card.priority == "urgent":
        return None

    for rule in PRIORITY_RULES:
        suggestion = rule(text)
        if suggestion is None:
            continue
        if suggestion.suggested_priority == card.priority:
            return None
        return suggestion
    return None
