from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from .keywords import first_match
from .models import Card, DueDateSuggestion
from .text import NormalizedText

COMPLEX_TEXT_LENGTH = 100
DEFAULT_DUE_IN_DAYS = 5
COMPLEX_DUE_IN_DAYS = 7


@dataclass(frozen=True)
class DueDateRule:
    category: str
    days: int | None  # None means end of the current day
    confidence: str
    reason: str


# Evaluated top to bottom; the first category that matches wins.
DUE_DATE_RULES = (
    DueDateRule("urgency", None, "high", "Urgent keyword '{keyword}' suggests finishing today"),
    DueDateRule("near_term", 1, "high", "Keyword '{keyword}' suggests a due date tomorrow"),
    DueDateRule("this_week", 3, "medium", "Keyword '{keyword}' suggests finishing within a few days"),
    DueDateRule("next_week", 7, "medium", "Keyword '{keyword}' suggests finishing next week"),
)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999000)


def suggest_due_date(
    card: Card,
    text: NormalizedText,
    now: datetime | None = None,
    complex_text_length: int = COMPLEX_TEXT_LENGTH,
) -> DueDateSuggestion | None:
    if card.due_date is not None:
        return None

    current = now or datetime.now().astimezone()
    for rule in DUE_DATE_RULES:
        keyword = first_match(rule.category, text)
        if keyword is None:
            continue
        if rule.days is None:
            suggested = end_of_day(current)
        else:
            suggested = current + timedelta(days=rule.days)
        return DueDateSuggestion(
            suggested_date=suggested,
            reason=rule.reason.format(keyword=keyword),
            confidence=rule.confidence,
        )

    if len(text.blob) > complex_text_length:
        return DueDateSuggestion(
            suggested_date=current + timedelta(days=COMPLEX_DUE_IN_DAYS),
            reason="Long description: complex task, more time allocated",
            confidence="low",
        )
    return DueDateSuggestion(
        suggested_date=current + timedelta(days=DEFAULT_DUE_IN_DAYS),
        reason="No timing cues found: default due date",
        confidence="low",
    )
