from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Union

PRIORITIES = ("low", "medium", "high", "urgent")
DEFAULT_PRIORITY = "medium"

SUGGESTION_TITLES = {
    "due_date": "Due Date Suggestion",
    "list_movement": "List Movement Suggestion",
    "priority": "Priority Adjustment",
    "related_cards": "Related Cards Found",
}


@dataclass(frozen=True)
class Card:
    id: str
    title: str
    description: str = ""
    priority: str = DEFAULT_PRIORITY
    list_id: str = ""
    board_id: str = ""
    due_date: datetime | None = None
    archived: bool = False


@dataclass(frozen=True)
class BoardList:
    id: str
    title: str
    board_id: str = ""
    archived: bool = False


@dataclass(frozen=True)
class DueDateSuggestion:
    suggested_date: datetime
    reason: str
    confidence: str
    kind: str = field(default="due_date", init=False)


@dataclass(frozen=True)
class ListMovementSuggestion:
    suggested_list_title: str
    suggested_list_id: str
    reason: str
    confidence: str
    kind: str = field(default="list_movement", init=False)


@dataclass(frozen=True)
class PrioritySuggestion:
    suggested_priority: str
    reason: str
    confidence: str
    kind: str = field(default="priority", init=False)


@dataclass(frozen=True)
class RelatedCard:
    card_id: str
    title: str
    similarity_percent: int


@dataclass(frozen=True)
class RelatedCardsSuggestion:
    items: tuple[RelatedCard, ...]
    reason: str
    confidence: str
    kind: str = field(default="related_cards", init=False)


Suggestion = Union[DueDateSuggestion, ListMovementSuggestion, PrioritySuggestion, RelatedCardsSuggestion]


@dataclass(frozen=True)
class RecommendationResult:
    card_id: str
    suggestions: tuple[Suggestion, ...]
    generated_at: datetime


def suggestion_to_dict(suggestion: Suggestion) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "type": suggestion.kind,
        "title": SUGGESTION_TITLES[suggestion.kind],
        "reason": suggestion.reason,
        "confidence": suggestion.confidence,
    }
    if isinstance(suggestion, DueDateSuggestion):
        payload["suggested_date"] = suggestion.suggested_date.isoformat()
    elif isinstance(suggestion, ListMovementSuggestion):
        payload["suggested_list_title"] = suggestion.suggested_list_title
        payload["suggested_list_id"] = suggestion.suggested_list_id
    elif isinstance(suggestion, PrioritySuggestion):
        payload["suggested_priority"] = suggestion.suggested_priority
    elif isinstance(suggestion, RelatedCardsSuggestion):
        payload["items"] = [
            {"card_id": item.card_id, "title": item.title, "similarity_percent": item.similarity_percent}
            for item in suggestion.items
        ]
    return payload


def result_to_dict(result: RecommendationResult) -> dict[str, Any]:
    return {
        "card_id": result.card_id,
        "suggestions": [suggestion_to_dict(item) for item in result.suggestions],
        "generated_at": result.generated_at.isoformat(),
    }


def card_from_dict(payload: dict[str, Any]) -> Card:
    priority = str(payload.get("priority") or DEFAULT_PRIORITY).lower()
    if priority not in PRIORITIES:
        priority = DEFAULT_PRIORITY
    due_value = _first(payload, "due_date", "dueDate")
    return Card(
        id=str(_first(payload, "id", "_id") or ""),
        title=str(payload.get("title") or ""),
        description=str(payload.get("description") or ""),
        priority=priority,
        list_id=str(_first(payload, "list_id", "listId", "list") or ""),
        board_id=str(_first(payload, "board_id", "boardId", "board") or ""),
        due_date=parse_timestamp(due_value) if due_value not in (None, "") else None,
        archived=bool(_first(payload, "archived", "isArchived") or False),
    )


def list_from_dict(payload: dict[str, Any]) -> BoardList:
    return BoardList(
        id=str(_first(payload, "id", "_id") or ""),
        title=str(payload.get("title") or ""),
        board_id=str(_first(payload, "board_id", "boardId", "board") or ""),
        archived=bool(_first(payload, "archived", "isArchived") or False),
    )


def _first(payload: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def parse_timestamp(value: str | int | float | datetime | None) -> datetime:
    if value is None:
        return datetime.now(tz=timezone.utc)
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text.replace("Z", "+00:00")
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return datetime.fromtimestamp(float(text), tz=timezone.utc)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
