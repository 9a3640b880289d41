from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from .text import NormalizedText

TOKEN = "token"
PHRASE = "phrase"


@dataclass(frozen=True)
class KeywordCategory:
    name: str
    keywords: tuple[str, ...]
    match_style: str


def _category(name: str, match_style: str, *keywords: str) -> KeywordCategory:
    return KeywordCategory(name=name, keywords=keywords, match_style=match_style)


# Single words such as "today" or "low" are matched as whole tokens; categories
# with multi-word phrases ("this week", "in progress") are matched as substrings
# of the lowercase text.
KEYWORD_TABLES = MappingProxyType(
    {
        category.name: category
        for category in (
            _category(
                "urgency", TOKEN,
                "today", "now", "immediate", "asap", "immediately", "urgent", "critical", "emergency",
            ),
            _category("near_term", TOKEN, "tomorrow"),
            _category("this_week", PHRASE, "this week", "soon", "shortly", "quickly"),
            _category("next_week", PHRASE, "next week", "upcoming", "later"),
            _category(
                "status.in_progress", PHRASE,
                "started", "working", "began", "begun", "implementing", "developing",
                "in progress", "currently", "doing",
            ),
            _category(
                "status.done", PHRASE,
                "done", "completed", "finished", "complete", "resolved", "fixed", "closed",
            ),
            _category(
                "status.blocked", TOKEN,
                "blocked", "stuck", "issue", "problem", "waiting", "pending", "hold",
            ),
            _category("status.testing", TOKEN, "testing", "test", "qa", "review", "checking"),
            _category("priority.urgent", PHRASE, "urgent", "critical", "asap", "immediately", "emergency"),
            _category("priority.high", TOKEN, "important", "high", "priority", "crucial", "essential"),
            _category("priority.low", TOKEN, "minor", "low", "trivial", "optional"),
        )
    }
)


def find_matches(category: str, text: NormalizedText) -> list[str]:
    """Distinct keywords of ``category`` present in ``text``, in reading order."""
    table = KEYWORD_TABLES[category]
    if table.match_style == TOKEN:
        wanted = set(table.keywords)
        matches: list[str] = []
        for token in text.keyword_tokens:
            if token in wanted and token not in matches:
                matches.append(token)
        return matches

    positions = []
    for keyword in table.keywords:
        index = text.blob.find(keyword)
        if index != -1:
            positions.append((index, keyword))
    return [keyword for _, keyword in sorted(positions, key=lambda item: item[0])]


def first_match(category: str, text: NormalizedText) -> str | None:
    matches = find_matches(category, text)
    return matches[0] if matches else None
