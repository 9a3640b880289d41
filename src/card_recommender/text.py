from __future__ import annotations

import re
from dataclasses import dataclass

MIN_SIMILARITY_TOKEN_LENGTH = 4

_NON_WORD = re.compile(r"\W+")


@dataclass(frozen=True)
class NormalizedText:
    """Card text prepared once and shared by every suggester.

    ``keyword_tokens`` keeps short words such as "asap" or "qa" for exact
    keyword lookups, while ``similarity_tokens`` drops anything shorter than
    four characters so related-card scoring ignores noise words.
    """

    blob: str
    keyword_tokens: tuple[str, ...]
    similarity_tokens: tuple[str, ...]


def normalize_card_text(title: str | None, description: str | None) -> NormalizedText:
    blob = f"{title or ''} {description or ''}".lower()
    keyword_tokens = tuple(token for token in _NON_WORD.split(blob) if token)
    return NormalizedText(
        blob=blob,
        keyword_tokens=keyword_tokens,
        similarity_tokens=similarity_tokens(blob),
    )


def similarity_tokens(text: str) -> tuple[str, ...]:
    return tuple(token for token in _NON_WORD.split(text.lower()) if len(token) >= MIN_SIMILARITY_TOKEN_LENGTH)
