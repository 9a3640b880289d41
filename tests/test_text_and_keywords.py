from __future__ import annotations

import pytest

from card_recommender.keywords import KEYWORD_TABLES, find_matches, first_match
from card_recommender.text import normalize_card_text


def test_normalized_text_keeps_two_token_views() -> None:
    text = normalize_card_text("Fix ASAP: the QA login-bug", "Needs a test")

    assert text.blob == "fix asap: the qa login-bug needs a test"
    assert text.keyword_tokens == ("fix", "asap", "the", "qa", "login", "bug", "needs", "a", "test")
    assert text.similarity_tokens == ("asap", "login", "needs", "test")


def test_missing_description_is_treated_as_empty() -> None:
    text = normalize_card_text("Rename variable", None)

    assert text.blob == "rename variable "
    assert text.keyword_tokens == ("rename", "variable")


def test_token_categories_require_whole_words() -> None:
    # "known" contains "now" but is not the token "now".
    assert find_matches("urgency", normalize_card_text("Known limitation", "")) == []
    assert find_matches("urgency", normalize_card_text("Do it now", "")) == ["now"]
    assert find_matches("priority.low", normalize_card_text("Follow up below", "")) == []
    assert find_matches("status.blocked", normalize_card_text("Tune alert threshold", "Tissue depending")) == []
    assert find_matches("status.blocked", normalize_card_text("Stuck on hold", "")) == ["stuck", "hold"]


def test_phrase_categories_match_multi_word_substrings() -> None:
    text = normalize_card_text("Ship the release this week", "")

    assert first_match("this_week", text) == "this week"
    assert first_match("status.in_progress", normalize_card_text("Already in progress", "")) == "in progress"


def test_matches_are_reported_in_reading_order() -> None:
    text = normalize_card_text("Emergency fix, critical and urgent", "")

    assert find_matches("priority.urgent", text) == ["emergency", "critical", "urgent"]
    assert first_match("urgency", text) == "emergency"


def test_keyword_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        KEYWORD_TABLES["urgency"] = KEYWORD_TABLES["near_term"]  # type: ignore[index]
    assert "asap" in KEYWORD_TABLES["urgency"].keywords
