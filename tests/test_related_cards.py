from __future__ import annotations

import pytest

from card_recommender.models import Card
from card_recommender.related_cards import find_related_cards
from card_recommender.similarity import OverlapSimilarity, TfidfSimilarity, build_similarity, to_percent


def _card(card_id: str, title: str, description: str = "", **kwargs) -> Card:
    kwargs.setdefault("board_id", "b1")
    return Card(id=card_id, title=title, description=description, **kwargs)


SUBJECT = _card("subject", "Login page redesign for mobile")


def test_overlap_ratio_uses_larger_token_set() -> None:
    overlap = OverlapSimilarity()

    assert overlap.score("Login page redesign for mobile", "Mobile login page bug") == pytest.approx(0.75)
    assert overlap.score("", "") == 0.0


@pytest.mark.parametrize(
    ("left", "right"),
    [
        ("Login page redesign for mobile", "Mobile login page bug"),
        ("Quarterly budget review", "Budget review for quarterly planning meeting"),
        ("short", "another completely unrelated sentence"),
    ],
)
def test_similarity_is_symmetric(left: str, right: str) -> None:
    overlap = OverlapSimilarity()
    tfidf = TfidfSimilarity([left, right])

    assert overlap.score(left, right) == overlap.score(right, left)
    assert tfidf.score(left, right) == pytest.approx(tfidf.score(right, left))


def test_tfidf_scores_identical_text_as_full_match() -> None:
    tfidf = build_similarity("tfidf", ["release notes draft", "deploy pipeline"])

    assert tfidf.score("release notes draft", "release notes draft") == pytest.approx(1.0)
    assert tfidf.score("release notes draft", "deploy pipeline") == 0.0


def test_unknown_similarity_strategy_is_rejected() -> None:
    with pytest.raises(ValueError):
        build_similarity("embedding")


def test_percent_rounds_half_up() -> None:
    assert to_percent(0.125) == 13
    assert to_percent(1 / 3) == 33


def test_related_cards_are_ranked_and_filtered() -> None:
    siblings = [
        _card("a", "Mobile login page bug"),
        _card("b", "Login page redesign mobile"),
        _card("c", "Quarterly budget review"),
        _card("d", "Mobile analytics dashboard"),
    ]

    suggestion = find_related_cards(SUBJECT, siblings)

    assert suggestion is not None
    assert [(item.card_id, item.similarity_percent) for item in suggestion.items] == [("b", 100), ("a", 75)]
    assert suggestion.confidence == "high"


def test_single_match_is_medium_confidence() -> None:
    suggestion = find_related_cards(SUBJECT, [_card("a", "Mobile login page bug")])

    assert suggestion is not None
    assert suggestion.confidence == "medium"


def test_no_suggestion_when_nothing_clears_threshold() -> None:
    assert find_related_cards(SUBJECT, [_card("c", "Quarterly budget review")]) is None
    assert find_related_cards(SUBJECT, []) is None


def test_at_most_three_items_all_above_threshold() -> None:
    siblings = [_card(f"s{i}", "Login page redesign mobile", f"variant {i}") for i in range(6)]

    suggestion = find_related_cards(SUBJECT, siblings)

    assert suggestion is not None
    assert len(suggestion.items) == 3
    assert all(item.similarity_percent >= 30 for item in suggestion.items)


def test_archived_self_and_other_board_cards_are_ignored() -> None:
    siblings = [
        _card("subject", "Login page redesign for mobile"),
        _card("x", "Login page redesign mobile", archived=True),
        _card("y", "Login page redesign mobile", board_id="b2"),
    ]

    assert find_related_cards(SUBJECT, siblings) is None


def test_only_the_bounded_working_set_is_scored() -> None:
    siblings = [_card(f"n{i}", f"Unrelated chore number {i}") for i in range(50)]
    siblings.append(_card("late", "Login page redesign mobile"))

    assert find_related_cards(SUBJECT, siblings) is None
    assert find_related_cards(SUBJECT, siblings, sibling_limit=60) is not None
