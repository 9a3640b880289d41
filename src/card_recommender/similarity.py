from __future__ import annotations

import math
from collections import Counter
from typing import Iterable, Protocol

from .text import similarity_tokens

SIMILARITY_STRATEGIES = ("overlap", "tfidf")


class Similarity(Protocol):
    name: str

    def score(self, left: str, right: str) -> float:
        ...


class OverlapSimilarity:
    """Shared distinct terms divided by the larger term set."""

    name = "overlap"

    def score(self, left: str, right: str) -> float:
        left_terms = set(similarity_tokens(left))
        right_terms = set(similarity_tokens(right))
        largest = max(len(left_terms), len(right_terms))
        if largest == 0:
            return 0.0
        return len(left_terms & right_terms) / largest


class TfidfSimilarity:
    """Cosine similarity of TF-IDF vectors.

    Document frequencies come from ``documents`` (the subject card plus its
    siblings), so terms shared by every card on the board weigh less than
    rare ones. Scores drift as the board changes, unlike the overlap ratio.
    """

    name = "tfidf"

    def __init__(self, documents: Iterable[str]):
        doc_terms = [set(similarity_tokens(text)) for text in documents]
        self._doc_count = len(doc_terms)
        self._doc_freq: Counter[str] = Counter()
        for terms in doc_terms:
            self._doc_freq.update(terms)

    def _idf(self, term: str) -> float:
        # Smoothed so unseen terms and single-document corpora stay positive.
        return math.log((1 + self._doc_count) / (1 + self._doc_freq[term])) + 1.0

    def _vector(self, text: str) -> dict[str, float]:
        counts = Counter(similarity_tokens(text))
        return {term: count * self._idf(term) for term, count in counts.items()}

    def score(self, left: str, right: str) -> float:
        left_vec = self._vector(left)
        right_vec = self._vector(right)
        if not left_vec or not right_vec:
            return 0.0
        dot = sum(weight * right_vec.get(term, 0.0) for term, weight in left_vec.items())
        norm = math.sqrt(sum(w * w for w in left_vec.values())) * math.sqrt(sum(w * w for w in right_vec.values()))
        if norm == 0:
            return 0.0
        return min(1.0, dot / norm)


def build_similarity(strategy: str, documents: Iterable[str] = ()) -> Similarity:
    if strategy == "overlap":
        return OverlapSimilarity()
    if strategy == "tfidf":
        return TfidfSimilarity(documents)
    raise ValueError(f"Unsupported similarity strategy: {strategy}")


def to_percent(score: float) -> int:
    return int(math.floor(score * 100 + 0.5))
