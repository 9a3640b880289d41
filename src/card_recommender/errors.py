from __future__ import annotations


class RecommenderError(Exception):
    """Base class for card recommender errors."""


class DataAccessError(RecommenderError):
    """Loading cards or lists from the board source failed."""


class CardNotFoundError(DataAccessError):
    def __init__(self, card_id: str):
        super().__init__(f"Card not found: {card_id}")
        self.card_id = card_id


class SuggesterLogicError(RecommenderError):
    """A single suggester failed; the engine logs it and moves on."""

    def __init__(self, suggester: str, cause: Exception):
        super().__init__(f"{suggester} suggester failed: {cause}")
        self.suggester = suggester
        self.cause = cause
