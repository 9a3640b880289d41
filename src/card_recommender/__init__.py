"""Card content recommendation engine."""

from .board_source import BoardSource, InMemoryBoardSource
from .config import RecommenderConfig, load_config
from .engine import RecommendationEngine, generate_recommendations
from .errors import CardNotFoundError, DataAccessError, SuggesterLogicError
from .models import BoardList, Card, RecommendationResult, result_to_dict
from .service import RecommendationService
from .storage import Storage

__all__ = [
    "BoardList",
    "BoardSource",
    "Card",
    "CardNotFoundError",
    "DataAccessError",
    "InMemoryBoardSource",
    "RecommendationEngine",
    "RecommendationResult",
    "RecommendationService",
    "RecommenderConfig",
    "Storage",
    "SuggesterLogicError",
    "generate_recommendations",
    "load_config",
    "result_to_dict",
]
