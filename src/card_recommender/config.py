from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .similarity import SIMILARITY_STRATEGIES

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass(frozen=True)
class EngineConfig:
    sibling_limit: int = 50
    similarity_threshold: int = 30
    max_related_cards: int = 3
    complex_text_length: int = 100
    similarity_strategy: str = "overlap"


@dataclass(frozen=True)
class ServiceConfig:
    host: str = "127.0.0.1"
    port: int = 2026
    db_path: str = "data/card_recommender.db"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "info"
    json: bool = False


@dataclass(frozen=True)
class RecommenderConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "RecommenderConfig":
        engine = data.get("engine") or {}
        service = data.get("service") or {}
        logging = data.get("logging") or {}
        for name, section in (("engine", engine), ("service", service), ("logging", logging)):
            if not isinstance(section, dict):
                raise ValueError(f"Config section '{name}' must be a mapping.")

        strategy = str(engine.get("similarity_strategy", "overlap")).lower()
        if strategy not in SIMILARITY_STRATEGIES:
            raise ValueError(f"Unsupported similarity strategy: {strategy}")
        threshold = int(engine.get("similarity_threshold", 30))
        if not 0 <= threshold <= 100:
            raise ValueError("similarity_threshold must be between 0 and 100")
        level = str(logging.get("level", "info")).lower()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {level}")

        return RecommenderConfig(
            engine=EngineConfig(
                sibling_limit=int(engine.get("sibling_limit", 50)),
                similarity_threshold=threshold,
                max_related_cards=int(engine.get("max_related_cards", 3)),
                complex_text_length=int(engine.get("complex_text_length", 100)),
                similarity_strategy=strategy,
            ),
            service=ServiceConfig(
                host=str(service.get("host", "127.0.0.1")),
                port=int(service.get("port", 2026)),
                db_path=str(service.get("db_path", "data/card_recommender.db")),
            ),
            logging=LoggingConfig(level=level, json=bool(logging.get("json", False))),
        )


def load_config(path: str | Path) -> RecommenderConfig:
    config_path = Path(path)
    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError("Configuration root must be a mapping.")
    return RecommenderConfig.from_dict(raw)
