from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path

from fastapi import FastAPI

from .api_routes import ApiContext, build_router
from .config import RecommenderConfig, load_config
from .engine import RecommendationEngine
from .logging_setup import configure_logging
from .service import RecommendationService
from .storage import Storage


def create_app(*, config_path: str = "config/card_recommender.yaml") -> FastAPI:
    config_file = Path(config_path).resolve()
    if config_file.parent.name == "config":
        project_root = config_file.parent.parent
    else:
        project_root = Path.cwd()
    config = _with_runtime_overrides(load_config(config_path))
    configure_logging(config.logging.level, json_output=config.logging.json)

    storage = Storage(project_root / config.service.db_path)
    storage.init_db()

    context = ApiContext(
        config=config,
        service=RecommendationService(storage, config.engine),
        engine=RecommendationEngine(config.engine),
    )

    app = FastAPI(title="Card Recommender", version="0.1.0")
    app.include_router(build_router(context))
    app.state.api_context = context
    app.state.storage = storage
    return app


def _with_runtime_overrides(config: RecommenderConfig) -> RecommenderConfig:
    db_path = os.getenv("CARD_RECOMMENDER_DB_PATH", "").strip()
    log_level = os.getenv("CARD_RECOMMENDER_LOG_LEVEL", "").strip().lower()
    if not db_path and not log_level:
        return config

    service = replace(config.service, db_path=db_path or config.service.db_path)
    logging = replace(config.logging, level=log_level or config.logging.level)
    return replace(config, service=service, logging=logging)
