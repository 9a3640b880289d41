from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

from .board_source import BoardSource, InMemoryBoardSource
from .config import RecommenderConfig, load_config
from .errors import DataAccessError
from .logging_setup import configure_logging
from .models import result_to_dict
from .service import RecommendationService
from .storage import Storage


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Suggest due dates, lists, priorities and related cards for a card.")
    parser.add_argument("--config", help="Path to card_recommender.yaml")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--board-json", help="Path to a board dump with 'lists' and 'cards'")
    source.add_argument("--db", help="Path to a card recommender SQLite database")
    parser.add_argument("--card-id", required=True, help="Card to analyse")
    parser.add_argument("--now", help="Optional ISO timestamp for deterministic runs")
    parser.add_argument("--output-file", help="Write the result JSON to a file instead of stdout")
    return parser.parse_args(argv)


def _parse_now(text: str | None) -> datetime | None:
    if not text:
        return None
    # Naive values are read as local time; aware ones are converted to it.
    return datetime.fromisoformat(text.replace("Z", "+00:00")).astimezone()


def _build_source(args: argparse.Namespace) -> BoardSource:
    if args.db:
        storage = Storage(args.db)
        storage.init_db()
        return storage
    try:
        payload = json.loads(Path(args.board_json).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise DataAccessError(f"Could not read board dump: {exc}") from exc
    return InMemoryBoardSource.from_dump(payload)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    config = load_config(args.config) if args.config else RecommenderConfig()
    configure_logging(config.logging.level, json_output=config.logging.json)

    try:
        service = RecommendationService(_build_source(args), config.engine)
        result = service.recommend_for_card(args.card_id, now=_parse_now(args.now))
    except DataAccessError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    output = json.dumps(result_to_dict(result), indent=2)
    if args.output_file:
        Path(args.output_file).write_text(output, encoding="utf-8")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
