from __future__ import annotations

import json
from pathlib import Path

import pytest
import structlog

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def board_dump() -> dict:
    return json.loads((ROOT / "tests" / "fixtures" / "board.json").read_text(encoding="utf-8"))
