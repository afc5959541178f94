"""Pytest configuration for import paths and test isolation.

The workspace is not necessarily installed, so ``packages/`` (for
``boekhouding``), ``libs/db/src`` (for ``db``) and the repo root (for
``tests.helpers``) are put on ``sys.path`` first.

Each test gets a clean environment: ``DATABASE_URL`` and the oracle settings
are removed so nothing reaches a real database or the OpenAI API by accident,
and cached engines are disposed afterwards so SQLite files in ``tmp_path`` can
be cleaned up.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PATHS = [_ROOT / "packages", _ROOT / "libs" / "db" / "src", _ROOT]
sys.path[:0] = [str(p) for p in _PATHS if str(p) not in sys.path]

_ENV_VARS = (
    "DATABASE_URL",
    "OPENAI_API_KEY",
    "BOEKHOUDING_OPENAI_MODEL",
    "BOEKHOUDING_ORACLE_TIMEOUT_SEC",
    "BOEKHOUDING_ORACLE_CONCURRENCY",
    "BOEKHOUDING_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    from db.client import dispose_engines

    dispose_engines()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    """URL of a fresh file-backed SQLite database with the schema created."""

    from tests.helpers.db import bootstrap_sqlite_db

    return bootstrap_sqlite_db(tmp_path / "boekhouding-test.db")
