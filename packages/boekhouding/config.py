"""Environment-driven settings for the categorization oracle.

Values come from the process environment (the CLI loads ``.env`` first via
``python-dotenv``). Invalid numeric values fall back to defaults instead of
failing, mirroring how the CLI resolves worker counts.

- ``OPENAI_API_KEY``: read by the OpenAI SDK itself.
- ``BOEKHOUDING_OPENAI_MODEL``: model name (default ``gpt-5-mini``).
- ``BOEKHOUDING_ORACLE_TIMEOUT_SEC``: per-request timeout in seconds (default 60).
- ``BOEKHOUDING_ORACLE_CONCURRENCY``: concurrent batches (default 1, capped at 8).
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MODEL = "gpt-5-mini"
DEFAULT_TIMEOUT_SEC = 60.0
DEFAULT_CONCURRENCY = 1
_MAX_CONCURRENCY = 8


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    try:
        val = float(raw) if raw else default
    except ValueError:
        return default
    return val if val > 0 else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    try:
        val = int(raw) if raw else default
    except ValueError:
        return default
    return val if val > 0 else default


@dataclass(frozen=True, slots=True)
class OracleSettings:
    model: str = DEFAULT_MODEL
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    concurrency: int = DEFAULT_CONCURRENCY

    @classmethod
    def from_env(cls) -> OracleSettings:
        model = (os.getenv("BOEKHOUDING_OPENAI_MODEL") or "").strip() or DEFAULT_MODEL
        return cls(
            model=model,
            timeout_sec=_env_float("BOEKHOUDING_ORACLE_TIMEOUT_SEC", DEFAULT_TIMEOUT_SEC),
            concurrency=min(
                _env_int("BOEKHOUDING_ORACLE_CONCURRENCY", DEFAULT_CONCURRENCY),
                _MAX_CONCURRENCY,
            ),
        )


__all__ = ["OracleSettings", "DEFAULT_MODEL"]
