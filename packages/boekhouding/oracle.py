"""Categorization oracle port and its OpenAI-backed adapter.

A :class:`CategorizationOracle` receives the per-batch instructions plus the
user content (the batch as embedded JSON) and returns the raw answer text.
It raises :class:`~boekhouding.errors.OracleError` when no answer could be
obtained. Interpreting the answer is left to :mod:`boekhouding.categorization`.

No client is created at import time; :class:`OpenAIOracle` instantiates the
SDK client lazily on first use.
"""

from __future__ import annotations

import random
import time
from typing import Any, Protocol

from openai import OpenAI

from .config import OracleSettings
from .errors import OracleError
from .logging_setup import get_logger

_MAX_ATTEMPTS: int = 3
_BACKOFF_SCHEDULE_SEC: tuple[float, ...] = (0.5, 2.0)
_JITTER_PCT: float = 0.20

_logger = get_logger("boekhouding.oracle")


class CategorizationOracle(Protocol):
    def categorize(self, user_content: str, *, instructions: str) -> str: ...


def extract_output_text(resp: Any) -> str:
    """Return the text of a Responses API result.

    Prefers ``resp.output_text`` and falls back to
    ``resp.output[0].content[0].text`` (a string, or an object with ``value``).
    """

    text = getattr(resp, "output_text", None)
    if isinstance(text, str) and text:
        return text
    output = getattr(resp, "output", None)
    if output:
        content = getattr(output[0], "content", None)
        if content:
            txt = getattr(content[0], "text", None)
            if isinstance(txt, str):
                return txt
            val = getattr(txt, "value", None)
            if isinstance(val, str):
                return val
    raise OracleError("Unexpected Responses API shape; unable to locate text output")


def _is_retryable(exc: BaseException) -> bool:
    sc = getattr(exc, "status_code", None)
    return isinstance(sc, int) and (sc == 429 or 500 <= sc < 600)


def _sleep_backoff(attempt_no: int) -> None:
    base = _BACKOFF_SCHEDULE_SEC[min(attempt_no - 1, len(_BACKOFF_SCHEDULE_SEC) - 1)]
    jitter = base * _JITTER_PCT
    time.sleep(max(0.0, base + random.uniform(-jitter, jitter)))


class OpenAIOracle:
    """Oracle backed by the OpenAI Responses API.

    Every request carries a finite timeout. HTTP 429 and 5xx responses are
    retried with jittered backoff; everything else (and exhaustion of the
    retry budget) surfaces as :class:`OracleError`.
    """

    def __init__(self, settings: OracleSettings | None = None, *, client: Any = None) -> None:
        self.settings = settings or OracleSettings.from_env()
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            # SDK-level retries are disabled; retrying is handled here.
            self._client = OpenAI(timeout=self.settings.timeout_sec, max_retries=0)
        return self._client

    def categorize(self, user_content: str, *, instructions: str) -> str:
        try:
            client = self._get_client()
        except Exception as e:
            raise OracleError(f"OpenAI client could not be created: {e}") from e

        attempt = 1
        while True:
            t0 = time.perf_counter()
            try:
                resp = client.responses.create(
                    model=self.settings.model,
                    instructions=instructions,
                    input=user_content,
                )
                return extract_output_text(resp)
            except OracleError:
                raise
            except Exception as e:  # noqa: BLE001 - SDK raises many error types
                dt_ms = (time.perf_counter() - t0) * 1000.0
                if attempt >= _MAX_ATTEMPTS or not _is_retryable(e):
                    _logger.error(
                        "oracle:failed_terminal model=%s latency_ms=%.2f error=%s attempts=%d",
                        self.settings.model,
                        dt_ms,
                        e.__class__.__name__,
                        attempt,
                    )
                    raise OracleError(f"categorization request failed: {e}") from e
                _logger.warning(
                    "oracle:retry model=%s latency_ms=%.2f error=%s attempt=%d",
                    self.settings.model,
                    dt_ms,
                    e.__class__.__name__,
                    attempt,
                )
                _sleep_backoff(attempt)
                attempt += 1


__all__ = ["CategorizationOracle", "OpenAIOracle", "extract_output_text"]
