from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Protocol

from .challenges import Challenge, SchemaError, parse_challenge
from .llm import GenerationRequest
from .skills import GameMode

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 5
INITIAL_DELAY_MS = 1000

_RATE_LIMIT_MARKERS = ("429", "RESOURCE_EXHAUSTED")


class ContentProvider(Protocol):
    async def generate(self, request: GenerationRequest) -> str: ...


class GenerationError(Exception):
    kind = "generation_error"

    def __init__(self, message: str, *, mode: GameMode) -> None:
        super().__init__(message)
        self.mode = mode


class RateLimitExceeded(GenerationError):
    kind = "rate_limit_exceeded"


class GenerationFailed(GenerationError):
    kind = "generation_failed"


def is_rate_limit_error(exc: BaseException) -> bool:
    # provider errors only expose the HTTP status inside their text
    text = str(exc)
    return any(marker in text for marker in _RATE_LIMIT_MARKERS)


def backoff_delay_ms(attempt: int, initial_delay_ms: int = INITIAL_DELAY_MS) -> int:
    return initial_delay_ms * 2 ** (attempt - 1)


@dataclass
class RetryingClient:
    """Fetches challenges, retrying rate-limited provider calls with exponential backoff.

    Only rate limits are retried. Transport errors of any other kind, empty
    responses, invalid JSON and payloads failing validation are terminal on the
    first occurrence.
    """

    provider: ContentProvider
    max_attempts: int = MAX_ATTEMPTS
    initial_delay_ms: int = INITIAL_DELAY_MS
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    async def _generate_with_retry(self, request: GenerationRequest) -> str:
        attempts = 0
        while True:
            try:
                return await self.provider.generate(request)
            except Exception as exc:
                attempts += 1
                rate_limited = is_rate_limit_error(exc)
                if rate_limited and attempts < self.max_attempts:
                    delay_ms = backoff_delay_ms(attempts, self.initial_delay_ms)
                    logger.warning(
                        "generation_retry kind=%s attempt=%s/%s delay_ms=%s",
                        request.kind.value,
                        attempts,
                        self.max_attempts,
                        delay_ms,
                    )
                    await self.sleep(delay_ms / 1000)
                    continue
                logger.error(
                    "generation_failed kind=%s attempts=%s rate_limited=%s err=%s",
                    request.kind.value,
                    attempts,
                    rate_limited,
                    exc,
                )
                if rate_limited:
                    raise RateLimitExceeded(
                        f"rate limited after {attempts} attempts", mode=request.kind
                    ) from exc
                raise GenerationFailed(f"provider error: {exc}", mode=request.kind) from exc

    async def fetch(self, request: GenerationRequest) -> Challenge:
        raw = await self._generate_with_retry(request)
        if not raw or not raw.strip():
            logger.error("generation_failed kind=%s reason=empty_response", request.kind.value)
            raise GenerationFailed("provider returned empty text", mode=request.kind)
        try:
            payload = json.loads(raw.strip())
        except ValueError as exc:
            logger.error("generation_failed kind=%s reason=invalid_json err=%s", request.kind.value, exc)
            raise GenerationFailed(f"Invalid JSON from LLM: {exc}", mode=request.kind) from exc
        try:
            return parse_challenge(request.kind, payload)
        except SchemaError as exc:
            logger.error("generation_failed kind=%s reason=schema err=%s", request.kind.value, exc)
            raise GenerationFailed(f"Invalid challenge payload: {exc}", mode=request.kind) from exc
