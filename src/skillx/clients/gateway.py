"""Retrying gateway for every call to an external AI service.

Only rate-limit failures (HTTP 429 / ``RESOURCE_EXHAUSTED``) are retried, with
exponential backoff and no jitter. Everything else propagates after a single
attempt. Each attempt can carry a deadline.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from skillx.utils.json_parser import DecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_MARKERS = ("429", "RESOURCE_EXHAUSTED")


class ErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    DECODE = "decode"
    UNEXPECTED = "unexpected"


class CallTimeoutError(TimeoutError):
    """A single gateway attempt exceeded its deadline."""


def is_rate_limit(exc: BaseException) -> bool:
    """Return True if the error signals provider throttling."""
    if isinstance(exc, (CallTimeoutError, DecodeError)):
        return False
    # anthropic uses status_code, google-genai uses code/status
    for attr in ("status_code", "status", "code"):
        if getattr(exc, attr, None) == 429:
            return True
    message = str(exc)
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception raised by a remote call to an ErrorKind."""
    if isinstance(exc, (CallTimeoutError, asyncio.TimeoutError)):
        return ErrorKind.TIMEOUT
    if isinstance(exc, DecodeError):
        return ErrorKind.DECODE
    if is_rate_limit(exc):
        return ErrorKind.RATE_LIMITED
    return ErrorKind.UNEXPECTED


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    initial_delay: float = 2.0
    timeout: float | None = 60.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay <= 0:
            raise ValueError("initial_delay must be > 0")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0 or None")


class Gateway:
    """Runs zero-argument coroutine functions with rate-limit retries."""

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def call(self, op: Callable[[], Awaitable[T]], *, label: str = "remote call") -> T:
        """Run ``op`` and return its result, retrying only on throttling.

        Args:
            op: Zero-argument callable returning an awaitable. It is invoked
                again for every attempt.
            label: Name used in retry log lines.

        Returns:
            Whatever ``op`` resolves to on the first successful attempt.

        Raises:
            The last rate-limit error once retries are exhausted, the first
            error of any other kind, or CallTimeoutError when an attempt
            exceeds the policy deadline.
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_rate_limit),
            stop=stop_after_attempt(self.policy.max_retries + 1),
            wait=wait_exponential(multiplier=self.policy.initial_delay, exp_base=2),
            before_sleep=self._log_retry(label),
            sleep=self._sleep,
            reraise=True,
        )
        return await retrying(self._attempt, op)

    async def _attempt(self, op: Callable[[], Awaitable[T]]) -> T:
        timeout = self.policy.timeout
        if timeout is None:
            return await op()
        try:
            return await asyncio.wait_for(op(), timeout)
        except asyncio.TimeoutError as exc:
            raise CallTimeoutError(f"remote call exceeded {timeout:g}s deadline") from exc

    def _log_retry(self, label: str) -> Callable[[RetryCallState], None]:
        max_retries = self.policy.max_retries

        def _before_sleep(retry_state: RetryCallState) -> None:
            delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
            logger.warning(
                "Rate limit hit on %s. Retrying in %.1fs (retry %d/%d)",
                label,
                delay,
                retry_state.attempt_number,
                max_retries,
            )

        return _before_sleep
