"""Bounded fixed-interval polling."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class PollResult(Generic[T]):
    """Terminal outcome of :func:`poll_until`.

    ``value`` is the last response seen (``None`` when every attempt errored).
    ``TIMED_OUT`` means the attempt budget ran out while still pending; it is
    an ordinary outcome, not an error.
    """

    status: PollStatus
    value: Optional[T]
    attempts: int

    @property
    def succeeded(self) -> bool:
        return self.status is PollStatus.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.status is PollStatus.FAILED

    @property
    def timed_out(self) -> bool:
        return self.status is PollStatus.TIMED_OUT


async def poll_until(
    fetch: Callable[[], Awaitable[T]],
    classify: Callable[[T], PollStatus],
    *,
    interval: float,
    max_attempts: int,
    retry_on: tuple[type[BaseException], ...] = (),
) -> PollResult[T]:
    """Call ``fetch`` after a constant ``interval`` until ``classify`` reports a terminal status.

    Errors listed in ``retry_on`` are logged and count as a pending attempt.
    """
    if max_attempts <= 0:
        raise ValueError("max_attempts must be positive")

    last: Optional[T] = None
    for attempt in range(1, max_attempts + 1):
        await asyncio.sleep(interval)
        try:
            response = await fetch()
        except retry_on as exc:
            logger.warning("Poll attempt %s/%s failed: %s", attempt, max_attempts, exc)
            continue

        last = response
        status = classify(response)
        if status is PollStatus.SUCCEEDED or status is PollStatus.FAILED:
            logger.debug("Poll finished with %s after %s attempt(s)", status.value, attempt)
            return PollResult(status=status, value=response, attempts=attempt)
        logger.debug("Poll attempt %s/%s still pending", attempt, max_attempts)

    logger.info("Polling still pending after %s attempts", max_attempts)
    return PollResult(status=PollStatus.TIMED_OUT, value=last, attempts=max_attempts)


def status_from_field(
    field_name: str = "status",
    *,
    success: str = "success",
    failure: str = "failed",
) -> Callable[[Any], PollStatus]:
    """Classifier reading a status string from a mapping response; anything else is pending."""

    def _classify(response: Any) -> PollStatus:
        value = response.get(field_name) if isinstance(response, dict) else None
        if value == success:
            return PollStatus.SUCCEEDED
        if value == failure:
            return PollStatus.FAILED
        return PollStatus.PENDING

    return _classify
