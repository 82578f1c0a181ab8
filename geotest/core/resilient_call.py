"""
Resilient Call
==============

Retry wrapper shared by every live provider call: a fixed number of
attempts with linear backoff (attempt x backoff unit) between them.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    backoff_ms: int = 1000,
    op_logger=None,
    label: str = "provider call",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await ``operation`` until it succeeds or attempts run out.

    Example:
        >>> data = await with_retry(lambda: client.post(...), max_attempts=3)

    Args:
        operation: Zero-arg coroutine function performing one attempt
        max_attempts: Total attempts, including the first one
        backoff_ms: Delay unit; the wait after attempt N is N * backoff_ms
        op_logger: Optional OperationLogger receiving one line per retry
        label: Name used in log lines
        sleep: Awaitable sleep (injectable for tests)

    Returns:
        Result of the first successful attempt

    Raises:
        Exception: The last attempt's exception once attempts are exhausted
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    last_error: Optional[Exception] = None
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            last_error = e
            logger.warning(f"🔁 [Retry] {label} attempt {attempt}/{max_attempts} failed: {e}")
            if op_logger is not None:
                op_logger.log("Retry Attempt", label=label, attempt=attempt, error=str(e))

            if attempt < max_attempts:
                await sleep(attempt * backoff_ms / 1000.0)

    raise last_error
