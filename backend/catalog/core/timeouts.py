"""
Deadline helper for store and cache operations.

Timeouts cancel the pending operation and surface as ``asyncio.TimeoutError``;
callers translate that into their own timeout error. Nothing is retried here.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


async def run_with_timeout(awaitable: Awaitable[T], timeout: Optional[float]) -> T:
    """Await ``awaitable``, bounded by ``timeout`` seconds when given."""
    if timeout is None:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout=timeout)


def effective_timeout(
    operation_timeout: Optional[float], caller_timeout: Optional[float]
) -> Optional[float]:
    """The tighter of an adapter's own limit and the caller's deadline."""
    limits = [t for t in (operation_timeout, caller_timeout) if t is not None]
    return min(limits) if limits else None
