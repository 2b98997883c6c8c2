"""Async helpers for calling the blocking sync pipeline from MCP handlers."""

import asyncio
from typing import Any, Callable, TypeVar

T = TypeVar("T")


async def run_sync(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """Run a blocking function in a worker thread.

    A sync pass is strictly sequential and sleeps during backoff, so it
    must never run on the event loop itself.

    Example:
        result = await run_sync(engine.sync, content)
    """
    return await asyncio.to_thread(func, *args, **kwargs)
