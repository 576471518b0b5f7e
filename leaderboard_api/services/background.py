"""Detached background work.

Cache writes must not hold up the client-visible response, so the score
service hands them to an executor and moves on. Nothing is reported back to
the caller: failures are logged and dropped, never retried.

- AsyncioTaskExecutor: production, one asyncio task per job.
- InlineExecutor: runs the job before returning (tests, one-off scripts).
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import logging
from typing import Any

logger = logging.getLogger("uvicorn.error")


class AsyncioTaskExecutor:
    """Fire-and-forget executor on the running event loop."""

    def __init__(self) -> None:
        # The loop only keeps weak references to tasks.
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def schedule(
        self,
        fn: Callable[..., Awaitable[Any]],
        *args: Any,
        name: str | None = None,
    ) -> None:
        task = asyncio.create_task(fn(*args), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"[background] task {task.get_name()} cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"[background] task {task.get_name()} failed",
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    async def aclose(self, grace: float = 5.0) -> None:
        """Give in-flight tasks `grace` seconds, then cancel what is left."""
        if not self._tasks:
            return

        pending = set(self._tasks)
        logger.info(f"[background] waiting for {len(pending)} task(s)")
        _, still_running = await asyncio.wait(pending, timeout=grace)
        for task in still_running:
            task.cancel()
        if still_running:
            logger.warning(f"[background] cancelled {len(still_running)} task(s) on shutdown")
            await asyncio.gather(*still_running, return_exceptions=True)


class InlineExecutor:
    """Runs each job to completion inside schedule().

    Failures are logged and swallowed, same as the asyncio executor, so the
    caller's result does not change when swapping executors.
    """

    async def schedule(
        self,
        fn: Callable[..., Awaitable[Any]],
        *args: Any,
        name: str | None = None,
    ) -> None:
        try:
            await fn(*args)
        except Exception:
            logger.exception(f"[background] task {name or getattr(fn, '__name__', fn)} failed")
