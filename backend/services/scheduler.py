"""Deferred task scheduling on the asyncio event loop."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


class ScheduledTask:
    """Handle for one deferred call."""

    def __init__(self, name: str, task: "asyncio.Task"):
        self.name = name
        self._task = task

    @property
    def done(self) -> bool:
        return self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._task.cancelled()

    def cancel(self) -> bool:
        """Cancel the call if it has not run yet."""
        return self._task.cancel()

    async def wait(self) -> None:
        """Wait until the call has finished or been cancelled."""
        try:
            await self._task
        except asyncio.CancelledError:
            pass


class TaskScheduler:
    """
    Runs coroutine functions after a fixed delay.

    The sleep function is injectable so tests can drive a virtual clock
    instead of waiting on wall-clock time.
    """

    def __init__(self, sleep: Optional[SleepFunc] = None):
        self._sleep = sleep or asyncio.sleep
        self._pending: Set[ScheduledTask] = set()

    @property
    def pending(self) -> int:
        """Number of scheduled calls that have not finished yet."""
        return len(self._pending)

    def schedule(
        self,
        delay: float,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        name: str = "deferred"
    ) -> ScheduledTask:
        """
        Run `func(*args)` once, `delay` seconds from now.

        Arguments are bound at schedule time. Must be called from a running event loop.
        """
        task = asyncio.get_running_loop().create_task(self._run(delay, func, args, name))
        handle = ScheduledTask(name, task)
        self._pending.add(handle)
        task.add_done_callback(lambda _: self._pending.discard(handle))
        logger.debug(f"Scheduled {name} in {delay}s")
        return handle

    async def _run(self, delay: float, func: Callable[..., Awaitable[Any]], args: tuple, name: str) -> None:
        await self._sleep(delay)
        try:
            await func(*args)
        except Exception as e:
            # Nothing awaits these tasks; log instead of losing the error
            logger.error(f"Deferred task {name} failed: {e}", exc_info=True)

    async def shutdown(self) -> None:
        """Cancel every pending call and wait for them to unwind."""
        handles = list(self._pending)
        for handle in handles:
            handle.cancel()
        for handle in handles:
            await handle.wait()
        if handles:
            logger.info(
                f"Cancelled {len(handles)} pending deferred tasks: "
                f"{', '.join(sorted(h.name for h in handles))}"
            )
