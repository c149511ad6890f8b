"""
Gatekeep - Async Utilities
==========================

Background and delayed task helpers with proper error logging.

Usage:
    from src.utils.async_utils import TaskScheduler

    scheduler = TaskScheduler()

    # Run later, keep a handle:
    pending = scheduler.schedule(10, lambda: message.delete(), "Delete Confirmation")
    pending.cancel()

    # Run later and wait for the result:
    await scheduler.schedule(5, lambda: member.kick(), "Kick").wait()
"""

import asyncio
from typing import Any, Awaitable, Callable, Coroutine, Optional, Set

from src.core.logger import logger


SleepFunc = Callable[[float], Awaitable[Any]]


# =============================================================================
# Safe Single Operations
# =============================================================================

async def safe_async_operation(
    name: str,
    coro: Coroutine[Any, Any, Any],
    default: Any = None,
) -> Any:
    """
    Run a single best-effort async operation.

    Failures are logged at warning level and replaced by ``default``.

    Args:
        name: Name of the operation for logging.
        coro: The coroutine to run.
        default: Value to return if the operation fails.

    Returns:
        Result of the coroutine, or default if it fails.
    """
    try:
        return await coro
    except Exception as e:
        logger.warning("Async Operation Failed", [
            ("Operation", name),
            ("Error Type", type(e).__name__),
            ("Error", str(e)[:100]),
        ])
        return default


# =============================================================================
# Delayed Tasks
# =============================================================================

class DelayedTask:
    """
    Handle for an action scheduled to run after a delay.

    Attributes:
        name: Name used in logs.
        delay: Delay in seconds before the action runs.
        task: Underlying asyncio task.
    """

    def __init__(self, task: asyncio.Task, delay: float, name: str) -> None:
        self.task = task
        self.delay = delay
        self.name = name

    @property
    def done(self) -> bool:
        return self.task.done()

    @property
    def cancelled(self) -> bool:
        return self.task.cancelled()

    def cancel(self) -> bool:
        """
        Cancel the action if it has not run yet.

        Returns:
            True if a cancellation was requested.
        """
        if self.task.done():
            return False
        logger.debug(f"Delayed task cancelled: {self.name}")
        return self.task.cancel()

    async def wait(self) -> Any:
        """
        Wait for the action and return its result.

        The action is shielded: cancelling the waiter leaves it scheduled.

        Raises:
            Whatever the action raised, or CancelledError if the waiter
            or the action itself was cancelled.
        """
        return await asyncio.shield(self.task)


class TaskScheduler:
    """
    Runs actions after a delay without blocking the caller.

    DESIGN:
        Each scheduled action is its own asyncio task, so a delay only
        suspends the event that scheduled it. Pending tasks are referenced
        until they finish. The sleep function is injectable so tests can
        skip real waiting.
    """

    def __init__(self, sleep: Optional[SleepFunc] = None) -> None:
        self._sleep: SleepFunc = sleep or asyncio.sleep
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of scheduled actions that have not finished."""
        return len(self._pending)

    def schedule(
        self,
        delay: float,
        action: Callable[[], Awaitable[Any]],
        name: str = "Delayed Task",
    ) -> DelayedTask:
        """
        Run ``action()`` after ``delay`` seconds.

        Args:
            delay: Seconds to wait before running the action.
            action: Zero-argument callable returning an awaitable.
            name: Name used in logs and as the asyncio task name.

        Returns:
            A DelayedTask handle.
        """
        async def run() -> Any:
            await self._sleep(delay)
            return await action()

        task = asyncio.create_task(run(), name=name)
        self._pending.add(task)
        task.add_done_callback(self._on_done)

        logger.debug(f"Delayed task scheduled: {name} in {delay}s")
        return DelayedTask(task, delay, name)

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Delayed task {task.get_name()} raised {type(task.exception()).__name__}")

    async def drain(self, timeout: Optional[float] = None) -> int:
        """
        Wait for pending actions to finish, including ones they schedule.

        Nothing is cancelled: actions still running when ``timeout`` runs
        out are left scheduled.

        Args:
            timeout: Maximum seconds to wait, or None to wait for all.

        Returns:
            Number of actions still pending.
        """
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout

        while self._pending:
            remaining = None if deadline is None else deadline - loop.time()
            if remaining is not None and remaining <= 0:
                break
            await asyncio.wait(list(self._pending), timeout=remaining)

        return len(self._pending)


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "safe_async_operation",
    "DelayedTask",
    "TaskScheduler",
]
