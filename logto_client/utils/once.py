"""Single-flight memoization for coroutine functions."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class AsyncOnce(Generic[T]):
    """Run a coroutine function at most once and share its result.

    All callers await one shared task, so concurrent first callers trigger a
    single factory call and see the same value or the same error. A failed
    task is dropped once it settles; only a later call tries again.
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]):
        self._factory = factory
        self._task: asyncio.Future[T] | None = None

    async def __call__(self) -> T:
        if self._task is None:
            task = asyncio.ensure_future(self._factory())
            task.add_done_callback(self._on_done)
            self._task = task

        # Shield so one cancelled caller does not cancel the shared call
        return await asyncio.shield(self._task)

    def _on_done(self, task: asyncio.Future[T]) -> None:
        # Runs before any waiter resumes, so a retry after a failure starts fresh
        if task.cancelled() or task.exception() is not None:
            if self._task is task:
                self._task = None
