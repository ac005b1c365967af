"""Internal helpers shared by the dispatchers.

Not part of the public API but usable when wiring a custom monad into
join_allM / drain_allM."""

from __future__ import annotations

import asyncio
import typing
from collections.abc import Awaitable, Callable, Coroutine, Iterable

from .policy import DispatchPolicy
from .writer import LazyCoroResultWriter, Log, WriterResult


def wrap_lazy_coro_result_writer[T, E, W](
    fn: Callable[[], Coroutine[typing.Any, typing.Any, WriterResult[T, E, Log[W]]]]
) -> LazyCoroResultWriter[T, E, W]:
    """Standard wrap function for the LazyCoroResultWriter sugar."""
    return LazyCoroResultWriter(fn)


def merge_logs[W](logs: Iterable[Log[W]]) -> Log[W]:
    """
    Merge multiple logs into one using monoidal combine.

    Usage:
        merged = merge_logs(wr.log for wr in writer_results)
    """
    result = Log[W]()
    for log in logs:
        result = result.combine(log)
    return result


def guarded[A, Raw](
    item: A,
    thunk: Callable[[], Awaitable[Raw]],
    *,
    limiter: asyncio.Semaphore,
    cancel: asyncio.Event | None,
    on_cancel: Callable[[A], Raw],
) -> Callable[[], Coroutine[typing.Any, typing.Any, Raw]]:
    """
    Run `thunk` under the batch limiter unless the cancel signal is set.

    The signal is checked after the limiter is acquired, so queued tasks
    observe a cancel raised while they waited.
    """

    async def run() -> Raw:
        async with limiter:
            if cancel is not None and cancel.is_set():
                return on_cancel(item)
            return await thunk()

    return run


def collect_slots[Raw](slots: list[Raw | None], owner: str) -> list[Raw]:
    """Return the filled slots, in input order."""
    filled: list[Raw] = []
    for raw in slots:
        if raw is None:
            raise RuntimeError(f"{owner}(): internal error (missing result)")
        filled.append(raw)
    return filled


def resolve_policy(policy: DispatchPolicy | None) -> DispatchPolicy:
    return policy if policy is not None else DispatchPolicy()


__all__ = (
    "wrap_lazy_coro_result_writer",
    "merge_logs",
    "guarded",
    "collect_slots",
    "resolve_policy",
)
