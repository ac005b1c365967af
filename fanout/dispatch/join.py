"""
Join dispatch
=============

Fan-out / fan-in with an explicit join: every task writes its outcome into
slots[index], the orchestrator waits for all tasks, then reads the slots.
"""

from __future__ import annotations

import asyncio
import typing
from collections.abc import Callable, Coroutine, Sequence

from kungfu import Error, LazyCoroResult, Ok, Result

from .._errors import Cancelled
from .._helpers import collect_slots, guarded, merge_logs, resolve_policy, wrap_lazy_coro_result_writer
from .._types import Handler, NoError
from ..policy import DispatchPolicy
from ..writer import LazyCoroResultWriter, Log, WriterResult


# ============================================================================
# Generic combinator (extract + wrap pattern)
# ============================================================================


def join_allM[M, A, Raw, RawOut](
    items: Sequence[A],
    handler: Callable[[A], Callable[[], Coroutine[typing.Any, typing.Any, Raw]]],
    *,
    on_cancel: Callable[[A], Raw],
    combine: Callable[[list[Raw]], RawOut],
    wrap: Callable[[Callable[[], Coroutine[typing.Any, typing.Any, RawOut]]], M],
    policy: DispatchPolicy | None = None,
    cancel: asyncio.Event | None = None,
) -> M:
    """
    Generic join dispatcher.

    Args:
        items: Batch inputs, one task each
        handler: Builds the computation for one input
        on_cancel: Raw outcome reported for an input skipped by `cancel`
        combine: Builds RawOut from all raw outcomes, in input order
        wrap: Constructor to wrap thunk back into monad M
        policy: Concurrency limit (unbounded by default)
        cancel: Once set, tasks that have not started report on_cancel(item)

    A handler that raises cancels the other tasks; its exception is re-raised
    once every task has finished.
    """

    async def run() -> RawOut:
        if not items:
            return combine([])

        limiter = resolve_policy(policy).limiter(len(items))
        slots: list[Raw | None] = [None] * len(items)

        async def task(index: int, item: A) -> None:
            run_one = guarded(item, handler(item), limiter=limiter, cancel=cancel, on_cancel=on_cancel)
            slots[index] = await run_one()

        try:
            async with asyncio.TaskGroup() as group:
                for i, item in enumerate(items):
                    group.create_task(task(i, item))
        except ExceptionGroup as failed:
            # TaskGroup has cancelled and awaited the other tasks by now.
            raise failed.exceptions[0] from failed

        return combine(collect_slots(slots, "join_allM"))

    return wrap(run)


# ============================================================================
# Sugar for LazyCoroResult
# ============================================================================


def join_all[A, T, E](
    items: Sequence[A],
    handler: Handler[A, T, E],
    *,
    policy: DispatchPolicy | None = None,
    cancel: asyncio.Event | None = None,
) -> LazyCoroResult[list[Result[T, E | Cancelled]], NoError]:
    """
    Run handler for every item, wait for all, collect Ok and Error both.
    Never fails - outcomes[i] belongs to items[i].
    """
    def on_cancel(item: A) -> Result[T, E | Cancelled]:
        return Error(Cancelled(item))

    def combine(raws: list[Result[T, E | Cancelled]]) -> Result[list[Result[T, E | Cancelled]], NoError]:
        return Ok(raws)

    return join_allM(
        items,
        handler,
        on_cancel=on_cancel,
        combine=combine,
        wrap=LazyCoroResult,
        policy=policy,
        cancel=cancel,
    )


# ============================================================================
# Sugar for LazyCoroResultWriter
# ============================================================================


def join_all_w[A, T, E, W](
    items: Sequence[A],
    handler: Callable[[A], LazyCoroResultWriter[T, E, W]],
    *,
    policy: DispatchPolicy | None = None,
    cancel: asyncio.Event | None = None,
) -> LazyCoroResultWriter[list[Result[T, E | Cancelled]], NoError, W]:
    """
    Like join_all, logs of all tasks merged in input order.
    Cancelled tasks contribute an empty log.
    """
    def on_cancel(item: A) -> WriterResult[T, E | Cancelled, Log[W]]:
        return WriterResult(Error(Cancelled(item)), Log[W]())

    def combine(
        raws: list[WriterResult[T, E | Cancelled, Log[W]]]
    ) -> WriterResult[list[Result[T, E | Cancelled]], NoError, Log[W]]:
        return WriterResult(Ok([wr.result for wr in raws]), merge_logs(wr.log for wr in raws))

    return join_allM(
        items,
        handler,
        on_cancel=on_cancel,
        combine=combine,
        wrap=wrap_lazy_coro_result_writer,
        policy=policy,
        cancel=cancel,
    )


__all__ = ("join_all", "join_all_w", "join_allM")
