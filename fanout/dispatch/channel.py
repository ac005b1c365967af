"""
Channel dispatch
================

Fan-out / fan-in without a join. Tasks are started and left running; each
posts exactly one (index, outcome) message to a queue sized to the batch.
The orchestrator drains len(items) messages and files them by index.
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


class _Crashed:
    """Channel payload for a handler that raised instead of returning."""

    __slots__ = ("exc",)

    def __init__(self, exc: BaseException) -> None:
        self.exc = exc


# ============================================================================
# Generic combinator (extract + wrap pattern)
# ============================================================================


def drain_allM[M, A, Raw, RawOut](
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
    Generic channel dispatcher.

    Same contract as join_allM. A handler that raises is not turned into an
    outcome: its exception (CancelledError included) still reaches the channel
    and is re-raised here after the other tasks are cancelled.
    """

    async def run() -> RawOut:
        if not items:
            return combine([])

        limiter = resolve_policy(policy).limiter(len(items))
        channel: asyncio.Queue[tuple[int, Raw | _Crashed]] = asyncio.Queue(maxsize=len(items))

        async def task(index: int, item: A) -> None:
            run_one = guarded(item, handler(item), limiter=limiter, cancel=cancel, on_cancel=on_cancel)
            message: Raw | _Crashed
            try:
                message = await run_one()
            except Exception as exc:
                message = _Crashed(exc)
            except asyncio.CancelledError as exc:
                channel.put_nowait((index, _Crashed(exc)))
                raise
            # Queue holds one message per task, never blocks.
            channel.put_nowait((index, message))

        tasks = [asyncio.create_task(task(i, item)) for i, item in enumerate(items)]
        slots: list[Raw | None] = [None] * len(items)
        try:
            for _ in range(len(items)):
                index, message = await channel.get()
                if isinstance(message, _Crashed):
                    raise message.exc
                slots[index] = message
        finally:
            for t in tasks:
                if not t.done():
                    t.cancel()

        return combine(collect_slots(slots, "drain_allM"))

    return wrap(run)


# ============================================================================
# Sugar for LazyCoroResult
# ============================================================================


def drain_all[A, T, E](
    items: Sequence[A],
    handler: Handler[A, T, E],
    *,
    policy: DispatchPolicy | None = None,
    cancel: asyncio.Event | None = None,
) -> LazyCoroResult[list[Result[T, E | Cancelled]], NoError]:
    """
    Run handler for every item, gather outcomes from the channel.
    Never fails - outcomes[i] belongs to items[i].
    """
    def on_cancel(item: A) -> Result[T, E | Cancelled]:
        return Error(Cancelled(item))

    def combine(raws: list[Result[T, E | Cancelled]]) -> Result[list[Result[T, E | Cancelled]], NoError]:
        return Ok(raws)

    return drain_allM(
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


def drain_all_w[A, T, E, W](
    items: Sequence[A],
    handler: Callable[[A], LazyCoroResultWriter[T, E, W]],
    *,
    policy: DispatchPolicy | None = None,
    cancel: asyncio.Event | None = None,
) -> LazyCoroResultWriter[list[Result[T, E | Cancelled]], NoError, W]:
    """
    Like drain_all, logs merged in input order (not arrival order).
    """
    def on_cancel(item: A) -> WriterResult[T, E | Cancelled, Log[W]]:
        return WriterResult(Error(Cancelled(item)), Log[W]())

    def combine(
        raws: list[WriterResult[T, E | Cancelled, Log[W]]]
    ) -> WriterResult[list[Result[T, E | Cancelled]], NoError, Log[W]]:
        return WriterResult(Ok([wr.result for wr in raws]), merge_logs(wr.log for wr in raws))

    return drain_allM(
        items,
        handler,
        on_cancel=on_cancel,
        combine=combine,
        wrap=wrap_lazy_coro_result_writer,
        policy=policy,
        cancel=cancel,
    )


__all__ = ("drain_all", "drain_all_w", "drain_allM")
