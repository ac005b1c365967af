"""
HTTP dispatch
=============

The dispatchers applied to URLs: one GET per URL, body text as the payload.

    dispatch_sync(urls)           blocks the calling thread, join discipline
    dispatch_join(urls)           lazy, join discipline
    dispatch_async(urls)          lazy, channel discipline
    dispatch_join_w / _async_w    same, plus one log line per request

Without `client`, each call opens its own httpx.AsyncClient and closes it
before returning. A caller-supplied client is left open.
"""

from __future__ import annotations

import asyncio
import typing
from collections.abc import Awaitable, Callable, Sequence

import httpx
from kungfu import Error, LazyCoroResult, Ok, Result

from .._errors import Cancelled, FetchError
from .._helpers import merge_logs, wrap_lazy_coro_result_writer
from .._types import NoError, Outcome
from ..fetch import fetch_one, fetch_one_w
from ..policy import DispatchPolicy
from ..writer import LazyCoroResultWriter, Log, WriterResult
from .channel import drain_all, drain_allM
from .join import join_all, join_allM

type UrlOutcome = Outcome[str, FetchError | Cancelled]


async def _using_client[X](
    client: httpx.AsyncClient | None,
    body: Callable[[httpx.AsyncClient], Awaitable[X]],
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> X:
    if client is not None:
        return await body(client)
    async with httpx.AsyncClient(transport=transport) as owned:
        return await body(owned)


# ============================================================================
# Sugar for LazyCoroResult
# ============================================================================


def dispatch_join(
    urls: Sequence[str],
    *,
    client: httpx.AsyncClient | None = None,
    policy: DispatchPolicy | None = None,
    cancel: asyncio.Event | None = None,
) -> LazyCoroResult[list[UrlOutcome], NoError]:
    """GET every URL concurrently, wait for all, outcomes in URL order."""

    async def run() -> Result[list[UrlOutcome], NoError]:
        async def body(c: httpx.AsyncClient) -> Result[list[UrlOutcome], NoError]:
            return await join_all(urls, lambda url: fetch_one(c, url), policy=policy, cancel=cancel)

        return await _using_client(client, body)

    return LazyCoroResult(run)


def dispatch_async(
    urls: Sequence[str],
    *,
    client: httpx.AsyncClient | None = None,
    policy: DispatchPolicy | None = None,
    cancel: asyncio.Event | None = None,
) -> LazyCoroResult[list[UrlOutcome], NoError]:
    """GET every URL concurrently, collect through the channel, outcomes in URL order."""

    async def run() -> Result[list[UrlOutcome], NoError]:
        async def body(c: httpx.AsyncClient) -> Result[list[UrlOutcome], NoError]:
            return await drain_all(urls, lambda url: fetch_one(c, url), policy=policy, cancel=cancel)

        return await _using_client(client, body)

    return LazyCoroResult(run)


def dispatch_sync(
    urls: Sequence[str],
    *,
    policy: DispatchPolicy | None = None,
    cancel: asyncio.Event | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[UrlOutcome]:
    """
    Blocking dispatch_join: returns once every request has finished.

    Runs its own event loop, so it must not be called from a coroutine
    (asyncio.run raises RuntimeError there); await dispatch_join instead.
    `transport` is handed to the client opened for this call.
    """
    if not urls:
        return []

    async def run() -> Result[list[UrlOutcome], NoError]:
        async def body(c: httpx.AsyncClient) -> Result[list[UrlOutcome], NoError]:
            return await join_all(urls, lambda url: fetch_one(c, url), policy=policy, cancel=cancel)

        return await _using_client(None, body, transport=transport)

    return asyncio.run(run()).unwrap()


# ============================================================================
# Sugar for LazyCoroResultWriter
# ============================================================================


def _cancelled_w(url: str) -> WriterResult[str, FetchError | Cancelled, Log[str]]:
    return WriterResult(Error(Cancelled(url)), Log.of(f"GET {url} cancelled"))


def _combine_w(
    raws: list[WriterResult[str, FetchError | Cancelled, Log[str]]],
) -> WriterResult[list[UrlOutcome], NoError, Log[str]]:
    return WriterResult(Ok([wr.result for wr in raws]), merge_logs(wr.log for wr in raws))


type _Dispatcher = Callable[..., typing.Awaitable[WriterResult[list[UrlOutcome], NoError, Log[str]]]]


def _dispatch_w(
    dispatcher: _Dispatcher,
    urls: Sequence[str],
    *,
    client: httpx.AsyncClient | None,
    policy: DispatchPolicy | None,
    cancel: asyncio.Event | None,
) -> LazyCoroResultWriter[list[UrlOutcome], NoError, str]:
    async def run() -> WriterResult[list[UrlOutcome], NoError, Log[str]]:
        async def body(c: httpx.AsyncClient) -> WriterResult[list[UrlOutcome], NoError, Log[str]]:
            return await dispatcher(
                urls,
                lambda url: fetch_one_w(c, url),
                on_cancel=_cancelled_w,
                combine=_combine_w,
                wrap=wrap_lazy_coro_result_writer,
                policy=policy,
                cancel=cancel,
            )

        return await _using_client(client, body)

    return LazyCoroResultWriter(run)


def dispatch_join_w(
    urls: Sequence[str],
    *,
    client: httpx.AsyncClient | None = None,
    policy: DispatchPolicy | None = None,
    cancel: asyncio.Event | None = None,
) -> LazyCoroResultWriter[list[UrlOutcome], NoError, str]:
    """dispatch_join with one log line per request, in URL order."""
    return _dispatch_w(join_allM, urls, client=client, policy=policy, cancel=cancel)


def dispatch_async_w(
    urls: Sequence[str],
    *,
    client: httpx.AsyncClient | None = None,
    policy: DispatchPolicy | None = None,
    cancel: asyncio.Event | None = None,
) -> LazyCoroResultWriter[list[UrlOutcome], NoError, str]:
    """dispatch_async with one log line per request, in URL order."""
    return _dispatch_w(drain_allM, urls, client=client, policy=policy, cancel=cancel)


__all__ = (
    "UrlOutcome",
    "dispatch_async",
    "dispatch_async_w",
    "dispatch_join",
    "dispatch_join_w",
    "dispatch_sync",
)
