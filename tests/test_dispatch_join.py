from __future__ import annotations

import asyncio

import httpx
import pytest
from kungfu import Error, LazyCoroResult, Ok, Result

from fanout import (
    Cancelled,
    DispatchPolicy,
    TransportError,
    dispatch_join,
    dispatch_join_w,
    dispatch_sync,
    join_all,
)

from .conftest import FakeServer, tag


async def test_outcomes_follow_input_order_not_completion_order(
    server: FakeServer, client: httpx.AsyncClient
) -> None:
    a = server.route("a", body="A", delay=0.06)
    b = server.route("b", refuse=True, delay=0.03)
    c = server.route("c", body="C")

    outcomes = (await dispatch_join([a, b, c], client=client)).unwrap()

    assert server.completed == [c, b, a]
    assert len(outcomes) == 3
    assert tag(outcomes[0]) == ("ok", "A")
    match outcomes[1]:
        case Error(TransportError(url=url)):
            assert url == b
        case other:
            raise AssertionError(f"expected TransportError, got {other!r}")
    assert tag(outcomes[2]) == ("ok", "C")


async def test_empty_batch_returns_immediately(server: FakeServer, client: httpx.AsyncClient) -> None:
    assert (await dispatch_join([], client=client)).unwrap() == []
    assert server.hits == []


async def test_one_request_per_input(server: FakeServer, client: httpx.AsyncClient) -> None:
    urls = [server.route("same", body="x")] * 3

    outcomes = (await dispatch_join(urls, client=client)).unwrap()

    assert [tag(o) for o in outcomes] == [("ok", "x")] * 3
    assert server.hits == urls


async def test_concurrency_limit(server: FakeServer, client: httpx.AsyncClient) -> None:
    urls = [server.route(f"slow{i}", body=str(i), delay=0.01) for i in range(6)]

    outcomes = (await dispatch_join(urls, client=client, policy=DispatchPolicy(concurrency=2))).unwrap()

    assert [tag(o) for o in outcomes] == [("ok", str(i)) for i in range(6)]
    assert server.max_in_flight <= 2


async def test_unbounded_by_default(server: FakeServer, client: httpx.AsyncClient) -> None:
    urls = [server.route(f"slow{i}", body=str(i), delay=0.02) for i in range(5)]

    await dispatch_join(urls, client=client)

    assert server.max_in_flight == 5


async def test_cancel_set_before_dispatch_skips_every_request(
    server: FakeServer, client: httpx.AsyncClient
) -> None:
    urls = [server.route("a", body="A"), server.route("b", body="B")]
    cancel = asyncio.Event()
    cancel.set()

    outcomes = (await dispatch_join(urls, client=client, cancel=cancel)).unwrap()

    assert [tag(o) for o in outcomes] == [("error", Cancelled(urls[0])), ("error", Cancelled(urls[1]))]
    assert server.hits == []


async def test_cancel_reaches_queued_items() -> None:
    cancel = asyncio.Event()
    started: list[int] = []

    def handler(n: int) -> LazyCoroResult[int, str]:
        async def run() -> Result[int, str]:
            started.append(n)
            cancel.set()
            return Ok(n * 10)

        return LazyCoroResult(run)

    outcomes = (
        await join_all([1, 2, 3], handler, policy=DispatchPolicy(concurrency=1), cancel=cancel)
    ).unwrap()

    assert started == [1]
    assert [tag(o) for o in outcomes] == [("ok", 10), ("error", Cancelled(2)), ("error", Cancelled(3))]


async def test_join_all_generic_handler_keeps_errors_as_values() -> None:
    def handler(n: int) -> LazyCoroResult[int, str]:
        async def run() -> Result[int, str]:
            await asyncio.sleep(0.01 * (3 - n))
            return Ok(n) if n % 2 else Error(f"even: {n}")

        return LazyCoroResult(run)

    outcomes = (await join_all([1, 2, 3], handler)).unwrap()

    assert [tag(o) for o in outcomes] == [("ok", 1), ("error", "even: 2"), ("ok", 3)]


async def test_dispatch_join_w_merges_logs_in_input_order(
    server: FakeServer, client: httpx.AsyncClient
) -> None:
    a = server.route("a", body="AA", delay=0.03)
    b = server.route("b", refuse=True)

    wr = await dispatch_join_w([a, b], client=client)

    outcomes = wr.result.unwrap()
    assert tag(outcomes[0]) == ("ok", "AA")
    assert isinstance(outcomes[1], Error)
    assert len(wr.log) == 2
    assert wr.log[0] == f"GET {a} -> 200 (2 bytes)"
    assert wr.log[1].startswith(f"GET {b} transport error")


async def test_dispatch_join_w_logs_cancelled_requests(
    server: FakeServer, client: httpx.AsyncClient
) -> None:
    url = server.route("a", body="A")
    cancel = asyncio.Event()
    cancel.set()

    wr = await dispatch_join_w([url], client=client, cancel=cancel)

    assert list(wr.log) == [f"GET {url} cancelled"]


def test_dispatch_sync_blocks_until_all_done(server: FakeServer) -> None:
    a = server.route("a", body="A", delay=0.05)
    b = server.route("b", refuse=True)
    c = server.route("c", body="C", delay=0.01)

    outcomes = dispatch_sync([a, b, c], transport=server.transport())

    assert sorted(server.completed) == sorted([a, b, c])
    assert tag(outcomes[0]) == ("ok", "A")
    assert isinstance(outcomes[1], Error)
    assert tag(outcomes[2]) == ("ok", "C")


def test_dispatch_sync_empty_batch(server: FakeServer) -> None:
    assert dispatch_sync([], transport=server.transport()) == []
    assert server.hits == []


async def test_handler_exception_stops_siblings_before_returning() -> None:
    finished: list[int] = []

    def handler(n: int) -> LazyCoroResult[int, str]:
        async def run() -> Result[int, str]:
            if n == 0:
                raise ValueError("handler bug")
            await asyncio.sleep(0.05)
            finished.append(n)
            return Ok(n)

        return LazyCoroResult(run)

    tasks_before = len(asyncio.all_tasks())

    with pytest.raises(ValueError, match="handler bug"):
        await join_all([0, 1, 2], handler)

    assert len(asyncio.all_tasks()) == tasks_before
    await asyncio.sleep(0.1)
    assert finished == []
