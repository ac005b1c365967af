"""Shared fixtures: an in-process HTTP server built on httpx.MockTransport."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field

import httpx
import pytest
from kungfu import Error, Ok, Result


class CountingStream(httpx.AsyncByteStream):
    """Response body that records how many times it was closed."""

    def __init__(self, chunks: Sequence[bytes], *, fail_at: int | None = None) -> None:
        self.chunks = list(chunks)
        self.fail_at = fail_at
        self.closed = 0

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for index, chunk in enumerate(self.chunks):
            if index == self.fail_at:
                raise httpx.ReadError("connection reset by peer")
            yield chunk

    async def aclose(self) -> None:
        self.closed += 1


@dataclass(slots=True)
class Endpoint:
    body: str = ""
    status: int = 200
    delay: float = 0.0
    refuse: bool = False
    stream: CountingStream | None = None


@dataclass(slots=True)
class FakeServer:
    endpoints: dict[str, Endpoint] = field(default_factory=dict)
    hits: list[str] = field(default_factory=list)
    completed: list[str] = field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0

    def route(self, path: str, **options: object) -> str:
        url = f"http://svc.test/{path}"
        self.endpoints[url] = Endpoint(**options)  # type: ignore[arg-type]
        return url

    async def handle(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.hits.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            endpoint = self.endpoints.get(url)
            if endpoint is None:
                raise httpx.ConnectError("name or service not known", request=request)
            await asyncio.sleep(endpoint.delay)
            if endpoint.refuse:
                raise httpx.ConnectError("connection refused", request=request)
            if endpoint.stream is not None:
                return httpx.Response(endpoint.status, stream=endpoint.stream)
            return httpx.Response(endpoint.status, text=endpoint.body)
        finally:
            self.in_flight -= 1
            self.completed.append(url)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
async def client(server: FakeServer) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=server.transport()) as c:
        yield c


def tag(outcome: Result[object, object]) -> tuple[str, object]:
    """Comparable view of an outcome: ("ok", value) or ("error", error)."""
    match outcome:
        case Ok(value):
            return ("ok", value)
        case Error(err):
            return ("error", err)
    raise AssertionError(f"not an outcome: {outcome!r}")
