"""
Fetch
=====

One HTTP GET turned into a Result instead of an exception.

- no response (connect, DNS, bad URL) -> Error(TransportError), nothing else runs
- response obtained, body read fails  -> Error(ReadError)
- body read completely                -> Ok(Fetched), whatever the status code

The response is closed exactly once on every path after it is obtained.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from kungfu import Error, LazyCoroResult, Ok, Result

from ._errors import FetchError, ReadError, TransportError
from .writer import LazyCoroResultWriter, Log, WriterResult


@dataclass(frozen=True, slots=True)
class Fetched:
    """Body of a completed GET."""

    url: str
    status_code: int
    text: str
    size: int


async def fetch(client: httpx.AsyncClient, url: str) -> Result[Fetched, FetchError]:
    """GET `url` and read the whole body into memory."""
    try:
        request = client.build_request("GET", url)
        response = await client.send(request, stream=True)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        return Error(TransportError(url=url, message=_describe(exc)))

    try:
        await response.aread()
    except httpx.HTTPError as exc:
        return Error(ReadError(url=url, message=_describe(exc)))
    finally:
        await response.aclose()

    return Ok(
        Fetched(
            url=url,
            status_code=response.status_code,
            text=response.text,
            size=len(response.content),
        )
    )


async def fetch_text(client: httpx.AsyncClient, url: str) -> Result[str, FetchError]:
    """GET `url`, keep only the decoded body."""
    result = await fetch(client, url)
    return result.map(lambda fetched: fetched.text)


def fetch_one(client: httpx.AsyncClient, url: str) -> LazyCoroResult[str, FetchError]:
    """
    Lazy fetch_text: nothing is sent until the computation is awaited.

    Example:
        async with httpx.AsyncClient() as client:
            match await fetch_one(client, "https://example.org"):
                case Ok(body): ...
                case Error(err): ...
    """

    async def run() -> Result[str, FetchError]:
        return await fetch_text(client, url)

    return LazyCoroResult(run)


def fetch_one_w(
    client: httpx.AsyncClient,
    url: str,
) -> LazyCoroResultWriter[str, FetchError, str]:
    """Lazy fetch_text that also writes one log line describing the request."""

    async def run() -> WriterResult[str, FetchError, Log[str]]:
        result = await fetch(client, url)
        match result:
            case Ok(fetched):
                line = f"GET {url} -> {fetched.status_code} ({fetched.size} bytes)"
            case Error(TransportError() as err):
                line = f"GET {url} transport error: {err.message}"
            case Error(err):
                line = f"GET {url} read error: {err.message}"
        return WriterResult(result.map(lambda fetched: fetched.text), Log.of(line))

    return LazyCoroResultWriter(run)


def _describe(exc: Exception) -> str:
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


__all__ = ("Fetched", "fetch", "fetch_one", "fetch_one_w", "fetch_text")
