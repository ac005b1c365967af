from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FetchError(Exception):
    """One GET did not produce a body."""

    url: str
    message: str

    def __str__(self) -> str:
        return f"{self.url}: {self.message}"


@dataclass(frozen=True, slots=True)
class TransportError(FetchError):
    """No response was obtained (connect, DNS, bad URL)."""


@dataclass(frozen=True, slots=True)
class ReadError(FetchError):
    """A response was obtained but its body could not be read."""


@dataclass(frozen=True, slots=True)
class Cancelled(Exception):
    """Task skipped because the batch cancel signal was set."""

    item: object

    def __str__(self) -> str:
        return f"cancelled before start: {self.item!r}"


__all__ = ("Cancelled", "FetchError", "ReadError", "TransportError")
