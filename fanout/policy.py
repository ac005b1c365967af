"""Dispatch configuration."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DispatchPolicy:
    """
    How many tasks of one batch may run their handler at the same time.

    concurrency=None means unbounded: every input starts immediately.
    """

    concurrency: int | None = None

    def __post_init__(self) -> None:
        if self.concurrency is not None and self.concurrency < 1:
            raise ValueError("DispatchPolicy.concurrency must be >= 1")

    def limiter(self, size: int) -> asyncio.Semaphore:
        """Semaphore for a batch of `size` inputs."""
        if self.concurrency is None:
            return asyncio.Semaphore(max(size, 1))
        return asyncio.Semaphore(self.concurrency)


__all__ = ("DispatchPolicy",)
