"""
Core type definitions for fanout.

Aliases shared by the dispatchers, fetchers and unpack helpers.
"""

from __future__ import annotations

import typing
from collections.abc import Callable

from kungfu import LazyCoroResult, Result

# ============================================================================
# Type aliases
# ============================================================================

# Outcome = result of one dispatched operation (Ok = success, Error = failure)
type Outcome[T, E] = Result[T, E]

# Handler = function that turns one batch input into a lazy computation
type Handler[A, T, E] = Callable[[A], LazyCoroResult[T, E]]

# NoError = the dispatchers themselves never fail, only their tasks do
type NoError = typing.Never

__all__ = (
    "Outcome",
    "Handler",
    "NoError",
)
