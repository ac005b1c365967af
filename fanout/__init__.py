"""
Fan-out / fan-in dispatch for independent async operations.

Run a batch of operations concurrently (HTTP GETs being the usual case) and
get one kungfu Result per input back, in input order. Failures are values:
one failed task never fails the batch.

Architecture:
- Generic dispatchers (*M functions) work with any monad via extract + wrap pattern
- Sugar functions for LazyCoroResult (no suffix)
- Sugar functions for LazyCoroResultWriter (*_w suffix)
- HTTP sugar over httpx (dispatch_*)
"""

# Core types
from ._types import Handler, NoError, Outcome

# Errors
from ._errors import Cancelled, FetchError, ReadError, TransportError

# Configuration
from .policy import DispatchPolicy

# Writer monad
from . import writer
from .writer import LazyCoroResultWriter, Log, WriterResult

# Fetch
from .fetch import Fetched, fetch, fetch_one, fetch_one_w, fetch_text

# Dispatch
from .dispatch import (
    UrlOutcome,
    # HTTP
    dispatch_async,
    dispatch_async_w,
    dispatch_join,
    dispatch_join_w,
    dispatch_sync,
    # LazyCoroResult
    drain_all,
    join_all,
    # LazyCoroResultWriter
    drain_all_w,
    join_all_w,
    # Generic
    drain_allM,
    join_allM,
)

# Unpack
from .unpack import partition_outcomes, unpack, unpack_bodies

__all__ = (
    # Types
    "Handler",
    "NoError",
    "Outcome",
    "UrlOutcome",
    # Errors
    "Cancelled",
    "FetchError",
    "ReadError",
    "TransportError",
    # Configuration
    "DispatchPolicy",
    # Writer
    "writer",
    "LazyCoroResultWriter",
    "Log",
    "WriterResult",
    # Fetch
    "Fetched",
    "fetch",
    "fetch_one",
    "fetch_one_w",
    "fetch_text",
    # Dispatch
    "dispatch_async",
    "dispatch_async_w",
    "dispatch_join",
    "dispatch_join_w",
    "dispatch_sync",
    "drain_all",
    "drain_all_w",
    "drain_allM",
    "join_all",
    "join_all_w",
    "join_allM",
    # Unpack
    "partition_outcomes",
    "unpack",
    "unpack_bodies",
)
