"""
Writer
======

LazyCoroResultWriter: a lazy coroutine producing Result[T, E] plus Log[W].
The *_w dispatchers use it to return per-request log lines with the outcomes.
"""

from .log import Log
from .result import WriterResult
from .monad import LazyCoroResultWriter

__all__ = (
    "Log",
    "WriterResult",
    "LazyCoroResultWriter",
)
