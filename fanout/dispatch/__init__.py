from .channel import drain_all, drain_all_w, drain_allM
from .http import (
    UrlOutcome,
    dispatch_async,
    dispatch_async_w,
    dispatch_join,
    dispatch_join_w,
    dispatch_sync,
)
from .join import join_all, join_all_w, join_allM

__all__ = (
    # Join
    "join_all",
    "join_all_w",
    "join_allM",
    # Channel
    "drain_all",
    "drain_all_w",
    "drain_allM",
    # HTTP
    "UrlOutcome",
    "dispatch_async",
    "dispatch_async_w",
    "dispatch_join",
    "dispatch_join_w",
    "dispatch_sync",
)
