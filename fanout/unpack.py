"""Unpack combinators

Turn a list of outcomes into plain positional lists."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import assert_never

from kungfu import Error, Ok, Result


def unpack[T, E](
    outcomes: Sequence[Result[T, E]],
    *,
    default: T,
) -> tuple[list[T], list[E | None]]:
    """
    Split outcomes into two parallel lists of the same length.

    values[i] is the payload of outcomes[i], or `default` when it failed.
    errors[i] is None when outcomes[i] succeeded, otherwise its error.

    Example:
        bodies, errors = unpack(outcomes, default="")
        for url, body, err in zip(urls, bodies, errors):
            ...
    """
    values: list[T] = []
    errors: list[E | None] = []

    for outcome in outcomes:
        match outcome:
            case Ok(value):
                values.append(value)
                errors.append(None)
            case Error(err):
                values.append(default)
                errors.append(err)
            case _ as unreachable:
                assert_never(unreachable)

    return values, errors


def unpack_bodies[E](outcomes: Sequence[Result[str, E]]) -> tuple[list[str], list[E | None]]:
    """unpack for text outcomes: failed positions hold ""."""
    return unpack(outcomes, default="")


def partition_outcomes[T, E](outcomes: Iterable[Result[T, E]]) -> tuple[list[T], list[E]]:
    """Separate into (successes, failures), each keeping its relative order."""
    successes: list[T] = []
    failures: list[E] = []

    for outcome in outcomes:
        match outcome:
            case Ok(value):
                successes.append(value)
            case Error(err):
                failures.append(err)

    return successes, failures


__all__ = ("partition_outcomes", "unpack", "unpack_bodies")
