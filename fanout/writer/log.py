"""
Log - monoidal accumulator for the Writer
=========================================
"""

from __future__ import annotations


class Log[A](list[A]):
    """
    Per-request log accumulated alongside an outcome.

    A list with monoid operations:
    - empty: Log()
    - combine: concatenation, used to merge task logs in input order
    """

    @staticmethod
    def of[T](*items: T) -> Log[T]:
        """Create log with items."""
        return Log[T](items)

    def combine(self, other: Log[A], /) -> Log[A]:
        """
        Combine two logs (monoidal append).

        Example:
            Log.of("GET a").combine(Log.of("GET b"))  # Log(["GET a", "GET b"])
        """
        result: Log[A] = Log(self)
        result.extend(other)
        return result


__all__ = ("Log",)
