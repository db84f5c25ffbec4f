"""Warnings and exceptions raised when no reliable cycle is found."""

from __future__ import annotations


class CycleWarning(RuntimeWarning):
    pass


class MaxIterationsWarning(CycleWarning):
    """The tortoise/hare search used up `max_it` without closing the gap."""


class RefinementExhaustedWarning(CycleWarning):
    """No return to the anchor point was seen within `max_it` steps."""


class CycleNotFoundError(RuntimeError):
    def __init__(self, message: str, *, result=None):
        super().__init__(message)
        self.result = result


class MaxIterationsExceededError(CycleNotFoundError):
    pass


class PeriodNotFoundError(CycleNotFoundError):
    pass
