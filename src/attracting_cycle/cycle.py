from __future__ import annotations

import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import (
    MaxIterationsExceededError,
    MaxIterationsWarning,
    PeriodNotFoundError,
    RefinementExhaustedWarning,
)
from .logging import logger
from .maps import ComplexMap
from .tolerance import DEFAULT_MAX_IT, contraction_ratio, distance, resolve_tolerance, validate_max_it


class CycleStatus(str, Enum):
    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"
    REFINEMENT_EXHAUSTED = "refinement_exhausted"


@dataclass(frozen=True)
class CycleResult:
    period: int
    representative: Any
    ratio: float
    status: CycleStatus = CycleStatus.CONVERGED
    tol: float = float("nan")

    @property
    def converged(self) -> bool:
        return self.status is CycleStatus.CONVERGED

    def as_tuple(self) -> tuple[int, Any, float]:
        return (self.period, self.representative, self.ratio)


@dataclass(frozen=True)
class FastPath:
    tortoise: Any
    hare: Any
    result: CycleResult | None = None


@dataclass(frozen=True)
class Detection:
    found: bool
    point: Any
    closeness: float
    steps: int


@dataclass(frozen=True)
class Refinement:
    found: bool
    period: int
    point: Any
    closeness: float


def fast_path(a0: Any, F: ComplexMap, tol: float) -> FastPath:
    """Two steps from `a0`; short-circuits when the orbit is already fixed."""

    a_tortoise = F(a0)
    a_hare = F(a_tortoise)
    closeness = distance(a_hare, a_tortoise)
    if closeness <= tol:
        ratio = contraction_ratio(closeness, distance(a_tortoise, a0))
        result = CycleResult(period=1, representative=a_hare, ratio=ratio, tol=tol)
        return FastPath(tortoise=a_tortoise, hare=a_hare, result=result)
    return FastPath(tortoise=a_tortoise, hare=a_hare)


def detect_cycle(tortoise: Any, hare: Any, F: ComplexMap, tol: float, max_it: int) -> Detection:
    """Floyd's tortoise and hare with `|hare - tortoise| <= tol` as equality.

    The tortoise advances one application of `F` per step, the hare two. On
    success the hare sits on (or within `tol` of) the eventual cycle.
    """

    closeness = distance(hare, tortoise)
    for k in range(1, max_it + 1):
        tortoise = F(tortoise)
        hare = F(F(hare))
        closeness = distance(hare, tortoise)
        if closeness <= tol:
            return Detection(found=True, point=hare, closeness=closeness, steps=k)
    return Detection(found=False, point=hare, closeness=closeness, steps=max_it)


def refine_period(point: Any, F: ComplexMap, tol: float, max_it: int) -> Refinement:
    """Smallest `k <= max_it` with `|F^k(point) - point| <= tol`.

    Floyd only guarantees that some multiple of the period separates the two
    pointers; walking from a fixed anchor recovers the minimal one.
    """

    anchor = point
    hare = point
    closeness = float("inf")
    for k in range(1, max_it + 1):
        hare = F(hare)
        closeness = distance(hare, anchor)
        if closeness <= tol:
            return Refinement(found=True, period=k, point=hare, closeness=closeness)
    return Refinement(found=False, period=max_it, point=anchor, closeness=closeness)


def find_attracting_cycle(
    a0: Any,
    F: ComplexMap,
    *,
    tol: float | None = None,
    max_it: int = DEFAULT_MAX_IT,
    digits: int | None = None,
    strict: bool = False,
) -> CycleResult:
    """Locate the attracting cycle that the orbit of `a0` under `F` settles on.

    Parameters
    ----------
    a0:
        Starting point. Any value supporting subtraction and ``abs()``.
    F:
        The map. Called as ``F(z)``; anything it raises propagates unchanged.
    tol:
        Two points closer than this are treated as equal. Defaults to
        ``5 * 10**-digits`` where ``digits`` is the working precision of ``a0``.
    max_it:
        Bound on each of the detection and refinement loops.
    strict:
        Raise ``MaxIterationsExceededError`` / ``PeriodNotFoundError`` instead
        of returning a sentinel result with a warning.

    Returns
    -------
    CycleResult
        ``(period, representative, ratio)`` plus ``status``. A ratio below 1
        signals healthy contraction. When ``status`` is not ``converged`` the
        result is a sentinel: ``period == max_it`` and ``ratio == 1.0``.
    """

    tol = resolve_tolerance(tol, a0, digits=digits)
    max_it = validate_max_it(max_it)

    start = fast_path(a0, F, tol)
    if start.result is not None:
        logger.debug("fast path: fixed point after two steps (ratio={:.3e})", start.result.ratio)
        return start.result

    detection = detect_cycle(start.tortoise, start.hare, F, tol, max_it)
    if not detection.found:
        result = CycleResult(
            period=max_it,
            representative=detection.point,
            ratio=1.0,
            status=CycleStatus.MAX_ITERATIONS,
            tol=tol,
        )
        message = f"maximum iterations exceeded ({max_it}) without |hare - tortoise| <= {tol:g}"
        if strict:
            raise MaxIterationsExceededError(message, result=result)
        logger.warning(message)
        warnings.warn(message, MaxIterationsWarning, stacklevel=2)
        return result

    logger.debug("detector closed the gap after {} steps (closeness={:.3e})", detection.steps, detection.closeness)

    refinement = refine_period(detection.point, F, tol, max_it)
    if not refinement.found:
        result = CycleResult(
            period=max_it,
            representative=refinement.point,
            ratio=1.0,
            status=CycleStatus.REFINEMENT_EXHAUSTED,
            tol=tol,
        )
        message = f"no return to the anchor point within {max_it} steps at tol={tol:g}"
        if strict:
            raise PeriodNotFoundError(message, result=result)
        logger.warning(message)
        warnings.warn(message, RefinementExhaustedWarning, stacklevel=2)
        return result

    ratio = contraction_ratio(refinement.closeness, detection.closeness)
    logger.debug("period {} (ratio={:.3e})", refinement.period, ratio)
    return CycleResult(period=refinement.period, representative=refinement.point, ratio=ratio, tol=tol)
