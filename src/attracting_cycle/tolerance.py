from __future__ import annotations

import math
from typing import Any

import numpy as np


DEFAULT_MAX_IT = 1000
DEFAULT_TOL_SCALE = 5.0


def working_digits(point: Any) -> int:
    """Significant decimal digits carried by the numeric type of `point`.

    Inexact numpy dtypes report their own precision (complex128 -> 15,
    complex64 -> 6). Ints and arbitrary objects fall back to float64.
    """

    dtype = np.asarray(point).dtype
    if not np.issubdtype(dtype, np.inexact):
        dtype = np.dtype(np.float64)
    return int(np.finfo(dtype).precision)


def default_tolerance(digits: int) -> float:
    """Return `5 * 10**-digits`."""

    digits = int(digits)
    if digits <= 0:
        raise ValueError("digits must be a positive integer")
    return DEFAULT_TOL_SCALE * 10.0 ** (-digits)


def resolve_tolerance(tol: float | None, a0: Any, *, digits: int | None = None) -> float:
    if tol is None:
        return default_tolerance(working_digits(a0) if digits is None else digits)
    tol = float(tol)
    if not math.isfinite(tol) or tol <= 0.0:
        raise ValueError("tol must be a positive finite number")
    return tol


def validate_max_it(max_it: int) -> int:
    if isinstance(max_it, bool) or not isinstance(max_it, (int, np.integer)):
        raise ValueError("max_it must be a positive integer")
    if max_it <= 0:
        raise ValueError("max_it must be a positive integer")
    return int(max_it)


def distance(a: Any, b: Any) -> float:
    """`|a - b|`, saturating to inf when the modulus overflows a float."""

    try:
        return float(abs(a - b))
    except OverflowError:
        return math.inf


def contraction_ratio(closeness: float, baseline: float) -> float:
    """Quotient of two successive closeness measurements.

    A zero baseline means the orbit already repeated exactly; that is reported
    as perfect contraction (0.0).
    """

    if baseline == 0.0:
        return 0.0
    return float(closeness) / float(baseline)
