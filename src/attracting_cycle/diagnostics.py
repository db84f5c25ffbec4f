from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from scipy.stats import linregress

from .cycle import CycleResult
from .maps import ComplexMap
from .tolerance import distance


def iterate_map(F: ComplexMap, z: Any, n: int) -> Any:
    for _ in range(int(n)):
        z = F(z)
    return z


@dataclass(frozen=True)
class PeriodicityCheck:
    distance: float
    tol: float
    ok: bool


def verify_periodicity(F: ComplexMap, result: CycleResult, *, tol: float | None = None) -> PeriodicityCheck:
    """Apply `F` exactly `result.period` times from the representative and compare."""

    tol = result.tol if tol is None else float(tol)
    d = distance(iterate_map(F, result.representative, result.period), result.representative)
    return PeriodicityCheck(distance=d, tol=tol, ok=bool(d <= tol))


@dataclass(frozen=True)
class ContractionFit:
    rate: float
    slope: float
    intercept: float
    r_value: float
    n_points: int


def estimate_contraction_rate(
    a0: Any,
    F: ComplexMap,
    *,
    period: int = 1,
    n_samples: int = 30,
    burn_in: int = 0,
) -> ContractionFit:
    """Fit the geometric decay of `|F^p(x_j) - x_j|` along the orbit of `a0`.

    `x_j` is the orbit sampled every `period` steps after `burn_in` steps. For an
    attracting cycle the distances shrink by roughly the modulus of the cycle
    multiplier per sample, so `rate = exp(slope)` of the log-linear fit
    estimates it. Exact zeros and non-finite distances are dropped.
    """

    period = int(period)
    if period <= 0:
        raise ValueError("period must be a positive integer")

    x = iterate_map(F, a0, burn_in)
    dists = np.empty(int(n_samples), dtype=np.float64)
    for j in range(int(n_samples)):
        nxt = iterate_map(F, x, period)
        dists[j] = distance(nxt, x)
        x = nxt

    idx = np.arange(dists.size, dtype=np.float64)
    keep = np.isfinite(dists) & (dists > 0.0)
    if int(np.sum(keep)) < 3:
        raise ValueError("need at least 3 nonzero finite distances to fit a contraction rate")

    fit = linregress(idx[keep], np.log(dists[keep]))
    return ContractionFit(
        rate=float(np.exp(fit.slope)),
        slope=float(fit.slope),
        intercept=float(fit.intercept),
        r_value=float(fit.rvalue),
        n_points=int(np.sum(keep)),
    )
