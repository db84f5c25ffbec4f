from __future__ import annotations

import json
import warnings
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from .cycle import CycleStatus, find_attracting_cycle
from .errors import CycleWarning
from .logging import logger
from .maps import get_family
from .tolerance import DEFAULT_MAX_IT, resolve_tolerance

STATUS_ERROR = "error"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def parameter_grid(
    re_range: tuple[float, float],
    im_range: tuple[float, float],
    resolution: int,
) -> np.ndarray:
    """Complex grid of shape (resolution, resolution); rows follow the imaginary axis."""

    resolution = int(resolution)
    if resolution < 1:
        raise ValueError("resolution must be >= 1")
    re = np.linspace(float(re_range[0]), float(re_range[1]), resolution)
    im = np.linspace(float(im_range[0]), float(im_range[1]), resolution)
    return re[np.newaxis, :] + 1j * im[:, np.newaxis]


@dataclass(frozen=True)
class ScanSummary:
    n_points: int
    status_counts: dict[str, int]
    period_counts: dict[str, int]


def _summarize(periods: np.ndarray, statuses: np.ndarray) -> ScanSummary:
    labels, counts = np.unique(statuses, return_counts=True)
    status_counts = {str(k): int(v) for k, v in zip(labels, counts)}

    ok = statuses == CycleStatus.CONVERGED.value
    period_counts: dict[str, int] = {}
    if np.any(ok):
        vals, cnts = np.unique(periods[ok], return_counts=True)
        period_counts = {str(int(k)): int(v) for k, v in zip(vals, cnts)}

    return ScanSummary(n_points=int(statuses.size), status_counts=status_counts, period_counts=period_counts)


def run_period_scan(
    *,
    output_dir: Path,
    family: str = "quadratic",
    re_range: tuple[float, float] = (-2.0, 0.5),
    im_range: tuple[float, float] = (-1.25, 1.25),
    resolution: int = 32,
    z0: complex = 0.0,
    tol: float | None = None,
    max_it: int = DEFAULT_MAX_IT,
) -> dict[str, Any]:
    """Period map of a one-parameter family over a rectangular parameter window.

    Each grid point runs `find_attracting_cycle` from `z0`. Degenerate outcomes
    are recorded through their status; arithmetic failures inside the map are
    recorded as status ``error``. Writes results NPZ + JSON manifest.
    """

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    factory = get_family(family)
    tol_eff = resolve_tolerance(tol, z0)
    params = parameter_grid(re_range, im_range, resolution)

    periods = np.zeros(params.shape, dtype=np.int64)
    ratios = np.full(params.shape, np.nan, dtype=np.float64)
    reps = np.full(params.shape, np.nan + 0j, dtype=np.complex128)
    statuses = np.empty(params.shape, dtype="U24")

    logger.info("scanning {} family over {} parameters", family, params.size)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", CycleWarning)
        for idx in np.ndindex(params.shape):
            F = factory(complex(params[idx]))
            try:
                res = find_attracting_cycle(complex(z0), F, tol=tol_eff, max_it=max_it)
            except (ArithmeticError, ValueError) as e:
                logger.debug("map failed at param={}: {}: {}", params[idx], type(e).__name__, e)
                statuses[idx] = STATUS_ERROR
                continue
            periods[idx] = res.period
            ratios[idx] = res.ratio
            reps[idx] = complex(res.representative)
            statuses[idx] = res.status.value

    summary = _summarize(periods, statuses)

    out_npz = output_dir / "period_scan_results.npz"
    np.savez(
        out_npz,
        params=params,
        periods=periods,
        ratios=ratios,
        representatives=reps,
        statuses=statuses,
        family=str(family),
        z0=np.complex128(z0),
        tol=np.float64(tol_eff),
        max_it=np.int64(max_it),
    )

    manifest = {
        "experiment": "Period Scan",
        "time_utc": _now_iso(),
        "status": "OK",
        "params": {
            "family": str(family),
            "re_range": [float(re_range[0]), float(re_range[1])],
            "im_range": [float(im_range[0]), float(im_range[1])],
            "resolution": int(resolution),
            "z0": [float(complex(z0).real), float(complex(z0).imag)],
            "tol": float(tol_eff),
            "max_it": int(max_it),
        },
        "results": {
            "n_points": summary.n_points,
            "status_counts": summary.status_counts,
            "period_counts": summary.period_counts,
        },
        "outputs": {
            "results_npz": str(out_npz),
        },
    }

    (output_dir / "period_scan_manifest.json").write_text(
        json.dumps(manifest, indent=2, sort_keys=True),
        encoding="utf-8",
    )

    return manifest
