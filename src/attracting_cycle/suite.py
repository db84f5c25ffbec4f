from __future__ import annotations

import json
import platform
import sys
import time
import warnings
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from .cycle import CycleStatus, find_attracting_cycle
from .diagnostics import estimate_contraction_rate, verify_periodicity
from .errors import MaxIterationsWarning
from .logging import logger
from .maps import affine, inversion, quadratic
from .run_manifest import _dist_version

RABBIT_C = complex(-0.122561166876654, 0.744861766619744)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _now_utc_compact() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _python_info() -> dict[str, str]:
    return {
        "executable": sys.executable,
        "version": sys.version.replace("\n", " "),
        "platform": platform.platform(),
    }


@dataclass(frozen=True)
class StepResult:
    name: str
    status: str  # OK | SKIP | ERROR
    duration_sec: float
    details: dict[str, Any]


class ReferenceMismatch(RuntimeError):
    pass


def _expect(cond: bool, message: str) -> None:
    if not cond:
        raise ReferenceMismatch(message)


def _run_step(name: str, fn: Callable[[], dict[str, Any]]) -> StepResult:
    t0 = time.time()
    try:
        details = fn() or {}
        return StepResult(name=name, status="OK", duration_sec=time.time() - t0, details=details)
    except Exception as e:
        logger.error("suite step {} failed: {}: {}", name, type(e).__name__, e)
        return StepResult(
            name=name,
            status="ERROR",
            duration_sec=time.time() - t0,
            details={"error": f"{type(e).__name__}: {e}"},
        )


def default_run_dir(base_output_dir: Path) -> Path:
    return Path(base_output_dir) / f"acycle_run_{_now_utc_compact()}"


def _check_fixed_point() -> dict[str, Any]:
    F = affine(0.5, 1.0)
    r = find_attracting_cycle(0j, F, tol=1e-6, max_it=100)
    _expect(r.converged and r.period == 1, f"expected period 1, got {r.period} ({r.status.value})")
    _expect(abs(r.representative - 2.0) <= 1e-5, f"representative {r.representative} is not near 2")
    _expect(r.ratio < 1.0, f"ratio {r.ratio} >= 1")
    return {"period": r.period, "representative": [r.representative.real, r.representative.imag], "ratio": r.ratio}


def _check_exhaustion_sentinel() -> dict[str, Any]:
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", MaxIterationsWarning)
        r = find_attracting_cycle(0j, lambda z: z + 1, tol=1e-6, max_it=1)
    _expect(r.status is CycleStatus.MAX_ITERATIONS, f"unexpected status {r.status.value}")
    _expect(r.period == 1 and r.ratio == 1.0, "sentinel must be (max_it, ratio=1.0)")
    _expect(any(issubclass(w.category, MaxIterationsWarning) for w in caught), "no diagnostic emitted")
    return {"period": r.period, "ratio": r.ratio, "status": r.status.value}


def _check_involution() -> dict[str, Any]:
    r = find_attracting_cycle(2 + 0j, inversion(1.0), tol=1e-12, max_it=50)
    _expect(r.converged and r.period == 2, f"expected period 2, got {r.period}")
    _expect(r.ratio == 0.0, f"exact cycle should give ratio 0, got {r.ratio}")
    return {"period": r.period, "ratio": r.ratio}


def _check_rabbit(tol: float) -> dict[str, Any]:
    F = quadratic(RABBIT_C)
    r = find_attracting_cycle(0j, F, tol=tol, max_it=1000)
    _expect(r.converged and r.period == 3, f"expected period 3, got {r.period}")
    check = verify_periodicity(F, r)
    _expect(check.ok, f"|F^3(a) - a| = {check.distance} > {check.tol}")
    return {"period": r.period, "ratio": r.ratio, "periodicity_distance": check.distance}


def _check_contraction_rate() -> dict[str, Any]:
    fit = estimate_contraction_rate(0j, affine(0.5, 1.0), n_samples=30)
    _expect(abs(fit.rate - 0.5) < 1e-6, f"fitted rate {fit.rate} is not 0.5")
    return {"rate": fit.rate, "r_value": fit.r_value, "n_points": fit.n_points}


def run_reference_suite(
    *,
    run_dir: Path,
    profile: str = "smoke",
    tol: float = 1e-10,
    scan_resolution: int = 12,
) -> dict[str, Any]:
    """Run the reference cases and write a single suite manifest.

    Profiles:
    - smoke: closed-form reference orbits only
    - full: also a small quadratic period scan and its manifest gate
    """

    run_dir = Path(run_dir)
    run_dir.mkdir(parents=True, exist_ok=True)

    prof = str(profile).strip().lower()
    if prof not in {"smoke", "full"}:
        raise ValueError("profile must be one of: smoke, full")

    steps: list[StepResult] = [
        _run_step("fixed_point", _check_fixed_point),
        _run_step("exhaustion_sentinel", _check_exhaustion_sentinel),
        _run_step("involution", _check_involution),
        _run_step("rabbit", lambda: _check_rabbit(float(tol))),
        _run_step("contraction_rate", _check_contraction_rate),
    ]

    if prof == "full":
        from .gate import check_scan_manifest
        from .scan import run_period_scan

        steps.append(
            _run_step(
                "period_scan",
                lambda: run_period_scan(
                    output_dir=run_dir,
                    family="quadratic",
                    resolution=int(scan_resolution),
                    tol=float(tol),
                    max_it=200,
                )["results"],
            )
        )

        gate_t0 = time.time()
        scan_manifest = run_dir / "period_scan_manifest.json"
        if not scan_manifest.exists():
            steps.append(
                StepResult(
                    name="gate",
                    status="SKIP",
                    duration_sec=0.0,
                    details={"reason": "no scan manifest found"},
                )
            )
        else:
            issues = check_scan_manifest(scan_manifest)
            steps.append(
                StepResult(
                    name="gate",
                    status="ERROR" if issues else "OK",
                    duration_sec=time.time() - gate_t0,
                    details={"scan_manifest": str(scan_manifest), "issues": issues},
                )
            )

    manifest: dict[str, Any] = {
        "experiment": "Attracting Cycle Reference Suite",
        "time_utc": _now_iso(),
        "package_version": _dist_version("attracting-cycle"),
        "python": _python_info(),
        "run_dir": str(run_dir),
        "profile": prof,
        "steps": [
            {
                "name": s.name,
                "status": s.status,
                "duration_sec": float(s.duration_sec),
                "details": s.details,
            }
            for s in steps
        ],
        "overall_status": "OK" if all(s.status in {"OK", "SKIP"} for s in steps) else "ERROR",
    }

    (run_dir / "suite_manifest.json").write_text(json.dumps(manifest, indent=2, sort_keys=True), encoding="utf-8")
    return manifest
