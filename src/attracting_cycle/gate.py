from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .cycle import CycleStatus

_KNOWN_STATUSES = {s.value for s in CycleStatus} | {"error"}


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def check_scan_manifest(path: Path) -> list[str]:
    issues: list[str] = []
    data = _read_json(Path(path))

    params = data.get("params")
    if not isinstance(params, dict):
        return ["scan: missing params dict"]

    for key in ("family", "tol", "max_it", "resolution"):
        if key not in params:
            issues.append(f"scan: params missing {key}")

    try:
        tol = float(params.get("tol", "nan"))
    except (TypeError, ValueError):
        issues.append("scan: tol not a number")
    else:
        if not tol > 0.0:
            issues.append("scan: tol must be positive")

    results = data.get("results")
    if not isinstance(results, dict):
        issues.append("scan: missing results dict")
        return issues

    status_counts = results.get("status_counts")
    if not isinstance(status_counts, dict):
        issues.append("scan: results missing status_counts")
        return issues

    unknown = sorted(set(status_counts) - _KNOWN_STATUSES)
    if unknown:
        issues.append(f"scan: unknown statuses {unknown}")

    n_points = results.get("n_points")
    if sum(int(v) for v in status_counts.values()) != n_points:
        issues.append("scan: status_counts do not sum to n_points")

    period_counts = results.get("period_counts", {})
    converged = int(status_counts.get(CycleStatus.CONVERGED.value, 0))
    if sum(int(v) for v in period_counts.values()) != converged:
        issues.append("scan: period_counts do not sum to converged count")

    max_it = params.get("max_it")
    if isinstance(max_it, int) and any(int(p) > max_it or int(p) < 1 for p in period_counts):
        issues.append("scan: period outside [1, max_it]")

    return issues
