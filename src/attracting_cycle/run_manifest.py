"""Run-level manifests for CLI commands.

Every CLI command that writes artifacts drops a `manifest.json` at the root of
its run directory describing the command, the environment and the outputs.
"""
from __future__ import annotations

import json
import platform
import sys
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

MANIFEST_SCHEMA_VERSION = "1"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _dist_version(name: str) -> str:
    try:
        return version(name)
    except PackageNotFoundError:
        return "unknown"


def _environment_info() -> dict[str, str]:
    return {
        "python_version": sys.version.replace("\n", " "),
        "python_executable": sys.executable,
        "platform": platform.platform(),
        "numpy_version": _dist_version("numpy"),
        "scipy_version": _dist_version("scipy"),
        "loguru_version": _dist_version("loguru"),
    }


def create_run_manifest(
    *,
    run_dir: Path,
    command: list[str] | str,
    status: str = "OK",
    outputs: list[dict[str, str]] | None = None,
    additional_fields: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Write `run_dir/manifest.json` and return its contents.

    Args:
        run_dir: Run directory; its name is used as the run id.
        command: Executed command (argv list or string).
        status: OK, ERROR or SKIP.
        outputs: Artifacts as dicts with 'name', 'path' (relative) and 'type'.
        additional_fields: Extra top-level keys.
    """
    manifest = {
        "manifest_schema_version": MANIFEST_SCHEMA_VERSION,
        "run_id": run_dir.name,
        "created_utc": _now_iso(),
        "command": command if isinstance(command, str) else " ".join(command),
        "package_version": _dist_version("attracting-cycle"),
        "environment": _environment_info(),
        "status": status,
        "outputs": outputs or [],
    }

    if additional_fields:
        manifest.update(additional_fields)

    (run_dir / "manifest.json").write_text(
        json.dumps(manifest, indent=2, sort_keys=True),
        encoding="utf-8",
    )
    return manifest


def collect_outputs_from_dir(run_dir: Path, patterns: list[str] | None = None) -> list[dict[str, str]]:
    """List artifacts in `run_dir` matching `patterns` (default: json, npz, log)."""
    if patterns is None:
        patterns = ["*.json", "*.npz", "*.log"]

    outputs = []
    for pattern in patterns:
        for file_path in sorted(run_dir.glob(pattern)):
            if file_path.name == "manifest.json":
                continue
            outputs.append({
                "name": file_path.stem,
                "path": str(file_path.relative_to(run_dir)),
                "type": file_path.suffix.lstrip("."),
            })
    return outputs
