from __future__ import annotations

import argparse
import json
import math
import sys
from pathlib import Path

from .cycle import CycleResult, find_attracting_cycle
from .errors import CycleNotFoundError
from .gate import check_scan_manifest
from .logging import enable_logging, logger, setup_logfile
from .maps import FAMILIES, get_family
from .run_manifest import collect_outputs_from_dir, create_run_manifest
from .scan import run_period_scan
from .suite import default_run_dir, run_reference_suite
from .tolerance import DEFAULT_MAX_IT


def _finite_or_none(x: float) -> float | None:
    x = float(x)
    return x if math.isfinite(x) else None


def _result_to_dict(r: CycleResult) -> dict:
    # Diverged orbits carry inf/nan; strict JSON has no literal for them.
    rep = complex(r.representative)
    return {
        "period": int(r.period),
        "representative": [_finite_or_none(rep.real), _finite_or_none(rep.imag)],
        "ratio": _finite_or_none(r.ratio),
        "status": r.status.value,
        "tol": float(r.tol),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="acycle", description="Attracting cycle detection for complex maps")
    parser.add_argument("--log-level", default=None, help="Enable package logging at this level (e.g. DEBUG)")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write package logs to this file")
    sub = parser.add_subparsers(dest="cmd", required=True)

    fd = sub.add_parser("find", help="Find the attracting cycle reached from one starting point")
    fd.add_argument("--family", choices=sorted(FAMILIES), default="quadratic")
    fd.add_argument("--param", type=complex, required=True, help="Family parameter, e.g. --param=-1+0.1j")
    fd.add_argument("--z0", type=complex, default=0j)
    fd.add_argument("--tol", type=float, default=None)
    fd.add_argument("--max-it", type=int, default=DEFAULT_MAX_IT)
    fd.add_argument("--digits", type=int, default=None, help="Working precision used for the default tol")
    fd.add_argument("--strict", action="store_true", help="Exit non-zero instead of printing a sentinel result")

    sc = sub.add_parser("scan", help="Period map of a one-parameter family over a parameter window")
    sc.add_argument("--output-dir", type=Path, default=Path("acycle_results"))
    sc.add_argument("--family", choices=sorted(FAMILIES), default="quadratic")
    sc.add_argument("--re-min", type=float, default=-2.0)
    sc.add_argument("--re-max", type=float, default=0.5)
    sc.add_argument("--im-min", type=float, default=-1.25)
    sc.add_argument("--im-max", type=float, default=1.25)
    sc.add_argument("--resolution", type=int, default=32)
    sc.add_argument("--z0", type=complex, default=0j)
    sc.add_argument("--tol", type=float, default=None)
    sc.add_argument("--max-it", type=int, default=DEFAULT_MAX_IT)

    st = sub.add_parser("suite", help="Run the reference cases and write a suite manifest")
    st.add_argument("--output-dir", type=Path, default=Path("acycle_results"))
    st.add_argument("--profile", choices=["smoke", "full"], default="smoke")
    st.add_argument("--tol", type=float, default=1e-10)

    gt = sub.add_parser("gate", help="Consistency gate for a period scan manifest")
    gt.add_argument("--scan-manifest", type=Path, required=True)

    args = parser.parse_args(argv)

    if args.log_level or args.log_file is not None:
        logger.remove()
    if args.log_level:
        enable_logging(args.log_level)
    if args.log_file is not None:
        setup_logfile(str(args.log_file), level=args.log_level or "INFO")

    if args.cmd == "find":
        F = get_family(args.family)(args.param)
        try:
            r = find_attracting_cycle(
                args.z0,
                F,
                tol=args.tol,
                max_it=args.max_it,
                digits=args.digits,
                strict=bool(args.strict),
            )
        except CycleNotFoundError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        print(json.dumps(_result_to_dict(r), indent=2, sort_keys=True, allow_nan=False))
        return 0

    if args.cmd == "scan":
        run_dir = default_run_dir(args.output_dir)
        manifest = run_period_scan(
            output_dir=run_dir,
            family=args.family,
            re_range=(args.re_min, args.re_max),
            im_range=(args.im_min, args.im_max),
            resolution=int(args.resolution),
            z0=args.z0,
            tol=args.tol,
            max_it=int(args.max_it),
        )
        create_run_manifest(
            run_dir=run_dir,
            command=["acycle"] + list(sys.argv[1:] if argv is None else argv),
            status=manifest["status"],
            outputs=collect_outputs_from_dir(run_dir),
            additional_fields={
                "family": args.family,
                "tol": manifest["params"]["tol"],
                "max_it": int(args.max_it),
                "resolution": int(args.resolution),
            },
        )
        print(str(run_dir / "period_scan_manifest.json"))
        return 0

    if args.cmd == "suite":
        run_dir = default_run_dir(args.output_dir)
        manifest = run_reference_suite(run_dir=run_dir, profile=args.profile, tol=float(args.tol))
        create_run_manifest(
            run_dir=run_dir,
            command=["acycle"] + list(sys.argv[1:] if argv is None else argv),
            status=manifest["overall_status"],
            outputs=collect_outputs_from_dir(run_dir),
            additional_fields={"profile": args.profile, "tol": float(args.tol)},
        )
        print(str(run_dir / "suite_manifest.json"))
        return 0 if manifest["overall_status"] == "OK" else 1

    if args.cmd == "gate":
        if not args.scan_manifest.exists():
            print("scan: SKIP (manifest not found)")
            return 0
        issues = check_scan_manifest(args.scan_manifest)
        print("scan: OK" if not issues else "scan: FAIL")
        if issues:
            print("\nISSUES:")
            for s in issues:
                print("- " + s)
            return 1
        print("\nGATE: PASS")
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
