from __future__ import annotations

from pathlib import Path

import numpy as np

from attracting_cycle import run_period_scan


def main() -> None:
    base = Path(__file__).resolve().parent / "data"
    base.mkdir(parents=True, exist_ok=True)

    manifest = run_period_scan(
        output_dir=base,
        family="quadratic",
        re_range=(-2.0, 0.5),
        im_range=(-1.25, 1.25),
        resolution=48,
        tol=1e-9,
        max_it=500,
    )

    with np.load(base / "period_scan_results.npz") as z:
        periods = np.where(z["statuses"] == "converged", z["periods"], 0)

    # Coarse text rendering, one character per grid point ('.' = no cycle found).
    glyphs = ".123456789"
    for row in periods[::-2]:
        print("".join(glyphs[p] if 0 < p < len(glyphs) else ("+" if p else ".") for p in row))

    print("\nstatus counts:", manifest["results"]["status_counts"])
    print("period counts:", manifest["results"]["period_counts"])


if __name__ == "__main__":
    main()
