"""Command-line check of simulator band files against a baseline directory.

Workflow:

1) Locate ``hyperdrive_bandNN.bin`` files in the current and baseline directories.
2) Compare every band present in both (max-norm of the complex difference).
3) Print a per-band summary and the global maximum.
4) Exit 0 if the maximum is within tolerance and every band compared cleanly.

Exit codes
----------
0  pass
1  verdict failure (tolerance exceeded, non-finite data, a band failed, stopped early)
2  setup failure (directory unreadable, duplicate band, no common band, bad arguments)
"""

from __future__ import annotations

import json
import sys
import time
from pathlib import Path
from typing import Optional, Sequence, TextIO

from vis_gen_diff.errors import SETUP_ERRORS
from vis_gen_diff.models.profile import DEFAULT_TOLERANCE, BandNaming, DiffProfile
from vis_gen_diff.models.results import ComparisonReport
from vis_gen_diff.validation.band_runner import compare_directories


EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_SETUP = 2


def _fmt(x: Optional[float]) -> str:
    return "<no comparable data>" if x is None else f"{x:.6g}"


def print_report(report: ComparisonReport, out: Optional[TextIO] = None) -> None:
    """Console summary, one block per band then the verdict."""
    out = out or sys.stdout
    for w in report.warnings:
        print(f"[warn] {w}", file=out)

    for p in report.pairs:
        name = p.current_path.name
        print(f"Checking {name} ...", file=out)
        if p.ok:
            print(f"Biggest difference for {name}: {_fmt(p.max_difference)} ({p.n_samples} samples)", file=out)
        else:
            print(f"[fail] {name}: {type(p.error).__name__}: {p.error}", file=out)

    print(f"Maximum difference: {_fmt(report.max_difference)}", file=out)
    if report.within_tolerance:
        print(f"PASS: all {len(report.pairs)} bands within tolerance {report.tolerance:g}", file=out)
        return

    worst = report.worst_band
    if worst is not None:
        print(f"[info] worst band: {worst:02d}", file=out)
    for r in report.failure_reasons():
        print(f"[fail] {r}", file=out)
    print(f"FAIL: difference is too large or some bands could not be compared (tolerance {report.tolerance:g})", file=out)


def write_json(report: ComparisonReport, path: Path, profile: DiffProfile) -> None:
    payload = {"profile": profile.to_dict(), "report": report.to_dict()}
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def write_csv(report: ComparisonReport, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    report.to_frame().to_csv(path, index=False)


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="python -m vis_gen_diff",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Compare each hyperdrive_bandNN.bin file in the current directory against
            the same band in the baseline directory. Fails if the largest difference
            between any two visibilities is larger than the tolerance, or if any band
            cannot be compared.
            """
        ),
    )
    p.add_argument(
        "baseline_dir",
        metavar="BASELINE_DIR",
        nargs="?",
        default="./baseline",
        help="Directory containing baseline band files (default: ./baseline)",
    )
    p.add_argument("--current-dir", default=".", help="Directory containing the band files to check (default: .)")
    p.add_argument(
        "-t",
        "--tolerance",
        type=float,
        default=DEFAULT_TOLERANCE,
        help="Fail if the maximum difference is bigger than this (default: %(default)s)",
    )
    p.add_argument("-q", "--quiet", action="store_true", help="Print nothing; the exit code carries the result")
    p.add_argument(
        "--strict-bands",
        action="store_true",
        help="Fail if a band is present in only one directory (default: warn only)",
    )
    p.add_argument("--prefix", default="hyperdrive_band", help="Band file name prefix (default: %(default)s)")
    p.add_argument("--suffix", default=".bin", help="Band file name suffix (default: %(default)s)")
    p.add_argument(
        "--band-width",
        type=int,
        default=2,
        help="Digits in the band number; 0 accepts any width (default: %(default)s)",
    )
    p.add_argument("-j", "--jobs", type=int, default=None, help="Worker threads (default: from CPU count)")
    p.add_argument("--timeout", type=float, default=None, help="Stop starting new bands after this many seconds")
    p.add_argument("--json", dest="json_path", default=None, help="Write the report (with profile) as JSON")
    p.add_argument("--csv", dest="csv_path", default=None, help="Write the per-band table as CSV")

    ns = p.parse_args(list(argv) if argv is not None else None)

    err = sys.stderr
    try:
        profile = DiffProfile(
            tolerance=float(ns.tolerance),
            naming=BandNaming(prefix=ns.prefix, width=(ns.band_width or None), suffix=ns.suffix),
            fail_on_one_sided=bool(ns.strict_bands),
            max_workers=ns.jobs,
        )
    except ValueError as e:
        if not ns.quiet:
            print(f"error: {e}", file=err)
        return EXIT_SETUP

    deadline = None
    if ns.timeout is not None:
        deadline = time.monotonic() + float(ns.timeout)

    try:
        report = compare_directories(
            Path(ns.current_dir),
            Path(ns.baseline_dir),
            profile=profile,
            deadline=deadline,
        )
    except SETUP_ERRORS as e:
        if not ns.quiet:
            print(f"error: {e}", file=err)
        return EXIT_SETUP

    if ns.json_path:
        write_json(report, Path(ns.json_path), profile)
    if ns.csv_path:
        write_csv(report, Path(ns.csv_path))

    if not ns.quiet:
        print_report(report)

    return EXIT_PASS if report.within_tolerance else EXIT_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
