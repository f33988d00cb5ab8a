"""Band-by-band comparison of a current and a baseline output directory.

This module provides the orchestration API:
1. Locate band files in both directories
2. Split band indices into common / missing-in-current / missing-in-baseline
3. Read and compare every common band (optionally on a worker pool)
4. Merge the per-band results into one ComparisonReport

Design goals:
- Fault isolation: one broken band never stops the others
- Deterministic output: pairs are reported in ascending band order
- No shared accumulator: each worker returns its own PairResult, merged at the end
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import os
import threading
import time

from vis_gen_diff.analysis.compare import max_abs_difference
from vis_gen_diff.errors import ComparisonCancelledError, NoComparableBandsError, VisDiffError
from vis_gen_diff.ingest.discovery import BandDiscovery
from vis_gen_diff.ingest.readers_visibility import VisibilityReader
from vis_gen_diff.models.catalog import BandCatalog
from vis_gen_diff.models.profile import DEFAULT_TOLERANCE, DiffProfile
from vis_gen_diff.models.results import ComparisonReport, PairResult


def split_bands(current: BandCatalog, baseline: BandCatalog) -> Tuple[List[int], List[int], List[int]]:
    """Return ``(common, missing_in_current, missing_in_baseline)``, each ascending."""
    cur = set(current.files)
    base = set(baseline.files)
    return sorted(cur & base), sorted(base - cur), sorted(cur - base)


def default_worker_count(n_pairs: int) -> int:
    cpu = os.cpu_count() or 1
    return max(1, min(32, cpu + 4, int(n_pairs)))


class PairTask:
    """Read-and-compare work for one band; touches only its own two files."""

    def __init__(
        self,
        band: int,
        current_path: Path,
        baseline_path: Path,
        reader: VisibilityReader,
    ) -> None:
        self.band = band
        self.current_path = current_path
        self.baseline_path = baseline_path
        self.reader = reader

    def skipped(self, reason: str) -> PairResult:
        return PairResult(
            band=self.band,
            current_path=self.current_path,
            baseline_path=self.baseline_path,
            error=ComparisonCancelledError(reason, band=self.band),
        )

    def run(self) -> PairResult:
        try:
            cur = self.reader.read(self.current_path, band=self.band)
            base = self.reader.read(self.baseline_path, band=self.band)
            d = max_abs_difference(cur.samples, base.samples, band=self.band)
        except VisDiffError as e:
            return PairResult(
                band=self.band,
                current_path=self.current_path,
                baseline_path=self.baseline_path,
                error=e,
            )
        return PairResult(
            band=self.band,
            current_path=self.current_path,
            baseline_path=self.baseline_path,
            max_difference=d,
            n_samples=cur.n_samples,
        )


class _StopCheck:
    """Cancellation event and/or absolute ``time.monotonic()`` deadline."""

    def __init__(self, cancel: Optional[threading.Event], deadline: Optional[float]) -> None:
        self.cancel = cancel
        self.deadline = deadline

    def reason(self) -> Optional[str]:
        if self.cancel is not None and self.cancel.is_set():
            return "comparison cancelled"
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return "deadline exceeded"
        return None


def _run_pairs(tasks: Sequence[PairTask], stop: _StopCheck, max_workers: int) -> Tuple[List[PairResult], bool]:
    """Run every task and collect every result; returns ``(results, stopped_early)``."""

    def _guarded(task: PairTask) -> PairResult:
        why = stop.reason()
        if why is not None:
            return task.skipped(why)
        return task.run()

    if max_workers <= 1 or len(tasks) <= 1:
        results = [_guarded(t) for t in tasks]
    else:
        results = []
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="vis-gen-diff") as pool:
            futures = [pool.submit(_guarded, t) for t in tasks]
            for fut in as_completed(futures):
                results.append(fut.result())

    results.sort(key=lambda r: r.band)
    stopped = any(isinstance(r.error, ComparisonCancelledError) for r in results)
    return results, stopped


def compare_catalogs(
    current: BandCatalog,
    baseline: BandCatalog,
    *,
    profile: Optional[DiffProfile] = None,
    cancel: Optional[threading.Event] = None,
    deadline: Optional[float] = None,
) -> ComparisonReport:
    """Compare two already-located catalogs. See :func:`compare_directories`."""
    profile = profile or DiffProfile()
    common, missing_in_current, missing_in_baseline = split_bands(current, baseline)
    if not common:
        raise NoComparableBandsError(current.directory, baseline.directory, len(current), len(baseline))

    warnings: List[str] = []
    for name in current.skipped:
        warnings.append(f"ignored {name!r} in current directory (band field is not a number)")
    for name in baseline.skipped:
        warnings.append(f"ignored {name!r} in baseline directory (band field is not a number)")
    for band in missing_in_baseline:
        warnings.append(f"{current.files[band].name} is missing from {baseline.directory}")
    for band in missing_in_current:
        warnings.append(f"{baseline.files[band].name} is missing from {current.directory}")

    reader = VisibilityReader(fmt=profile.record_format)
    tasks = [PairTask(band, current.files[band], baseline.files[band], reader) for band in common]

    n_workers = profile.max_workers if profile.max_workers is not None else default_worker_count(len(tasks))
    pairs, stopped = _run_pairs(tasks, _StopCheck(cancel, deadline), int(n_workers))
    if stopped:
        n_skipped = sum(1 for p in pairs if isinstance(p.error, ComparisonCancelledError))
        warnings.append(f"stopped early: {n_skipped} of {len(pairs)} bands were not compared")

    return ComparisonReport(
        current_dir=current.directory,
        baseline_dir=baseline.directory,
        tolerance=float(profile.tolerance),
        pairs=tuple(pairs),
        missing_in_current=tuple(missing_in_current),
        missing_in_baseline=tuple(missing_in_baseline),
        fail_on_one_sided=bool(profile.fail_on_one_sided),
        cancelled=stopped,
        warnings=tuple(warnings),
    )


def compare_directories(
    current_dir: str | Path,
    baseline_dir: str | Path,
    tolerance: Optional[float] = None,
    *,
    profile: Optional[DiffProfile] = None,
    cancel: Optional[threading.Event] = None,
    deadline: Optional[float] = None,
    max_workers: Optional[int] = None,
) -> ComparisonReport:
    """Compare every band present in both directories.

    Parameters
    ----------
    current_dir, baseline_dir : path-like
        Directories holding ``hyperdrive_bandNN.bin`` files (naming per profile).
    tolerance : float, optional
        Overrides ``profile.tolerance`` (default 0.001). Inclusive bound.
    profile : DiffProfile, optional
        Naming, record format, one-sided policy and worker count.
    cancel : threading.Event, optional
        Checked before each band starts; bands in flight finish normally.
    deadline : float, optional
        Absolute ``time.monotonic()`` value, checked like ``cancel``.
    max_workers : int, optional
        Overrides ``profile.max_workers``.

    Returns
    -------
    ComparisonReport
        Verdict in ``report.within_tolerance``.

    Raises
    ------
    DirectoryAccessError, DuplicateBandError
        From discovery of either directory.
    NoComparableBandsError
        If the directories share no band.
    """
    profile = (profile or DiffProfile()).with_overrides(tolerance=tolerance, max_workers=max_workers)
    discovery = BandDiscovery(naming=profile.naming)
    current = discovery.build_catalog(current_dir)
    baseline = discovery.build_catalog(baseline_dir)
    return compare_catalogs(current, baseline, profile=profile, cancel=cancel, deadline=deadline)


def verify_directories(
    current_dir: str | Path,
    baseline_dir: str | Path,
    tolerance: float = DEFAULT_TOLERANCE,
    **kwargs,
) -> Tuple[ComparisonReport, bool]:
    """Same as :func:`compare_directories` but returns ``(report, verdict)``."""
    report = compare_directories(current_dir, baseline_dir, tolerance, **kwargs)
    return report, report.within_tolerance
