from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import math

import numpy as np
import pandas as pd

from vis_gen_diff.errors import ComparisonCancelledError, VisDiffError


@dataclass(frozen=True)
class PairResult:
    """Outcome of comparing one band present in both directories.

    Attributes
    ----------
    band:
        Band index.
    current_path, baseline_path:
        The two files that were compared.
    max_difference:
        Largest ``|current[i] - baseline[i]|`` over all samples. May be NaN or inf
        when either file holds non-finite values. ``None`` when the pair failed.
    n_samples:
        Number of complex samples per file (0 when the pair failed).
    error:
        The pair error (malformed, truncated, length mismatch, ...), else ``None``.
    """

    band: int
    current_path: Path
    baseline_path: Path
    max_difference: Optional[float] = None
    n_samples: int = 0
    error: Optional[VisDiffError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def finite(self) -> bool:
        return self.ok and self.max_difference is not None and math.isfinite(self.max_difference)

    @property
    def status(self) -> str:
        if self.error is None:
            return "ok" if self.finite else "non-finite"
        if isinstance(self.error, ComparisonCancelledError):
            return "cancelled"
        return "error"


@dataclass(frozen=True)
class ComparisonReport:
    """Aggregate of every PairResult plus the bands seen on one side only.

    ``max_difference`` is the maximum over successfully compared pairs, or ``None``
    when no pair succeeded ("no comparable data", which is not the same as 0).
    A non-finite pair maximum propagates into it.
    """

    current_dir: Path
    baseline_dir: Path
    tolerance: float
    pairs: Tuple[PairResult, ...]
    missing_in_current: Tuple[int, ...] = ()
    missing_in_baseline: Tuple[int, ...] = ()
    fail_on_one_sided: bool = False
    cancelled: bool = False
    warnings: Tuple[str, ...] = ()

    @property
    def compared_bands(self) -> List[int]:
        return [p.band for p in self.pairs]

    @property
    def successful_pairs(self) -> List[PairResult]:
        return [p for p in self.pairs if p.ok]

    @property
    def failed_pairs(self) -> List[PairResult]:
        return [p for p in self.pairs if not p.ok]

    @property
    def has_one_sided(self) -> bool:
        return bool(self.missing_in_current or self.missing_in_baseline)

    @property
    def max_difference(self) -> Optional[float]:
        ok = self.successful_pairs
        if not ok:
            return None
        # np.max propagates NaN; inf survives as inf.
        return float(np.max(np.asarray([p.max_difference for p in ok], dtype=np.float64)))

    @property
    def worst_band(self) -> Optional[int]:
        """Band holding the global maximum (first non-finite band wins)."""
        ok = self.successful_pairs
        if not ok:
            return None
        for p in ok:
            if not p.finite:
                return p.band
        return max(ok, key=lambda p: (p.max_difference, -p.band)).band

    @property
    def within_tolerance(self) -> bool:
        if not self.pairs or self.failed_pairs:
            return False
        if self.fail_on_one_sided and self.has_one_sided:
            return False
        mx = self.max_difference
        if mx is None or not math.isfinite(mx):
            return False
        return mx <= self.tolerance

    def failure_reasons(self) -> List[str]:
        """Human-readable reasons for a failing verdict (empty on pass)."""
        reasons: List[str] = []
        for p in self.failed_pairs:
            reasons.append(f"band {p.band:02d}: {p.error}")
        if self.pairs and not self.successful_pairs:
            reasons.append("no band pair could be compared (all pairs failed)")
        for p in self.successful_pairs:
            if not p.finite:
                reasons.append(f"band {p.band:02d}: non-finite difference ({p.max_difference})")
            elif p.max_difference > self.tolerance:
                reasons.append(
                    f"band {p.band:02d}: difference {p.max_difference:.6g} exceeds tolerance {self.tolerance:.6g}"
                )
        if self.fail_on_one_sided and self.has_one_sided:
            reasons.append(
                f"one-sided bands: missing in current={list(self.missing_in_current)}, "
                f"missing in baseline={list(self.missing_in_baseline)}"
            )
        return reasons

    def to_frame(self) -> pd.DataFrame:
        """One row per compared band, ascending band order."""
        rows = []
        for p in self.pairs:
            rows.append(
                {
                    "band": p.band,
                    "status": p.status,
                    "max_difference": np.nan if p.max_difference is None else float(p.max_difference),
                    "n_samples": int(p.n_samples),
                    "within_tolerance": bool(p.finite and p.max_difference <= self.tolerance),
                    "current_path": str(p.current_path),
                    "baseline_path": str(p.baseline_path),
                    "error": "" if p.error is None else f"{type(p.error).__name__}: {p.error}",
                }
            )
        cols = [
            "band",
            "status",
            "max_difference",
            "n_samples",
            "within_tolerance",
            "current_path",
            "baseline_path",
            "error",
        ]
        return pd.DataFrame(rows, columns=cols)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly provenance dict (non-finite floats become strings)."""

        def _num(x: Optional[float]) -> Any:
            if x is None:
                return None
            return float(x) if math.isfinite(x) else str(x)

        return {
            "current_dir": str(self.current_dir),
            "baseline_dir": str(self.baseline_dir),
            "tolerance": float(self.tolerance),
            "within_tolerance": self.within_tolerance,
            "max_difference": _num(self.max_difference),
            "worst_band": self.worst_band,
            "cancelled": self.cancelled,
            "fail_on_one_sided": self.fail_on_one_sided,
            "missing_in_current": list(self.missing_in_current),
            "missing_in_baseline": list(self.missing_in_baseline),
            "pairs": [
                {
                    "band": p.band,
                    "status": p.status,
                    "max_difference": _num(p.max_difference),
                    "n_samples": int(p.n_samples),
                    "current_path": str(p.current_path),
                    "baseline_path": str(p.baseline_path),
                    "error_type": None if p.error is None else type(p.error).__name__,
                    "error": None if p.error is None else str(p.error),
                }
                for p in self.pairs
            ],
            "failure_reasons": self.failure_reasons(),
            "warnings": list(self.warnings),
        }
