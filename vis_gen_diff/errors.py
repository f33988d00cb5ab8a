"""Error taxonomy for band-file comparison.

Two families:

- Setup errors (:class:`DirectoryAccessError`, :class:`DuplicateBandError`,
  :class:`NoComparableBandsError`) mean no comparison is possible and
  propagate to the caller.
- Pair errors (everything else) are caught by the orchestrator and recorded
  on the offending :class:`~vis_gen_diff.models.results.PairResult`.

Every error carries the band index and/or file path needed to find the
offending file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class VisDiffError(Exception):
    """Base class for every error raised by vis_gen_diff."""

    def __init__(self, message: str, *, path: Optional[Path] = None, band: Optional[int] = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.band = band


# ---------------------------------------------------------------------------
# Setup errors
# ---------------------------------------------------------------------------


class DirectoryAccessError(VisDiffError):
    """A band directory does not exist, is not a directory, or cannot be listed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot scan directory {str(path)!r}: {reason}", path=path)
        self.reason = reason


class DuplicateBandError(VisDiffError):
    """Two files in one directory resolve to the same band index."""

    def __init__(self, band: int, paths: Sequence[Path]) -> None:
        names = ", ".join(repr(Path(p).name) for p in paths)
        directory = Path(paths[0]).parent if paths else None
        super().__init__(
            f"Band {band:02d} is ambiguous in {str(directory)!r}: {names}",
            path=directory,
            band=band,
        )
        self.paths = tuple(Path(p) for p in paths)


class NoComparableBandsError(VisDiffError):
    """The two directories share no band index."""

    def __init__(self, current_dir: Path, baseline_dir: Path, n_current: int, n_baseline: int) -> None:
        super().__init__(
            f"No band is present in both {str(current_dir)!r} ({n_current} band files) "
            f"and {str(baseline_dir)!r} ({n_baseline} band files); nothing to verify."
        )
        self.current_dir = Path(current_dir)
        self.baseline_dir = Path(baseline_dir)


# ---------------------------------------------------------------------------
# Pair errors
# ---------------------------------------------------------------------------


class BandFileAccessError(VisDiffError):
    """A band file listed during discovery cannot be opened or stat'ed."""

    def __init__(self, path: Path, reason: str, *, band: Optional[int] = None) -> None:
        super().__init__(f"Cannot read {str(path)!r}: {reason}", path=path, band=band)


class MalformedFileError(VisDiffError):
    """File size is not a positive multiple of the record width."""

    def __init__(self, path: Path, size: int, record_width: int, *, band: Optional[int] = None) -> None:
        if size == 0:
            detail = "file is empty"
        else:
            detail = (
                f"{size} bytes is not a multiple of the {record_width}-byte record width "
                f"({size // record_width} whole records, {size % record_width} bytes left over)"
            )
        super().__init__(
            f"An invalid number of bytes in {str(path)!r}: {detail}. "
            "Does this file really contain visibilities?",
            path=path,
            band=band,
        )
        self.size = int(size)
        self.record_width = int(record_width)


class TruncatedFileError(VisDiffError):
    """The read stopped short of the size measured before reading."""

    def __init__(self, path: Path, expected: int, got: int, *, band: Optional[int] = None) -> None:
        super().__init__(
            f"Short read from {str(path)!r}: expected {expected} bytes, got {got}",
            path=path,
            band=band,
        )
        self.expected = int(expected)
        self.got = int(got)


class LengthMismatchError(VisDiffError):
    """Current and baseline files of one band hold different sample counts."""

    def __init__(self, n_current: int, n_baseline: int, *, band: Optional[int] = None) -> None:
        super().__init__(
            "current and baseline have different amounts of data: "
            f"current={n_current} samples, baseline={n_baseline} samples",
            band=band,
        )
        self.n_current = int(n_current)
        self.n_baseline = int(n_baseline)


class ComparisonCancelledError(VisDiffError):
    """The pair was not compared because cancellation or the deadline came first."""

    def __init__(self, reason: str, *, band: Optional[int] = None) -> None:
        super().__init__(f"not compared: {reason}", band=band)
        self.reason = reason


SETUP_ERRORS = (DirectoryAccessError, DuplicateBandError, NoComparableBandsError)
