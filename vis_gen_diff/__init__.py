"""vis_gen_diff -- run-to-run consistency checks for visibility simulator output.

The simulator writes one binary file per frequency band
(``hyperdrive_bandNN.bin``), each a flat sequence of complex visibilities.
This package compares a "current" output directory against a "baseline"
directory band by band and reports the largest difference.

This package provides tools for:
- Locating band files and extracting band indices
- Reading band binaries into complex sample arrays
- Computing the max-norm difference of two sample arrays
- Comparing whole directories with per-band fault isolation

Key principles:
- No silent truncation: size and length mismatches are errors
- No silent NaN: non-finite data always fails the check
- Every band is reported, even when some fail

Main subpackages:
- analysis: Pairwise comparison
- ingest: Band discovery and file readers
- models: Data models (BandCatalog, VisibilityFile, PairResult, ComparisonReport, DiffProfile)
- validation: Directory orchestration and the command-line entry point
"""

from vis_gen_diff.validation.band_runner import compare_directories, verify_directories

__all__ = ["compare_directories", "verify_directories"]
