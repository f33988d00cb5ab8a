"""Validation utilities.

This package contains *non-interactive* tooling for run-to-run consistency
checks of simulator band outputs.

Design goals
------------
1) Keep the comparison engine free of console/CLI concerns.
2) Make comparisons reproducible and scriptable (CLI-style entry points).
3) Report every band, even when some of them fail.
"""

from .band_runner import compare_catalogs, compare_directories, split_bands, verify_directories

__all__ = [
    "compare_catalogs",
    "compare_directories",
    "split_bands",
    "verify_directories",
]
