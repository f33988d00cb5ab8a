"""Pairwise max-norm comparison of two visibility sequences.

The metric is the largest complex modulus of the elementwise difference,

    d = max_i |a[i] - b[i]|,   |z| = sqrt(Re(z)^2 + Im(z)^2)

a max-norm rather than a mean or RMS, so a single large regression is never
averaged away. Non-finite inputs are not filtered: a NaN or inf anywhere in
either sequence makes ``d`` non-finite.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from vis_gen_diff.errors import LengthMismatchError


def abs_difference(current: np.ndarray, baseline: np.ndarray, *, band: Optional[int] = None) -> np.ndarray:
    """Elementwise ``|current - baseline|`` as float64, after a strict length check."""
    a = np.asarray(current, dtype=np.complex128).ravel()
    b = np.asarray(baseline, dtype=np.complex128).ravel()
    if a.shape[0] != b.shape[0]:
        raise LengthMismatchError(a.shape[0], b.shape[0], band=band)
    # inf - inf is NaN and overflow to inf is expected; both must propagate quietly.
    with np.errstate(invalid="ignore", over="ignore"):
        return np.abs(a - b)


def max_abs_difference(current: np.ndarray, baseline: np.ndarray, *, band: Optional[int] = None) -> float:
    """Largest ``|current[i] - baseline[i]|``.

    Parameters
    ----------
    current, baseline:
        1-D complex arrays of equal length.
    band:
        Optional band index, only used for error context.

    Returns
    -------
    float
        The max-norm. NaN or inf if any sample of either input is non-finite.
        ``0.0`` for two empty inputs.

    Raises
    ------
    LengthMismatchError
        If the inputs differ in length. The shorter one is never padded and the
        longer one is never truncated.
    """
    d = abs_difference(current, baseline, band=band)
    if d.size == 0:
        return 0.0
    # np.max propagates NaN, unlike np.nanmax / builtin max.
    return float(np.max(d))
