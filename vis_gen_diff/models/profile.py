"""Comparison profile -- bundles every setting that affects the verdict.

A DiffProfile groups the band naming convention, the binary record layout,
the tolerance and the one-sided band policy into one frozen dataclass.  It can be:

- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict for JSON provenance
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional
import math
import re

import numpy as np


DEFAULT_TOLERANCE = 0.001


@dataclass(frozen=True)
class BandNaming:
    """File naming convention for band files: ``<prefix><NN><suffix>``.

    width:
        Number of digits in the band field. ``None`` accepts any number of digits,
        which makes differently padded names (``band1`` / ``band01``) collide.
    """

    prefix: str = "hyperdrive_band"
    width: Optional[int] = 2
    suffix: str = ".bin"

    def __post_init__(self) -> None:
        if not self.prefix and not self.suffix:
            raise ValueError("BandNaming needs a prefix or a suffix")
        if self.width is not None and int(self.width) <= 0:
            raise ValueError("BandNaming.width must be > 0 (or None)")

    def pattern(self) -> "re.Pattern[str]":
        # Band field is any run of characters here; digit validation is done by the
        # locator so that e.g. "hyperdrive_bandxx.bin" is skipped rather than mismatched.
        body = f".{{{int(self.width)}}}" if self.width is not None else ".+?"
        return re.compile(rf"^{re.escape(self.prefix)}(?P<band>{body}){re.escape(self.suffix)}$")

    def file_name(self, band: int) -> str:
        if self.width is None:
            return f"{self.prefix}{int(band)}{self.suffix}"
        return f"{self.prefix}{int(band):0{int(self.width)}d}{self.suffix}"


@dataclass(frozen=True)
class RecordFormat:
    """Binary layout of one visibility record: ``(real, imag)``, same scalar dtype.

    The default is the simulator's native output, two little-endian float32.
    Changing this is a format-version change: byte order or width mismatches
    decode without error into wrong numbers.
    """

    dtype: str = "<f4"

    def __post_init__(self) -> None:
        dt = np.dtype(self.dtype)
        if dt.kind != "f":
            raise ValueError(f"RecordFormat.dtype must be a floating-point dtype, got {self.dtype!r}")
        if str(self.dtype)[:1] not in {"<", ">"}:
            # native order ("=", "f4") is rejected: the layout must not depend on the host.
            raise ValueError(f"RecordFormat.dtype must state its byte order explicitly, got {self.dtype!r}")

    @property
    def scalar_dtype(self) -> np.dtype:
        return np.dtype(self.dtype)

    @property
    def numpy_dtype(self) -> np.dtype:
        return np.dtype([("re", self.scalar_dtype), ("im", self.scalar_dtype)])

    @property
    def record_width(self) -> int:
        return int(self.numpy_dtype.itemsize)


@dataclass(frozen=True)
class DiffProfile:
    """Frozen configuration for one directory comparison.

    Attributes
    ----------
    tolerance : float
        Inclusive upper bound on the global maximum difference.
    naming : BandNaming
        Band file naming convention (same for both directories).
    record_format : RecordFormat
        Binary record layout.
    fail_on_one_sided : bool
        If True, bands present in only one directory fail the verdict.
        Default is warning-only.
    max_workers : int or None
        Worker pool size for per-band comparisons. ``None`` picks a default
        from the CPU count; ``1`` compares bands inline.
    """

    tolerance: float = DEFAULT_TOLERANCE
    naming: BandNaming = field(default_factory=BandNaming)
    record_format: RecordFormat = field(default_factory=RecordFormat)
    fail_on_one_sided: bool = False
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        tol = float(self.tolerance)
        if not math.isfinite(tol) or tol < 0:
            raise ValueError(f"tolerance must be a finite number >= 0, got {self.tolerance!r}")
        if self.max_workers is not None and int(self.max_workers) < 1:
            raise ValueError("max_workers must be >= 1 (or None)")

    def with_overrides(self, **kwargs: Any) -> "DiffProfile":
        """Return a copy with ``None``-valued overrides ignored."""
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tolerance": float(self.tolerance),
            "naming": {
                "prefix": self.naming.prefix,
                "width": self.naming.width,
                "suffix": self.naming.suffix,
            },
            "record_format": {
                "dtype": self.record_format.dtype,
                "record_width": self.record_format.record_width,
            },
            "fail_on_one_sided": bool(self.fail_on_one_sided),
            "max_workers": self.max_workers,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DiffProfile":
        naming = d.get("naming") or {}
        fmt = d.get("record_format") or {}
        return cls(
            tolerance=float(d.get("tolerance", DEFAULT_TOLERANCE)),
            naming=BandNaming(
                prefix=str(naming.get("prefix", "hyperdrive_band")),
                width=naming.get("width", 2),
                suffix=str(naming.get("suffix", ".bin")),
            ),
            record_format=RecordFormat(dtype=str(fmt.get("dtype", "<f4"))),
            fail_on_one_sided=bool(d.get("fail_on_one_sided", False)),
            max_workers=d.get("max_workers"),
        )
