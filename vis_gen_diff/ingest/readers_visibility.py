from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import numpy as np

from vis_gen_diff.errors import BandFileAccessError, MalformedFileError, TruncatedFileError
from vis_gen_diff.models.frames import VisibilityFile
from vis_gen_diff.models.profile import RecordFormat


DEFAULT_RECORD_FORMAT = RecordFormat()


def decode_records(buf: bytes, fmt: RecordFormat = DEFAULT_RECORD_FORMAT) -> np.ndarray:
    """
    Decode a buffer of ``(real, imag)`` records into a complex128 array.

    This is the only place that knows the on-disk record layout. The buffer
    length must be a whole number of records.
    """
    width = fmt.record_width
    if len(buf) % width != 0:
        raise ValueError(f"buffer of {len(buf)} bytes is not a multiple of the {width}-byte record width")
    rec = np.frombuffer(buf, dtype=fmt.numpy_dtype)
    out = np.empty(rec.shape[0], dtype=np.complex128)
    out.real = rec["re"]
    out.imag = rec["im"]
    return out


@dataclass
class VisibilityReader:
    """
    STRICT reader for simulator band files (*.bin).

    Contract:
      - The file is a flat sequence of fixed-width records, no header.
      - Size MUST be a positive multiple of the record width (MalformedFileError).
      - The whole declared size MUST be read (TruncatedFileError otherwise).
      - No byte-order detection, no unit conversion, no partial recovery.
    """
    fmt: RecordFormat = field(default_factory=RecordFormat)

    def read(self, file_path: str | Path, band: Optional[int] = None) -> VisibilityFile:
        path = Path(file_path).expanduser()
        width = self.fmt.record_width

        try:
            size = int(path.stat().st_size)
        except OSError as e:
            raise BandFileAccessError(path, f"{type(e).__name__}: {e}", band=band) from e

        if size <= 0 or size % width != 0:
            raise MalformedFileError(path, size, width, band=band)

        try:
            with open(path, "rb") as f:
                buf = f.read(size)
        except OSError as e:
            raise BandFileAccessError(path, f"{type(e).__name__}: {e}", band=band) from e

        if len(buf) != size:
            raise TruncatedFileError(path, size, len(buf), band=band)

        return VisibilityFile(source_path=path, samples=decode_records(buf, self.fmt), band=band)
