from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class BandCatalog:
    """
    Locator output: the band files found in one directory.

    Notes
    - files is keyed by band index; keys are unique (duplicates are rejected during discovery).
    - skipped lists names that matched prefix/suffix but whose band field is not a number.
      They are not errors; the directory may hold unrelated files.
    """
    directory: Path
    files: Dict[int, Path]
    skipped: Tuple[str, ...] = ()

    @property
    def bands(self) -> List[int]:
        return sorted(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def __contains__(self, band: object) -> bool:
        return band in self.files

    def get_band_file(self, band: int) -> Path:
        if band not in self.files:
            raise FileNotFoundError(f"No band file for band={band} in '{self.directory}'.")
        return self.files[band]
