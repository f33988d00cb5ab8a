from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
import re

from vis_gen_diff.errors import DirectoryAccessError, DuplicateBandError
from vis_gen_diff.models.catalog import BandCatalog
from vis_gen_diff.models.profile import BandNaming


_DIGITS = re.compile(r"[0-9]+")


def _parse_band(token: str) -> Optional[int]:
    """
    Parse the band field of a file name as an unsigned integer.

    Leading zeros are fine ("01" -> 1). Anything that is not plain ASCII digits
    (signs, spaces, letters, unicode digits) returns None.
    """
    if not _DIGITS.fullmatch(token):
        return None
    return int(token)


@dataclass
class BandDiscovery:
    """
    Build a band catalog for one output directory.

    STRICT POLICY
      - the directory must exist and be listable (DirectoryAccessError otherwise)
      - names must match <prefix><band><suffix> exactly (case-sensitive)
      - non-numeric band fields are skipped, never guessed
      - two files resolving to the same band index is a DuplicateBandError
    """
    naming: BandNaming = field(default_factory=BandNaming)

    def build_catalog(self, directory: str | Path) -> BandCatalog:
        selected = Path(directory).expanduser()
        if not selected.exists():
            raise DirectoryAccessError(selected, "does not exist")
        if not selected.is_dir():
            raise DirectoryAccessError(selected, "not a directory")

        try:
            entries = sorted(selected.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DirectoryAccessError(selected, f"{type(e).__name__}: {e}") from e

        pat = self.naming.pattern()
        found: Dict[int, List[Path]] = {}
        skipped: List[str] = []

        for p in entries:
            m = pat.match(p.name)
            if not m:
                continue
            if not p.is_file():
                continue
            band = _parse_band(m.group("band"))
            if band is None:
                skipped.append(p.name)
                continue
            found.setdefault(band, []).append(p)

        files: Dict[int, Path] = {}
        for band in sorted(found):
            paths = found[band]
            if len(paths) > 1:
                raise DuplicateBandError(band, paths)
            files[band] = paths[0]

        return BandCatalog(directory=selected, files=files, skipped=tuple(skipped))


def locate_band_files(directory: str | Path, naming: Optional[BandNaming] = None) -> BandCatalog:
    """Scan ``directory`` for band files; see :class:`BandDiscovery`."""
    return BandDiscovery(naming=naming or BandNaming()).build_catalog(directory)
