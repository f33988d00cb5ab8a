from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class VisibilityFile:
    """
    In-memory representation of one band file after decoding.

    Notes
    - samples is a 1-D complex128 array in file record order.
    - Held only for one pairwise comparison; nothing caches it.
    """
    source_path: Path
    samples: np.ndarray
    band: Optional[int] = None

    @property
    def n_samples(self) -> int:
        return int(self.samples.shape[0])
