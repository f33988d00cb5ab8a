from .catalog import BandCatalog
from .frames import VisibilityFile
from .profile import BandNaming, DiffProfile, RecordFormat
from .results import ComparisonReport, PairResult

__all__ = [
    "BandCatalog",
    "VisibilityFile",
    "BandNaming",
    "DiffProfile",
    "RecordFormat",
    "ComparisonReport",
    "PairResult",
]
