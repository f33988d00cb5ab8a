"""Ingest package - band file discovery and binary readers.

This package handles:
- Discovery of band files in a simulator output directory
- Reading band binaries (*.bin) into complex sample arrays

Key classes:
- BandDiscovery: Scans one directory and builds a BandCatalog
- VisibilityReader: Reads one band file into a VisibilityFile

Design principle:
- Readers validate size before decoding and never recover partial data
- The record layout is decoded in exactly one function (decode_records)
"""

from .discovery import BandDiscovery, locate_band_files
from .readers_visibility import VisibilityReader, decode_records

__all__ = [
    "BandDiscovery",
    "locate_band_files",
    "VisibilityReader",
    "decode_records",
]
