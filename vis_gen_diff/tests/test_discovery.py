import unittest
import tempfile
from pathlib import Path

from vis_gen_diff.errors import DirectoryAccessError, DuplicateBandError
from vis_gen_diff.ingest.discovery import BandDiscovery, locate_band_files
from vis_gen_diff.models.profile import BandNaming


class TestBandDiscovery(unittest.TestCase):
    def _touch(self, root: Path, name: str, nbytes: int = 8) -> Path:
        p = root / name
        p.write_bytes(b"\x00" * nbytes)
        return p

    def test_matches_prefix_width_suffix(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            self._touch(root, "hyperdrive_band01.bin")
            self._touch(root, "hyperdrive_band12.bin")
            self._touch(root, "hyperdrive_band3.bin")      # wrong width
            self._touch(root, "hyperdrive_band001.bin")    # wrong width
            self._touch(root, "hyperdrive_band02.bin.bak")
            self._touch(root, "Hyperdrive_band04.bin")     # case-sensitive prefix
            self._touch(root, "notes.txt")

            cat = locate_band_files(root)
            self.assertEqual(cat.bands, [1, 12])
            self.assertEqual(cat.get_band_file(1).name, "hyperdrive_band01.bin")
            self.assertEqual(cat.skipped, ())

    def test_non_numeric_band_is_skipped(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            self._touch(root, "hyperdrive_band01.bin")
            self._touch(root, "hyperdrive_bandxx.bin")
            self._touch(root, "hyperdrive_band+1.bin")

            cat = locate_band_files(root)
            self.assertEqual(cat.bands, [1])
            self.assertEqual(sorted(cat.skipped), ["hyperdrive_band+1.bin", "hyperdrive_bandxx.bin"])

    def test_leading_zeros_parse_as_integer(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            self._touch(root, "hyperdrive_band00.bin")
            self._touch(root, "hyperdrive_band09.bin")
            cat = locate_band_files(root)
            self.assertEqual(cat.bands, [0, 9])
            self.assertIn(9, cat)
            self.assertNotIn(10, cat)

    def test_directories_are_ignored(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            (root / "hyperdrive_band05.bin").mkdir()
            self._touch(root, "hyperdrive_band06.bin")
            cat = locate_band_files(root)
            self.assertEqual(cat.bands, [6])

    def test_duplicate_band_with_free_width(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            self._touch(root, "hyperdrive_band1.bin")
            self._touch(root, "hyperdrive_band01.bin")
            disc = BandDiscovery(naming=BandNaming(width=None))
            with self.assertRaises(DuplicateBandError) as ctx:
                disc.build_catalog(root)
            self.assertEqual(ctx.exception.band, 1)
            self.assertEqual(len(ctx.exception.paths), 2)
            self.assertIn("hyperdrive_band01.bin", str(ctx.exception))

    def test_free_width_accepts_any_digit_count(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            self._touch(root, "hyperdrive_band1.bin")
            self._touch(root, "hyperdrive_band123.bin")
            cat = locate_band_files(root, BandNaming(width=None))
            self.assertEqual(cat.bands, [1, 123])

    def test_missing_directory(self):
        with tempfile.TemporaryDirectory() as d:
            missing = Path(d) / "baseline"
            with self.assertRaises(DirectoryAccessError) as ctx:
                locate_band_files(missing)
            self.assertEqual(ctx.exception.path, missing)
            self.assertIn("does not exist", str(ctx.exception))

    def test_file_instead_of_directory(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._touch(Path(d), "hyperdrive_band01.bin")
            with self.assertRaises(DirectoryAccessError):
                locate_band_files(p)

    def test_empty_directory_gives_empty_catalog(self):
        with tempfile.TemporaryDirectory() as d:
            cat = locate_band_files(d)
            self.assertEqual(len(cat), 0)
            self.assertEqual(cat.bands, [])


if __name__ == "__main__":
    unittest.main()
