import unittest
from pathlib import Path
import tempfile
from unittest import mock


from tls_stats.io import read_json, write_bytes_atomic, write_json_atomic, write_text_atomic


class TestSafeIO(unittest.TestCase):
    def test_write_json_is_atomic_and_cleans_temp(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            out_dir = root / "out"
            out_path = out_dir / "tls-stats-current.json"

            payload = {"generationDate": "2026-10-18", "protocols": [{"id": 771, "percent": 0.5}]}
            write_json_atomic(out_path, payload)

            # File written and readable
            self.assertTrue(out_path.exists())
            self.assertEqual(payload, read_json(out_path))

            # Field order preserved
            self.assertTrue(out_path.read_text(encoding="utf-8").startswith('{\n "generationDate"'))

            # No temp files left behind on success
            tmp_files = list(out_dir.glob("*.tmp"))
            self.assertEqual([], tmp_files)

    def test_failed_replace_keeps_old_file_and_cleans_temp(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out_path = Path(td) / "report.json"
            write_text_atomic(out_path, "old\n")

            with mock.patch("tls_stats.io.fs.os.replace", side_effect=OSError("disk full")):
                with self.assertRaises(OSError):
                    write_text_atomic(out_path, "new\n")

            self.assertEqual("old\n", out_path.read_text(encoding="utf-8"))
            self.assertEqual([], list(Path(td).glob("*.tmp")))

    def test_write_bytes_counts_and_skips_empty_chunks(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out_path = Path(td) / "data" / "browser-stats.tsv"
            n = write_bytes_atomic(out_path, [b"a\tb\n", b"", b"c\n"])

            self.assertEqual(6, n)
            self.assertEqual(b"a\tb\nc\n", out_path.read_bytes())


if __name__ == "__main__":
    unittest.main()
