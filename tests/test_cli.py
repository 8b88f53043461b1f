import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from datetime import date
from pathlib import Path
from unittest import mock

from pipeline.models import StatsConfig
from tls_stats.domain import ReportEntry, StatisticsReport
from tls_stats.errors import SourceUnavailableError
from cli.commands.stats import run_stats
import tls_stats_cli


def _report() -> StatisticsReport:
    return StatisticsReport(
        generation_date=date(2026, 10, 18),
        start_date=date(2025, 10, 1),
        end_date=date(2026, 9, 30),
        protocols=[ReportEntry(id=771, name="TLS v1.2", percent=1.0)],
        ciphers=[ReportEntry(id=4865, name="TLS_AES_128_GCM_SHA256", percent=0.75)],
        curves=[ReportEntry(id=29, name="x25519", percent=0.75)],
    )


class _StubPipeline:
    def __init__(self, home: Path) -> None:
        self.config = StatsConfig(
            home=home,
            today=date(2026, 10, 18),
            usage_url="https://example.invalid/u",
            capabilities_url="https://example.invalid/c",
        )
        self.calls = []

    def get(self, *, force: bool = False) -> StatisticsReport:
        self.calls.append(("get", force))
        return _report()

    def render(self, *, force: bool = False) -> str:
        self.calls.append(("render", force))
        return "Protocols\n=============\n"


def _run(argv, pipeline) -> str:
    buf = io.StringIO()
    with redirect_stdout(buf):
        rc = run_stats(tls_stats_cli.parse_args(argv), pipeline)
    assert rc == 0
    return buf.getvalue()


class TestCLI(unittest.TestCase):
    def test_parse_args(self) -> None:
        args = tls_stats_cli.parse_args(["-f", "--json", "--today", "2026-01-31", "--home", "/tmp/h"])
        self.assertTrue(args.force)
        self.assertTrue(args.print_json)
        self.assertFalse(args.print_text)
        self.assertEqual(date(2026, 1, 31), args.today)
        self.assertEqual(Path("/tmp/h"), args.home)

    def test_print_and_json_are_exclusive(self) -> None:
        with redirect_stdout(io.StringIO()), mock.patch("sys.stderr", new=io.StringIO()):
            with self.assertRaises(SystemExit):
                tls_stats_cli.parse_args(["--print", "--json"])

    def test_bad_today_rejected(self) -> None:
        with mock.patch("sys.stderr", new=io.StringIO()):
            with self.assertRaises(SystemExit):
                tls_stats_cli.parse_args(["--today", "18/10/2026"])

    def test_default_output_shows_table_and_location(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            stub = _StubPipeline(Path(td))
            out = _run([], stub)

            self.assertEqual([("get", False)], stub.calls)
            self.assertIn("\t771\t1.000000\tTLS v1.2\n", out)
            self.assertIn("Report generated 2026-10-18 from usage between 2025-10-01 and 2026-09-30", out)
            self.assertIn(str(stub.config.paths.current_report), out)

    def test_print_renders_with_force(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            stub = _StubPipeline(Path(td))
            out = _run(["--print", "--force"], stub)

            self.assertEqual([("render", True)], stub.calls)
            self.assertEqual("Protocols\n=============\n", out)

    def test_json_output(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = _run(["--json"], _StubPipeline(Path(td)))
            data = json.loads(out)
            self.assertEqual("2026-10-18", data["generationDate"])
            self.assertEqual(4865, data["ciphers"][0]["id"])

    def test_main_reports_unavailable_source(self) -> None:
        failing = mock.Mock()
        failing.get.side_effect = SourceUnavailableError("usage statistics", "download failed")
        err = io.StringIO()
        with tempfile.TemporaryDirectory() as td:
            with mock.patch.object(tls_stats_cli, "build_pipeline", return_value=failing), mock.patch.object(
                tls_stats_cli, "configure_logging"
            ), mock.patch("sys.stderr", new=err):
                rc = tls_stats_cli.main(["--home", td, "--no-dotenv"])

        self.assertEqual(tls_stats_cli.EXIT_SOURCE_UNAVAILABLE, rc)
        self.assertIn("usage statistics unavailable: download failed", err.getvalue())


if __name__ == "__main__":
    unittest.main()
