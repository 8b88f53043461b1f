from __future__ import annotations

import argparse
from datetime import date, datetime
from pathlib import Path

from tls_stats.io import DATE_FORMAT


def _iso_day(raw: str) -> date:
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {raw!r}")


def add_base_args(parser: argparse.ArgumentParser) -> None:
    """Register the CLI flags.

    This includes:
    - refresh control (--force)
    - output selection (--print / --json)
    - stats home and run date overrides
    - logging verbosity
    """

    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Re-download the datasets and regenerate the report, even if the current one is fresh",
    )

    out = parser.add_mutually_exclusive_group()
    out.add_argument(
        "--print",
        dest="print_text",
        action="store_true",
        help="Print a text table aggregated from today's datasets (the JSON report is updated as usual; with --force it is archived and replaced)",
    )
    out.add_argument(
        "--json",
        dest="print_json",
        action="store_true",
        help="Print the current report as JSON",
    )

    parser.add_argument(
        "--home",
        type=Path,
        default=None,
        help="Stats home directory (default: $TLS_STATS_HOME or ~/.tls-stats)",
    )
    parser.add_argument(
        "--today",
        type=_iso_day,
        default=None,
        help="Run as if today were YYYY-MM-DD (dated downloads, staleness, generation date)",
    )
    parser.add_argument(
        "--no-dotenv",
        action="store_true",
        help="Do not load KEY=VALUE pairs from the repo's .env file",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging (lists every unmatched browser key)")
