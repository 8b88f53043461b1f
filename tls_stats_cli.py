#!/usr/bin/env python3
"""
CLI for the TLS adoption statistics pipeline.

Combines public browser usage shares with a catalog of client TLS
capabilities and reports which protocol versions, cipher suites and curves
visitors support.

Usage:
  python tls_stats_cli.py              # current report (regenerated when missing or older than 6 months)
  python tls_stats_cli.py --force      # archive the current report, re-download and regenerate
  python tls_stats_cli.py --print      # text table from today's datasets
  python tls_stats_cli.py --json       # current report as JSON
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from cli.args.base import add_base_args
from cli.commands.stats import run_stats
from pipeline.wiring import build_pipeline, configure_logging
from tls_stats.errors import SourceUnavailableError

logger = logging.getLogger("tls_stats_cli")

EXIT_SOURCE_UNAVAILABLE = 2


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Estimate TLS protocol, cipher suite and curve support among web visitors.",
    )
    add_base_args(parser)
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    pipeline = build_pipeline(load_dotenv=not args.no_dotenv, home=args.home, today=args.today)

    try:
        return run_stats(args, pipeline)
    except SourceUnavailableError as e:
        logger.error("%s", e)
        print(f"\nNo report produced: {e}", file=sys.stderr)
        return EXIT_SOURCE_UNAVAILABLE


if __name__ == "__main__":
    raise SystemExit(main())
