"""tls_stats.io.layout

Canonical filesystem layout for datasets and reports.

All paths hang off a single home directory (``~/.tls-stats`` by default)::

    <home>/data/browser-stats-<YYYY-MM-DD>.tsv     usage shares, by download day
    <home>/data/device-ciphers-<YYYY-MM-DD>.json   client capabilities, by download day
    <home>/stats/tls-stats-current.json            the current report
    <home>/stats/tls-stats-<YYYY-MM-DD>.json       archived reports, by generation day

Downloads are dated with the day they were fetched, so re-running on the same
day reuses the same files. Archived reports are named after their own
generation date, not the day they were archived.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Union

DATE_FORMAT = "%Y-%m-%d"

CURRENT_REPORT_NAME = "tls-stats-current.json"


def _day(d: date) -> str:
    return d.strftime(DATE_FORMAT)


@dataclass(frozen=True)
class StatsPaths:
    """Resolved paths for one home directory and one day."""

    home: Path
    stats_dir: Path
    data_dir: Path
    usage_data: Path
    capability_data: Path
    current_report: Path

    def archive_for(self, generation_date: date) -> Path:
        """Where a report generated on ``generation_date`` is archived."""
        return self.stats_dir / f"tls-stats-{_day(generation_date)}.json"

    def ensure_dirs(self) -> None:
        self.stats_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)


def get_stats_paths(home: Union[str, Path], today: date) -> StatsPaths:
    h = Path(home).expanduser()
    stats_dir = h / "stats"
    data_dir = h / "data"
    return StatsPaths(
        home=h,
        stats_dir=stats_dir,
        data_dir=data_dir,
        usage_data=data_dir / f"browser-stats-{_day(today)}.tsv",
        capability_data=data_dir / f"device-ciphers-{_day(today)}.json",
        current_report=stats_dir / CURRENT_REPORT_NAME,
    )
