"""tools/sources/usage.py

Browser/OS usage-share TSV -> :class:`~tls_stats.domain.UsageRecord`.

Columns: date, OS family, OS major version, browser family, browser major
version, count. The file covers several years; only about the most recent year
is kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Optional

from tls_stats.domain import UsageRecord
from tls_stats.errors import SourceUnavailableError
from tls_stats.io import DATE_FORMAT

logger = logging.getLogger(__name__)

MIN_COLUMNS = 6


@dataclass
class UsageParse:
    records: List[UsageRecord]
    skipped: int = 0


def parse_usage_line(line: str) -> Optional[UsageRecord]:
    """Parse one TSV line. Returns None for headers and malformed lines."""
    data = line.rstrip("\r\n").split("\t")
    if len(data) < MIN_COLUMNS:
        return None
    try:
        count = int(data[5])
        day = datetime.strptime(data[0], DATE_FORMAT).date()
    except ValueError:
        return None
    if count < 0:
        return None
    return UsageRecord(
        date=day,
        os_family=data[1],
        os_major_version=data[2],
        browser_family=data[3],
        browser_major_version=data[4],
        weight=count,
    )


def coarse_cutoff(today: date) -> date:
    """Records on or before this day are dropped while reading.

    Roughly "a year ago and a bit": the end of November two calendar years
    back. :func:`trim_to_last_year` narrows it afterwards.
    """
    return date(today.year - 2, 11, 30)


def parse_usage_lines(lines: Iterable[str], *, after: Optional[date] = None) -> UsageParse:
    out = UsageParse(records=[])
    for line in lines:
        if not line.strip():
            continue
        record = parse_usage_line(line)
        if record is None:
            out.skipped += 1
            continue
        if after is not None and record.date <= after:
            continue
        out.records.append(record)
    return out


def trim_to_last_year(records: List[UsageRecord]) -> List[UsageRecord]:
    """Keep records strictly after one year before the latest record."""
    if len(records) < 2:
        return list(records)
    latest = max(r.date for r in records)
    try:
        year_ago = latest.replace(year=latest.year - 1)
    except ValueError:
        # Feb 29 -> Feb 28
        year_ago = latest.replace(year=latest.year - 1, day=28)
    return [r for r in records if r.date > year_ago]


def load_usage(path: Path, *, today: date) -> List[UsageRecord]:
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8", errors="replace") as f:
            parsed = parse_usage_lines(f, after=coarse_cutoff(today))
    except OSError as e:
        raise SourceUnavailableError("usage statistics", f"cannot read {p}: {e}") from e

    if parsed.skipped:
        # A header line, if present, is one of these.
        logger.warning("Skipped %d malformed usage lines in %s", parsed.skipped, p)

    records = trim_to_last_year(parsed.records)
    logger.info("Loaded %d usage records from %s", len(records), p)
    return records
