from __future__ import annotations

"""pipeline.cache

Staleness-aware handling of the current report artifact.

States
------
``NO_REPORT``  no current report, or one that cannot be read back
``FRESH``      generated within the staleness window: served as is
``STALE``      older than the window: archived, then recomputed

A forced refresh archives whatever readable report exists and recomputes
without looking at its age. Archived reports are named after their own
generation date and are never edited afterwards.
"""

import calendar
import enum
import logging
import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from pipeline.core import STALENESS_MONTHS
from tls_stats.domain import StatisticsReport
from tls_stats.io import StatsPaths, read_json, write_json_atomic

logger = logging.getLogger(__name__)


class CacheState(enum.Enum):
    NO_REPORT = "no_report"
    FRESH = "fresh"
    STALE = "stale"


def months_before(d: date, months: int) -> date:
    """Same day ``months`` calendar months earlier, clamped to month end."""
    idx = d.year * 12 + (d.month - 1) - months
    year, month = divmod(idx, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def staleness_cutoff(today: date, months: int = STALENESS_MONTHS) -> date:
    return months_before(today, months)


def classify(report: Optional[StatisticsReport], *, today: date, months: int = STALENESS_MONTHS) -> CacheState:
    if report is None:
        return CacheState.NO_REPORT
    if report.generation_date < staleness_cutoff(today, months):
        return CacheState.STALE
    return CacheState.FRESH


@dataclass
class ReportCache:
    """The current report for one stats home."""

    paths: StatsPaths
    today: date
    staleness_months: int = STALENESS_MONTHS

    @property
    def current_path(self) -> Path:
        return self.paths.current_report

    def load(self) -> Optional[StatisticsReport]:
        """Read the current report. Missing or unreadable reports yield None."""
        p = self.current_path
        if not p.exists():
            return None
        try:
            return StatisticsReport.from_dict(read_json(p))
        except (OSError, ValueError, TypeError, KeyError) as e:
            logger.warning("Ignoring unreadable report %s (%s); it will be regenerated", p, e)
            return None

    def state(self) -> CacheState:
        return classify(self.load(), today=self.today, months=self.staleness_months)

    def archive(self, report: Optional[StatisticsReport] = None) -> Optional[Path]:
        """Move the current report aside, named after its generation date.

        Only readable reports are archived; an unreadable one stays in place
        and is overwritten by the next write. A failed move raises, leaving the
        current report where it was.
        """
        report = report if report is not None else self.load()
        if report is None:
            return None
        target = self.paths.archive_for(report.generation_date)
        try:
            os.replace(self.current_path, target)
        except OSError as e:
            logger.error("Could not archive %s to %s: %s", self.current_path, target, e)
            raise
        logger.info("Archived report generated %s to %s", report.generation_date.isoformat(), target)
        return target

    def write(self, report: StatisticsReport) -> Path:
        write_json_atomic(self.current_path, report.to_dict())
        return self.current_path

    def get(
        self,
        compute: Callable[[], StatisticsReport],
        *,
        force: bool = False,
    ) -> StatisticsReport:
        """Return the current report, recomputing it when needed."""
        report = self.load()
        state = classify(report, today=self.today, months=self.staleness_months)

        if state is CacheState.FRESH and not force:
            logger.info("Using report generated %s", report.generation_date.isoformat())
            return report

        if force:
            logger.info("Forced refresh (current report: %s)", state.value)
        else:
            logger.info("Recomputing report (current report: %s)", state.value)

        fresh = compute()
        if report is not None:
            # Raises on failure so the old report is never overwritten.
            self.archive(report)
        self.write(fresh)
        return fresh
