"""pipeline.models

Lightweight data structures used across the pipeline.

Why this exists
---------------
The stats home, the download URLs and "today" used to be process-wide globals
computed at import time. That made the pipeline impossible to test without a
real home directory and a real clock.

:class:`StatsConfig` carries all of it explicitly. Build one in
:mod:`pipeline.wiring` (from the environment) or directly in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

from pipeline.core import (
    CAPABILITIES_URL,
    DEFAULT_HOME,
    HTTP_TIMEOUT_SECONDS,
    STALENESS_MONTHS,
    USAGE_URL,
)
from tls_stats.io import StatsPaths, get_stats_paths


@dataclass(frozen=True)
class StatsConfig:
    """Everything one run needs to know about its environment.

    Fields
    ------
    home:
        Root of the stats home (``data/`` and ``stats/`` live below it).
    today:
        The run's calendar day. Used for dated download names, the report's
        generation date, the staleness check and the usage window.
    usage_url / capabilities_url:
        Where the two source datasets are downloaded from.
    alias_tables:
        Optional YAML file extending the built-in family/version tables.
    staleness_months:
        Age after which the current report is regenerated.
    timeout:
        HTTP timeout in seconds for each download.
    """

    home: Path = field(default_factory=lambda: DEFAULT_HOME.expanduser())
    today: date = field(default_factory=date.today)
    usage_url: str = USAGE_URL
    capabilities_url: str = CAPABILITIES_URL
    alias_tables: Optional[Path] = None
    staleness_months: int = STALENESS_MONTHS
    timeout: float = HTTP_TIMEOUT_SECONDS

    @property
    def paths(self) -> StatsPaths:
        return get_stats_paths(self.home, self.today)
