"""pipeline.pipeline

This module defines a *single, high-level* object that represents this repo's
primary capabilities.

Why this exists
---------------
The behavior is implemented across several modules:

- :mod:`pipeline.orchestrator` wires downloads, aggregation and the cache.
- :mod:`pipeline.aggregate` and :mod:`pipeline.report` hold the engine.
- :mod:`pipeline.cache` decides when a report is regenerated.

Callers (CLI, scripts, notebooks) should not have to wire those together. The
:class:`~pipeline.pipeline.TLSStatsPipeline` facade gives them one obvious
entrypoint with a small API:

- ``get(...)``: the current report (cached unless stale or forced)
- ``render(...)``: a text rendering of freshly aggregated data
"""

from __future__ import annotations

from collections.abc import Callable

from pipeline.models import StatsConfig
from pipeline.orchestrator import StatsRequest, get_stats, print_stats
from tls_stats.domain import StatisticsReport
from tools.download import Fetcher, fetch_to_file


class TLSStatsPipeline:
    """High-level facade over the pipeline.

    Callers should prefer using this object (built via :func:`pipeline.wiring.build_pipeline`)
    rather than importing low-level modules directly.
    """

    def __init__(
        self,
        config: StatsConfig,
        *,
        fetch: Fetcher = fetch_to_file,
        get_fn: Callable[[StatsRequest], StatisticsReport] = get_stats,
        render_fn: Callable[[StatsRequest], str] = print_stats,
    ) -> None:
        self.config = config
        self._fetch = fetch
        self._get_fn = get_fn
        self._render_fn = render_fn

    def _request(self, force: bool) -> StatsRequest:
        return StatsRequest(config=self.config, force=force, fetch=self._fetch)

    def get(self, *, force: bool = False) -> StatisticsReport:
        """Current report. ``force`` archives it and regenerates from fresh downloads."""
        return self._get_fn(self._request(force))

    def render(self, *, force: bool = False) -> str:
        return self._render_fn(self._request(force))
