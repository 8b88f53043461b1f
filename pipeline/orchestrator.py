"""pipeline.orchestrator

High-level entrypoints for the TLS statistics pipeline.

Design principles
-----------------
- Keep the CLI thin: parse args + build a config + call functions here.
- Keep filesystem layout rules centralized (:mod:`tls_stats.io.layout`).
- Keep the cache policy in one place (:mod:`pipeline.cache`): nothing here
  decides on its own whether a report is fresh.
- Fail before writing: if a source dataset is unavailable, the error
  propagates and the current report is left untouched.

This module is intentionally "boring": it wires together existing components.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from pipeline.aggregate import Analysis, analyse
from pipeline.cache import ReportCache
from pipeline.models import StatsConfig
from pipeline.normalize import DEFAULT_NORMALIZER, KeyNormalizer, load_normalizer
from pipeline.report import build_report, render_text
from tls_stats.domain import CapabilityProfile, StatisticsReport, UsageRecord
from tools.download import Fetcher, download_sources, fetch_to_file
from tools.sources import load_capabilities, load_usage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatsRequest:
    """One invocation of the pipeline."""

    config: StatsConfig
    force: bool = False
    fetch: Fetcher = fetch_to_file
    normalizer: Optional[KeyNormalizer] = None


def build_normalizer(config: StatsConfig) -> KeyNormalizer:
    if config.alias_tables is None:
        return DEFAULT_NORMALIZER
    logger.info("Extending alias tables from %s", config.alias_tables)
    return load_normalizer(config.alias_tables)


def fetch_sources(req: StatsRequest, *, force: bool) -> None:
    cfg = req.config
    download_sources(
        cfg.paths,
        usage_url=cfg.usage_url,
        capabilities_url=cfg.capabilities_url,
        force=force,
        timeout=cfg.timeout,
        fetch=req.fetch,
    )


def load_sources(config: StatsConfig) -> Tuple[List[UsageRecord], List[CapabilityProfile]]:
    paths = config.paths
    records = load_usage(paths.usage_data, today=config.today)
    profiles = load_capabilities(paths.capability_data)
    return records, profiles


def analyse_sources(req: StatsRequest, *, force_download: bool) -> Analysis:
    """Download (as needed), load and aggregate today's datasets."""
    fetch_sources(req, force=force_download)
    records, profiles = load_sources(req.config)
    normalizer = req.normalizer or build_normalizer(req.config)
    return analyse(records, profiles, normalizer)


def _report_cache(config: StatsConfig) -> ReportCache:
    config.paths.ensure_dirs()
    return ReportCache(paths=config.paths, today=config.today, staleness_months=config.staleness_months)


def get_stats(req: StatsRequest) -> StatisticsReport:
    """Return the current report, regenerating it when missing, stale or forced."""
    cfg = req.config

    def _compute() -> StatisticsReport:
        analysis = analyse_sources(req, force_download=req.force)
        return build_report(analysis, generation_date=cfg.today)

    return _report_cache(cfg).get(_compute, force=req.force)


def print_stats(req: StatsRequest) -> str:
    """Text rendering of freshly aggregated data.

    Always aggregates today's datasets (downloading them if needed). The
    result then goes through the regular cache policy: it replaces the JSON
    report when that one is missing, stale or ``force`` is set.
    """
    analysis = analyse_sources(req, force_download=req.force)
    report = build_report(analysis, generation_date=req.config.today)
    _report_cache(req.config).get(lambda: report, force=req.force)
    return render_text(report)
