"""tls_stats.domain

Domain objects that form the *contract* between pipeline stages.

Key idea
--------
The usage dataset and the capability catalog are published independently and
name browsers differently. Parsers turn each into typed records; the pipeline
joins them and produces a report. None of the stages pass raw dicts around.
"""

from __future__ import annotations

from .records import AggregateTally, CapabilityProfile, UsageRecord
from .report import SECTIONS, MappedStatisticsReport, ReportEntry, StatisticsReport

__all__ = [
    "AggregateTally",
    "CapabilityProfile",
    "MappedStatisticsReport",
    "ReportEntry",
    "SECTIONS",
    "StatisticsReport",
    "UsageRecord",
]
