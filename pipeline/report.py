from __future__ import annotations

"""pipeline.report

Turn an aggregate tally into a :class:`~tls_stats.domain.StatisticsReport`.

Every section is sorted by descending weight with the identifier as an
ascending tie-break, so two runs over the same data always list entries in the
same order regardless of dict iteration order.
"""

from datetime import date
from typing import Callable, List, Mapping, Optional, Tuple

from pipeline.aggregate import Analysis
from pipeline.names import catalog_cipher_names, cipher_name, curve_name, protocol_name
from tls_stats.domain import AggregateTally, ReportEntry, StatisticsReport

SECTION_RULE = "============="


def sorted_counts(counts: Mapping[int, int]) -> List[Tuple[int, int]]:
    """(id, count) pairs, heaviest first, ties by ascending id."""
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def _entries(
    counts: Mapping[int, int],
    total: int,
    name_fn: Callable[[int], str],
) -> List[ReportEntry]:
    entries: List[ReportEntry] = []
    for entry_id, count in sorted_counts(counts):
        percent = count / total if total else 0.0
        entries.append(ReportEntry(id=entry_id, name=name_fn(entry_id), percent=percent))
    return entries


def build_report_from_tally(
    tally: AggregateTally,
    *,
    start: Optional[date],
    end: Optional[date],
    generation_date: date,
    nonstandard_ciphers: Optional[Mapping[int, str]] = None,
) -> StatisticsReport:
    nonstandard = dict(nonstandard_ciphers or {})
    return StatisticsReport(
        generation_date=generation_date,
        start_date=start,
        end_date=end,
        protocols=_entries(tally.protocols, tally.total, protocol_name),
        ciphers=_entries(tally.ciphers, tally.total, lambda c: cipher_name(c, nonstandard)),
        curves=_entries(tally.curves, tally.total, curve_name),
    )


def build_report(analysis: Analysis, *, generation_date: date) -> StatisticsReport:
    """Build the report for one analysis pass.

    ``generation_date`` is the run's "today", not the end of the usage window.
    """
    return build_report_from_tally(
        analysis.tally,
        start=analysis.start,
        end=analysis.end,
        generation_date=generation_date,
        nonstandard_ciphers=catalog_cipher_names(analysis.profiles),
    )


def render_text(report: StatisticsReport) -> str:
    """Plain-text rendering: one tab-separated line per entry, three sections."""
    lines: List[str] = []
    for title, entries in (
        ("Protocols", report.protocols),
        ("Ciphers", report.ciphers),
        ("Curves", report.curves),
    ):
        lines.append(title)
        lines.append(SECTION_RULE)
        for e in entries:
            lines.append(f"\t{e.id}\t{e.percent:f}\t{e.name}")
    return "\n".join(lines) + "\n"
