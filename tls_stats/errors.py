"""tls_stats.errors

Exceptions that cross package boundaries.

Most recoverable problems (a malformed TSV line, a usage record with no
matching client profile, an unreadable cached report) are absorbed where they
happen and only show up in logs and diagnostic counters. The one condition that
must reach the caller is a missing source dataset.
"""

from __future__ import annotations


class SourceUnavailableError(RuntimeError):
    """A source dataset could not be downloaded or read.

    Raised before any report is built, so a run never writes a partial
    report.
    """

    def __init__(self, source: str, cause: str) -> None:
        super().__init__(f"{source} unavailable: {cause}")
        self.source = source
        self.cause = cause
