# tools/sources/__init__.py
"""Parsers for the two source datasets.

Each parser turns one downloaded file into typed records from
:mod:`tls_stats.domain`. Lines or objects that cannot be parsed are skipped
and counted, never fatal; a file that cannot be read at all raises
:class:`~tls_stats.errors.SourceUnavailableError`.
"""

from .capabilities import load_capabilities, parse_capabilities
from .usage import load_usage, parse_usage_lines, trim_to_last_year

__all__ = [
    "load_capabilities",
    "load_usage",
    "parse_capabilities",
    "parse_usage_lines",
    "trim_to_last_year",
]
