"""tls_stats.io

Filesystem contracts and IO helpers.

Design principle
----------------
The stats home layout is a public contract: other tools read
``tls-stats-current.json`` directly. Keeping the naming rules here means the
downloader, the cache manager and the CLI cannot disagree about them.
"""

from __future__ import annotations

from .fs import read_json, write_bytes_atomic, write_json_atomic, write_text_atomic
from .layout import CURRENT_REPORT_NAME, DATE_FORMAT, StatsPaths, get_stats_paths

__all__ = [
    "CURRENT_REPORT_NAME",
    "DATE_FORMAT",
    "StatsPaths",
    "get_stats_paths",
    "read_json",
    "write_bytes_atomic",
    "write_json_atomic",
    "write_text_atomic",
]
