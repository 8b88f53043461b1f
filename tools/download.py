"""tools/download.py

Fetch the two source datasets into the stats home.

Downloads are named after the day they were fetched (see
:mod:`tls_stats.io.layout`), so the same day's files are reused unless a
refresh is forced.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

import requests

from tls_stats.errors import SourceUnavailableError
from tls_stats.io import StatsPaths, write_bytes_atomic

logger = logging.getLogger(__name__)

USER_AGENT = "tls-stats/0.1"
CHUNK_SIZE = 64 * 1024

# (url, dest, timeout) -> bytes written
Fetcher = Callable[[str, Path, float], int]


def fetch_to_file(
    url: str,
    dest: Path,
    timeout: float,
    *,
    session: Optional[requests.Session] = None,
) -> int:
    """Stream ``url`` into ``dest`` atomically. Returns the byte count."""
    http = session or requests
    headers = {"User-Agent": USER_AGENT}
    with http.get(url, headers=headers, timeout=timeout, stream=True) as resp:
        resp.raise_for_status()
        return write_bytes_atomic(dest, resp.iter_content(chunk_size=CHUNK_SIZE))


def download(
    url: str,
    dest: Path,
    *,
    source: str,
    force: bool = False,
    timeout: float = 60,
    fetch: Fetcher = fetch_to_file,
) -> Path:
    """Make sure ``dest`` holds a copy of ``url``.

    An existing file is reused unless ``force`` is set. A failed forced
    refresh falls back to the existing file; a failed first download raises
    :class:`SourceUnavailableError`.
    """
    exists = dest.exists()
    if exists and not force:
        logger.info("Using existing %s (%s)", source, dest)
        return dest

    try:
        size = fetch(url, dest, timeout)
    except (requests.RequestException, OSError) as e:
        if exists:
            logger.warning("Refreshing %s from %s failed (%s); keeping %s", source, url, e, dest)
            return dest
        raise SourceUnavailableError(source, f"download from {url} failed: {e}") from e

    logger.info("Downloaded %s (%d bytes) to %s", source, size, dest)
    return dest


def download_sources(
    paths: StatsPaths,
    *,
    usage_url: str,
    capabilities_url: str,
    force: bool = False,
    timeout: float = 60,
    fetch: Fetcher = fetch_to_file,
) -> None:
    """Fetch usage statistics and client capabilities for today."""
    paths.ensure_dirs()
    download(
        usage_url,
        paths.usage_data,
        source="usage statistics",
        force=force,
        timeout=timeout,
        fetch=fetch,
    )
    download(
        capabilities_url,
        paths.capability_data,
        source="client capabilities",
        force=force,
        timeout=timeout,
        fetch=fetch,
    )
