"""tls_stats.io.fs

Atomic, stable filesystem writers.

Why this module exists
----------------------
The current report is read back on every run to decide whether it is still
fresh. A report left half-written by an interrupted run would look corrupt and
force a recompute, so every artifact the pipeline produces (reports and
downloaded datasets alike) goes through a temp file + ``os.replace``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)


def _atomic_write(
    path: Path,
    write_fn,
    *,
    mode: str = "w",
    encoding: Optional[str] = "utf-8",
    newline: Optional[str] = None,
) -> None:
    """Write a file atomically by writing to a temp file and os.replace()."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f"{p.name}.", suffix=".tmp", dir=str(p.parent))
    tmp_path = Path(tmp_name)

    try:
        if "b" in mode:
            f = os.fdopen(fd, mode)
        else:
            f = os.fdopen(fd, mode, encoding=encoding, newline=newline)
        with f:
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_path, p)
    finally:
        # If os.replace fails, best-effort cleanup of the temp file.
        if tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError as e:
                logger.warning("Could not remove temp file %s: %s", tmp_path, e)


def write_text_atomic(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """Write UTF-8 text atomically."""

    def _write(f) -> None:
        f.write(text)

    _atomic_write(Path(path), _write, encoding=encoding)


def write_bytes_atomic(path: Path, chunks: Iterable[bytes]) -> int:
    """Write a stream of byte chunks atomically. Returns the byte count."""

    written = 0

    def _write(f) -> None:
        nonlocal written
        for chunk in chunks:
            if chunk:
                f.write(chunk)
                written += len(chunk)

    _atomic_write(Path(path), _write, mode="wb", encoding=None)
    return written


def write_json_atomic(
    path: Path,
    data: Any,
    *,
    indent: int = 1,
    sort_keys: bool = False,
    ensure_ascii: bool = False,
    encoding: str = "utf-8",
) -> None:
    """Write JSON atomically with stable formatting.

    Keys keep insertion order by default so reports read in field order.
    """

    def _write(f) -> None:
        json.dump(data, f, indent=indent, sort_keys=sort_keys, ensure_ascii=ensure_ascii)
        f.write("\n")

    _atomic_write(Path(path), _write, encoding=encoding)


def read_json(path: Path, *, encoding: str = "utf-8") -> Any:
    """Read JSON from disk."""

    with Path(path).open("r", encoding=encoding) as f:
        return json.load(f)
