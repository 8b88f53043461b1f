"""pipeline.wiring

This module is the **composition root** for the Python runtime.

"Composition root" means: the single place where we *assemble* the running
application from its building blocks:

- load configuration / environment variables
- configure logging
- build the explicit :class:`~pipeline.models.StatsConfig`
- build the high-level pipeline facade object

Everything below this module receives its configuration as arguments; nothing
else reads ``os.environ`` or the clock.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import date
from pathlib import Path
from typing import Mapping, Optional

from pipeline.core import (
    CAPABILITIES_URL,
    DEFAULT_HOME,
    HTTP_TIMEOUT_SECONDS,
    ROOT_DIR,
    STALENESS_MONTHS,
    USAGE_URL,
)
from pipeline.models import StatsConfig
from pipeline.pipeline import TLSStatsPipeline
from tools.download import Fetcher, fetch_to_file


ENV_PATH: Path = ROOT_DIR / ".env"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_dotenv_if_present(dotenv_path: Path = ENV_PATH) -> None:
    """Minimal .env loader.

    Loads KEY=VALUE lines into ``os.environ`` if the key is not already set.

    Design goals:
    - no third-party dependency
    - simple quoting support
    - safe-ish comment stripping for common cases
    """

    if not dotenv_path.exists():
        return

    for raw in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, val = line.split("=", 1)
        key = key.strip()
        raw_val = val.strip()

        # Quoted value
        if (raw_val.startswith('"') and raw_val.endswith('"')) or (
            raw_val.startswith("'") and raw_val.endswith("'")
        ):
            parsed_val = raw_val[1:-1]
        else:
            # Strip inline comments only when preceded by whitespace: "VALUE   # comment"
            parsed_val = re.split(r"\s+#", raw_val, maxsplit=1)[0].strip()
            parsed_val = parsed_val.strip('"').strip("'")

        parsed_val = parsed_val.replace("\r", "")
        if key and key not in os.environ:
            os.environ[key] = parsed_val


def configure_logging(verbose: bool = False) -> None:
    """Root logging setup for CLI runs. Library modules only get loggers."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    # urllib3 is chatty at DEBUG (one line per connection).
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"{name} must be an integer, got {raw!r}")


def config_from_env(
    env: Optional[Mapping[str, str]] = None,
    *,
    home: Optional[Path] = None,
    today: Optional[date] = None,
) -> StatsConfig:
    """Build a :class:`StatsConfig` from environment variables.

    Recognized variables:

    - ``TLS_STATS_HOME``: stats home (default ``~/.tls-stats``)
    - ``TLS_STATS_USAGE_URL`` / ``TLS_STATS_CLIENTS_URL``: source URLs
    - ``TLS_STATS_ALIAS_TABLES``: YAML file extending the alias tables
    - ``TLS_STATS_STALENESS_MONTHS``: report staleness window
    - ``TLS_STATS_HTTP_TIMEOUT``: download timeout in seconds
    """
    e = os.environ if env is None else env

    home_path = home or Path(e.get("TLS_STATS_HOME") or DEFAULT_HOME)
    alias = e.get("TLS_STATS_ALIAS_TABLES")

    return StatsConfig(
        home=Path(home_path).expanduser(),
        today=today or date.today(),
        usage_url=e.get("TLS_STATS_USAGE_URL") or USAGE_URL,
        capabilities_url=e.get("TLS_STATS_CLIENTS_URL") or CAPABILITIES_URL,
        alias_tables=Path(alias).expanduser() if alias else None,
        staleness_months=_env_int(e, "TLS_STATS_STALENESS_MONTHS", STALENESS_MONTHS),
        timeout=_env_int(e, "TLS_STATS_HTTP_TIMEOUT", HTTP_TIMEOUT_SECONDS),
    )


def build_pipeline(
    *,
    load_dotenv: bool = True,
    home: Optional[Path] = None,
    today: Optional[date] = None,
    fetch: Fetcher = fetch_to_file,
) -> TLSStatsPipeline:
    """Build the high-level pipeline facade."""

    if load_dotenv:
        load_dotenv_if_present(ENV_PATH)

    return TLSStatsPipeline(config_from_env(home=home, today=today), fetch=fetch)
