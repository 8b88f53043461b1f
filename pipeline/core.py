# pipeline/core.py
from __future__ import annotations

from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]

DEFAULT_HOME = Path("~/.tls-stats")

# Wikimedia browser/OS usage shares, all sites.
USAGE_URL = (
    "https://analytics.wikimedia.org/datasets/periodic/reports/metrics/browser/"
    "all_sites_by_os_and_browser.tsv"
)

# SSL Labs client capability catalog.
CAPABILITIES_URL = "https://api.ssllabs.com/api/v3/getClients"

# Oldest protocol version counted (SSL 3.0). Lower advertised minimums are
# clamped to this instead of dropping the profile.
FLOOR_PROTOCOL = 0x0300

STALENESS_MONTHS = 6

HTTP_TIMEOUT_SECONDS = 60
