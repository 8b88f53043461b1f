"""tls_stats

Core package for the TLS adoption statistics pipeline.

Why this exists
---------------
The repository is split into a few top-level packages:

* ``tools`` reads the two public source datasets (browser usage shares and
  client TLS capabilities) and turns them into typed records.
* ``pipeline`` owns the join/aggregation engine, report building and the
  cached-report policy.

This package owns what both sides agree on:

* domain types (usage records, capability profiles, tallies, reports)
* IO/layout rules (where datasets and reports live on disk)
"""

from __future__ import annotations
