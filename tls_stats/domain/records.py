"""tls_stats.domain.records

Input records and the aggregate tally built from them.

Two datasets feed the pipeline and neither knows about the other:

* :class:`UsageRecord` rows come from the browser/OS usage-share TSV and are
  keyed by browser family + major version.
* :class:`CapabilityProfile` objects come from the client capability catalog
  and are keyed by client name + version.

The join between them happens in :mod:`pipeline.aggregate`. The types here are
frozen so a loaded dataset cannot drift while it is being aggregated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Mapping, Tuple


@dataclass(frozen=True)
class UsageRecord:
    """One (date, OS, browser) usage-share row."""

    date: date
    browser_family: str
    browser_major_version: str
    os_family: str
    os_major_version: str
    weight: int

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"UsageRecord weight must be non-negative, got {self.weight}")


@dataclass(frozen=True)
class CapabilityProfile:
    """TLS capabilities of one client (browser or library) version.

    ``suite_ids`` and ``suite_names`` are index-aligned: ``suite_names[i]`` is
    the name the catalog gives to ``suite_ids[i]``.
    """

    name: str
    platform: str
    version: str
    lowest_protocol: int
    highest_protocol: int
    suite_ids: Tuple[int, ...] = ()
    suite_names: Tuple[str, ...] = ()
    curve_ids: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if len(self.suite_ids) != len(self.suite_names):
            raise ValueError(
                f"{self.name} {self.version}: {len(self.suite_ids)} suite ids"
                f" but {len(self.suite_names)} suite names"
            )


@dataclass
class AggregateTally:
    """Weighted support counts per protocol, cipher suite and curve.

    ``total`` is the combined weight of matched usage only.
    """

    protocols: Dict[int, int] = field(default_factory=dict)
    ciphers: Dict[int, int] = field(default_factory=dict)
    curves: Dict[int, int] = field(default_factory=dict)
    total: int = 0

    def add_support(self, profile: CapabilityProfile, weight: int, *, floor: int) -> None:
        """Credit ``weight`` to everything ``profile`` supports."""
        lowest = max(profile.lowest_protocol, floor)
        for p in range(lowest, profile.highest_protocol + 1):
            self.protocols[p] = self.protocols.get(p, 0) + weight
        for cid in profile.suite_ids:
            self.ciphers[cid] = self.ciphers.get(cid, 0) + weight
        for cid in profile.curve_ids:
            self.curves[cid] = self.curves.get(cid, 0) + weight
        self.total += weight

    def merge(self, other: "AggregateTally") -> "AggregateTally":
        """Return a new tally holding the sum of ``self`` and ``other``.

        Partial tallies built over disjoint slices of the matched keys can be
        merged in any order.
        """
        return AggregateTally(
            protocols=_add_counts(self.protocols, other.protocols),
            ciphers=_add_counts(self.ciphers, other.ciphers),
            curves=_add_counts(self.curves, other.curves),
            total=self.total + other.total,
        )


def _add_counts(a: Mapping[int, int], b: Mapping[int, int]) -> Dict[int, int]:
    out = dict(a)
    for k, v in b.items():
        out[k] = out.get(k, 0) + v
    return out
