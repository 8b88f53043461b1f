from __future__ import annotations

"""pipeline.aggregate

Join usage records to capability profiles and tally weighted support.

Steps
-----
1. Index profiles by join key (last profile wins on duplicate keys).
2. Normalize every usage record's key. Matched records add their weight to a
   per-key total; unmatched keys go into diagnostic counters.
3. For every matched key, credit its combined weight to each protocol in the
   profile's (floored) range, each cipher suite and each curve.

Unmatched weight never reaches the tally. It is only visible through
:class:`JoinResult` and the log.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pipeline.core import FLOOR_PROTOCOL
from pipeline.normalize import DEFAULT_NORMALIZER, KeyNormalizer, profile_key
from tls_stats.domain import AggregateTally, CapabilityProfile, UsageRecord

logger = logging.getLogger(__name__)


@dataclass
class JoinResult:
    """Outcome of matching usage records against the profile index."""

    matched_weights: Dict[str, int] = field(default_factory=dict)
    found: int = 0
    unmatched: Counter[str] = field(default_factory=Counter)
    unmatched_weight: Counter[str] = field(default_factory=Counter)

    @property
    def not_found(self) -> int:
        return sum(self.unmatched.values())

    @property
    def unmatched_key_count(self) -> int:
        return len(self.unmatched)

    @property
    def matched_weight(self) -> int:
        return sum(self.matched_weights.values())

    @property
    def total_unmatched_weight(self) -> int:
        return sum(self.unmatched_weight.values())


@dataclass
class Analysis:
    """Everything the report builder needs from one aggregation pass."""

    tally: AggregateTally
    join: JoinResult
    start: Optional[date]
    end: Optional[date]
    profiles: Sequence[CapabilityProfile] = ()


def index_profiles(profiles: Iterable[CapabilityProfile]) -> Dict[str, CapabilityProfile]:
    """Map join key -> profile. A later duplicate replaces an earlier one."""
    index: Dict[str, CapabilityProfile] = {}
    for p in profiles:
        key = profile_key(p)
        if key in index:
            logger.debug("Duplicate capability profile %s (platform %r replaces %r)", key, p.platform, index[key].platform)
        index[key] = p
    return index


def join_usage(
    records: Iterable[UsageRecord],
    index: Mapping[str, CapabilityProfile],
    normalizer: KeyNormalizer = DEFAULT_NORMALIZER,
) -> JoinResult:
    result = JoinResult()
    for r in records:
        key = normalizer.usage_key(r)
        if key in index:
            result.found += 1
            result.matched_weights[key] = result.matched_weights.get(key, 0) + r.weight
        else:
            result.unmatched[key] += 1
            result.unmatched_weight[key] += r.weight
    return result


def aggregate(
    matched_weights: Mapping[str, int],
    index: Mapping[str, CapabilityProfile],
    *,
    floor: int = FLOOR_PROTOCOL,
) -> AggregateTally:
    """Tally support for every matched key.

    Keys missing from ``index`` are skipped with a warning; :func:`join_usage`
    never produces them.
    """
    tally = AggregateTally()
    for key in sorted(matched_weights):
        profile = index.get(key)
        if profile is None:
            logger.warning("Could not find device with browser profile: %s", key)
            continue
        tally.add_support(profile, matched_weights[key], floor=floor)
    return tally


def date_range(records: Sequence[UsageRecord]) -> Tuple[Optional[date], Optional[date]]:
    if not records:
        return None, None
    dates = [r.date for r in records]
    return min(dates), max(dates)


def _log_join(join: JoinResult) -> None:
    for key in sorted(join.unmatched):
        logger.debug(
            "No capability profile for %s (%d records, weight %d)",
            key,
            join.unmatched[key],
            join.unmatched_weight[key],
        )
    if join.unmatched:
        logger.warning(
            "%d usage records matched (weight %d); %d records across %d keys unmatched"
            " (weight %d, excluded). Heaviest: %s",
            join.found,
            join.matched_weight,
            join.not_found,
            join.unmatched_key_count,
            join.total_unmatched_weight,
            ", ".join(f"{k}={w}" for k, w in top_unmatched(join, 5)),
        )
    else:
        logger.info("%d usage records matched (weight %d)", join.found, join.matched_weight)


def top_unmatched(join: JoinResult, limit: int = 10) -> List[Tuple[str, int]]:
    """Heaviest unmatched keys, for alias-table maintenance."""
    return sorted(join.unmatched_weight.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]


def analyse(
    records: Sequence[UsageRecord],
    profiles: Sequence[CapabilityProfile],
    normalizer: KeyNormalizer = DEFAULT_NORMALIZER,
    *,
    floor: int = FLOOR_PROTOCOL,
) -> Analysis:
    """Run the full join + aggregation over in-memory datasets."""
    index = index_profiles(profiles)
    join = join_usage(records, index, normalizer)
    _log_join(join)
    tally = aggregate(join.matched_weights, index, floor=floor)
    start, end = date_range(records)
    return Analysis(tally=tally, join=join, start=start, end=end, profiles=profiles)
