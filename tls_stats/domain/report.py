"""tls_stats.domain.report

The persisted statistics report.

A report is written once as ``tls-stats-current.json`` and never edited; the
next generation archives it and writes a new one. ``to_dict`` / ``from_dict``
are the only conversion boundary to and from JSON.

``from_dict`` also reads reports written by the earlier tool this pipeline
replaces (PascalCase keys, RFC 3339 timestamps), so an existing stats
directory keeps working.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple


SECTIONS: Tuple[str, ...] = ("protocols", "ciphers", "curves")


def _get(d: Mapping[str, Any], key: str) -> Any:
    """Look up ``key`` allowing the legacy PascalCase spelling."""
    if key in d:
        return d[key]
    return d.get(key[:1].upper() + key[1:])


def _parse_date(v: Any) -> date:
    if isinstance(v, date):
        return v
    if not isinstance(v, str) or len(v) < 10:
        raise ValueError(f"not a date: {v!r}")
    # RFC 3339 timestamps ("2024-01-02T00:00:00Z") carry the day first.
    return date.fromisoformat(v[:10])


@dataclass(frozen=True)
class ReportEntry:
    id: int
    name: str
    percent: float

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ReportEntry":
        if not isinstance(d, Mapping):
            raise TypeError(f"ReportEntry.from_dict expected mapping, got {type(d)!r}")
        raw_id = d["id"] if "id" in d else d["ID"]
        if isinstance(raw_id, bool):
            raise ValueError("entry id must be an integer")
        return cls(
            id=int(raw_id),
            name=str(_get(d, "name") or ""),
            percent=float(_get(d, "percent")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "percent": self.percent, "name": self.name}


@dataclass(frozen=True)
class StatisticsReport:
    """Percent-of-total support per protocol, cipher suite and curve."""

    generation_date: date
    start_date: Optional[date]
    end_date: Optional[date]
    protocols: List[ReportEntry] = field(default_factory=list)
    ciphers: List[ReportEntry] = field(default_factory=list)
    curves: List[ReportEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "StatisticsReport":
        """Parse a report dict. Raises on anything that is not a report."""
        if not isinstance(d, Mapping):
            raise TypeError(f"StatisticsReport.from_dict expected mapping, got {type(d)!r}")

        gen = _get(d, "generationDate")
        if gen is None:
            raise ValueError("report has no generationDate")

        start = _get(d, "startDate")
        end = _get(d, "endDate")

        sections: Dict[str, List[ReportEntry]] = {}
        for name in SECTIONS:
            raw = _get(d, name) or []
            if not isinstance(raw, list):
                raise ValueError(f"report section {name!r} is not a list")
            sections[name] = [ReportEntry.from_dict(e) for e in raw]

        return cls(
            generation_date=_parse_date(gen),
            start_date=_parse_date(start) if start else None,
            end_date=_parse_date(end) if end else None,
            **sections,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generationDate": self.generation_date.isoformat(),
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "protocols": [e.to_dict() for e in self.protocols],
            "ciphers": [e.to_dict() for e in self.ciphers],
            "curves": [e.to_dict() for e in self.curves],
        }

    def to_mapped(self) -> "MappedStatisticsReport":
        """Return an id -> entry lookup view of this report."""
        return MappedStatisticsReport(
            protocols={e.id: e for e in self.protocols},
            ciphers={e.id: e for e in self.ciphers},
            curves={e.id: e for e in self.curves},
        )


@dataclass(frozen=True)
class MappedStatisticsReport:
    protocols: Dict[int, ReportEntry]
    ciphers: Dict[int, ReportEntry]
    curves: Dict[int, ReportEntry]

    def percent(self, section: str, entry_id: int) -> float:
        """Share of users supporting ``entry_id`` (0.0 when never seen)."""
        if section not in SECTIONS:
            raise ValueError(f"Unknown report section '{section}'. Valid: {list(SECTIONS)}")
        entry = getattr(self, section).get(int(entry_id))
        return entry.percent if entry else 0.0
