from __future__ import annotations

"""pipeline.normalize

Join key derivation for usage records and capability profiles.

Both sides of the join are reduced to the same ``"<family>:<version>"``
string:

* usage rows go through the family alias table and then the per-family
  version table (:mod:`pipeline.aliases`);
* capability profiles are keyed verbatim as ``"<name>:<version>"``.

The catalog has to keep naming its clients the way the alias tables expect.
When it doesn't, the damage shows up as unmatched usage weight in the join
diagnostics, never as an error.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pipeline.aliases import FAMILY_ALIASES, VERSION_TABLES
from tls_stats.domain import CapabilityProfile, UsageRecord


def _frozen_tables(
    aliases: Mapping[str, str],
    versions: Mapping[str, Mapping[str, str]],
) -> tuple[Mapping[str, str], Mapping[str, Mapping[str, str]]]:
    frozen_versions = {str(fam): MappingProxyType(dict(table)) for fam, table in versions.items()}
    return MappingProxyType(dict(aliases)), MappingProxyType(frozen_versions)


@dataclass(frozen=True)
class KeyNormalizer:
    """Canonicalize (browser family, major version) pairs into join keys.

    The tables are copied into read-only mappings at construction, so a
    normalizer always returns the same key for the same input.
    """

    family_aliases: Mapping[str, str] = field(default_factory=lambda: FAMILY_ALIASES)
    version_tables: Mapping[str, Mapping[str, str]] = field(default_factory=lambda: VERSION_TABLES)

    def __post_init__(self) -> None:
        aliases, versions = _frozen_tables(self.family_aliases, self.version_tables)
        object.__setattr__(self, "family_aliases", aliases)
        object.__setattr__(self, "version_tables", versions)

    def canonical_family(self, family: str) -> str:
        return self.family_aliases.get(family, family)

    def normalize_version(self, family: str, version: str) -> str:
        """Collapse ``version`` for an already canonical ``family``."""
        table = self.version_tables.get(family)
        if table is None:
            return version
        return table.get(version, version)

    def join_key(self, family: str, version: str) -> str:
        fam = self.canonical_family(family)
        normalized = self.normalize_version(fam, version)
        if ":" in normalized:
            # Already a full key: the version table moved it to another family.
            return normalized
        return f"{fam}:{normalized}"

    def usage_key(self, record: UsageRecord) -> str:
        return self.join_key(record.browser_family, record.browser_major_version)

    def extended(
        self,
        *,
        family_aliases: Optional[Mapping[str, str]] = None,
        version_tables: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> "KeyNormalizer":
        """Return a new normalizer with extra entries layered over this one.

        Version tables merge per family: new entries override existing ones,
        untouched entries are kept.
        """
        aliases: Dict[str, str] = dict(self.family_aliases)
        aliases.update(family_aliases or {})

        versions: Dict[str, Dict[str, str]] = {fam: dict(t) for fam, t in self.version_tables.items()}
        for fam, table in (version_tables or {}).items():
            versions.setdefault(str(fam), {}).update(table)

        return KeyNormalizer(family_aliases=aliases, version_tables=versions)


def profile_key(profile: CapabilityProfile) -> str:
    return f"{profile.name}:{profile.version}"


DEFAULT_NORMALIZER = KeyNormalizer()


def join_key(family: str, version: str) -> str:
    """Join key under the built-in tables."""
    return DEFAULT_NORMALIZER.join_key(family, version)


# ----------------------------
# YAML extension tables
# ----------------------------

def _as_str_mapping(raw: Any, *, what: str, path: Path) -> Dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"{what} must be a mapping in {path}")
    # YAML reads bare version numbers as int/float; keys are always strings here.
    return {str(k): str(v) for k, v in raw.items()}


def load_normalizer(path: str | Path, *, base: Optional[KeyNormalizer] = None) -> KeyNormalizer:
    """Build a normalizer from a YAML file layered over ``base``.

    Expected shape::

        family_aliases:
          Yandex Browser: Chrome
        versions:
          Chrome:
            "120": "80"
    """
    import yaml
    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise FileNotFoundError(f"Alias tables not found: {p}")
    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Alias tables YAML must be a mapping/object at top level: {p}")

    aliases = _as_str_mapping(raw.get("family_aliases"), what="family_aliases", path=p)

    versions_raw = raw.get("versions") or {}
    if not isinstance(versions_raw, dict):
        raise ValueError(f"versions must be a mapping of family -> mapping in {p}")
    versions = {
        str(fam): _as_str_mapping(table, what=f"versions.{fam}", path=p)
        for fam, table in versions_raw.items()
    }

    return (base or DEFAULT_NORMALIZER).extended(family_aliases=aliases, version_tables=versions)
