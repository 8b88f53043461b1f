"""pipeline.names

Human-readable names for report entries.

Lookups never fail: identifiers outside the static tables resolve to a fixed
placeholder ("Unknown Protocol", "Nonstandard Cipher", "Nonstandard Curve").
Cipher suites get one extra chance: the name the capability catalog itself
gave to that id, which covers draft and vendor-specific suites.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

from tls_stats.domain import CapabilityProfile

from .ciphers import CIPHER_NAMES
from .curves import CURVE_NAMES
from .protocols import PROTOCOL_NAMES

UNKNOWN_PROTOCOL = "Unknown Protocol"
NONSTANDARD_CIPHER = "Nonstandard Cipher"
NONSTANDARD_CURVE = "Nonstandard Curve"


def protocol_name(protocol_id: int) -> str:
    return PROTOCOL_NAMES.get(protocol_id, UNKNOWN_PROTOCOL)


def cipher_name(cipher_id: int, nonstandard: Optional[Mapping[int, str]] = None) -> str:
    if cipher_id in CIPHER_NAMES:
        return CIPHER_NAMES[cipher_id]
    if nonstandard and cipher_id in nonstandard:
        return nonstandard[cipher_id]
    return NONSTANDARD_CIPHER


def curve_name(curve_id: int) -> str:
    return CURVE_NAMES.get(curve_id, NONSTANDARD_CURVE)


def catalog_cipher_names(profiles: Iterable[CapabilityProfile]) -> Dict[int, str]:
    """Cipher id -> name as the catalog spells it. First occurrence wins."""
    out: Dict[int, str] = {}
    for p in profiles:
        for cid, name in zip(p.suite_ids, p.suite_names):
            if cid not in out:
                out[cid] = name
    return out


__all__ = [
    "CIPHER_NAMES",
    "CURVE_NAMES",
    "NONSTANDARD_CIPHER",
    "NONSTANDARD_CURVE",
    "PROTOCOL_NAMES",
    "UNKNOWN_PROTOCOL",
    "catalog_cipher_names",
    "cipher_name",
    "curve_name",
    "protocol_name",
]
