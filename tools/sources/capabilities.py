"""tools/sources/capabilities.py

Client capability catalog (JSON) -> :class:`~tls_stats.domain.CapabilityProfile`.

The catalog is a JSON list of client objects. Only the fields the aggregation
needs are read; everything else (handshake format, SNI support, ALPN, ...) is
ignored. Key lookup is case-insensitive because older copies of the catalog
were re-serialized with PascalCase keys.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from tls_stats.domain import CapabilityProfile
from tls_stats.errors import SourceUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class CapabilityParse:
    profiles: List[CapabilityProfile]
    skipped: int = 0


def _folded(obj: Mapping[str, Any]) -> Dict[str, Any]:
    return {str(k).lower(): v for k, v in obj.items()}


def _int_list(v: Any) -> Tuple[int, ...]:
    if v is None:
        return ()
    if not isinstance(v, list):
        raise ValueError(f"expected a list, got {type(v).__name__}")
    out: List[int] = []
    for x in v:
        if isinstance(x, bool) or not isinstance(x, int):
            raise ValueError(f"expected integer ids, got {x!r}")
        out.append(x)
    return tuple(out)


def _str_list(v: Any) -> Tuple[str, ...]:
    if v is None:
        return ()
    if not isinstance(v, list):
        raise ValueError(f"expected a list, got {type(v).__name__}")
    return tuple(str(x) for x in v)


def _protocol(v: Any, field_name: str) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise ValueError(f"{field_name} must be an integer, got {v!r}")
    return v


def profile_from_dict(obj: Mapping[str, Any]) -> CapabilityProfile:
    """Build a profile from one catalog object. Raises ValueError if malformed."""
    if not isinstance(obj, Mapping):
        raise ValueError(f"expected an object, got {type(obj).__name__}")
    d = _folded(obj)
    name = d.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError("client has no name")
    return CapabilityProfile(
        name=name,
        platform=str(d.get("platform") or ""),
        version=str(d.get("version") or ""),
        lowest_protocol=_protocol(d.get("lowestprotocol"), "lowestProtocol"),
        highest_protocol=_protocol(d.get("highestprotocol"), "highestProtocol"),
        suite_ids=_int_list(d.get("suiteids")),
        suite_names=_str_list(d.get("suitenames")),
        curve_ids=_int_list(d.get("ellipticcurves")),
    )


def parse_capabilities(data: Any) -> CapabilityParse:
    if not isinstance(data, list):
        raise ValueError(f"capability catalog must be a JSON list, got {type(data).__name__}")
    out = CapabilityParse(profiles=[])
    for i, obj in enumerate(data):
        try:
            out.profiles.append(profile_from_dict(obj))
        except ValueError as e:
            out.skipped += 1
            logger.debug("Skipping catalog entry %d: %s", i, e)
    return out


def load_capabilities(path: Path) -> List[CapabilityProfile]:
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
        parsed = parse_capabilities(data)
    except OSError as e:
        raise SourceUnavailableError("client capabilities", f"cannot read {p}: {e}") from e
    except ValueError as e:
        # json.JSONDecodeError is a ValueError too.
        raise SourceUnavailableError("client capabilities", f"cannot parse {p}: {e}") from e

    if parsed.skipped:
        logger.warning("Skipped %d malformed catalog entries in %s", parsed.skipped, p)
    logger.info("Loaded %d capability profiles from %s", len(parsed.profiles), p)
    return parsed.profiles

