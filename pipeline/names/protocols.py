"""Protocol version identifiers as they appear on the wire."""

from __future__ import annotations

from typing import Mapping

PROTOCOL_NAMES: Mapping[int, str] = {
    0x0300: "SSL v3.0",
    0x0301: "TLS v1.0",
    0x0302: "TLS v1.1",
    0x0303: "TLS v1.2",
    0x0304: "TLS v1.3",
}
