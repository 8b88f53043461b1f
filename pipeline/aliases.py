"""pipeline.aliases

Static naming tables that line usage-share browser names up with client
capability profile names.

The usage dataset reports what the user agent parser sees ("Chrome Mobile",
"Mobile Safari UI/WKWebView", "Samsung Internet", Chrome 117, ...). The
capability catalog only lists a handful of reference clients per family
(Chrome 49/69/70/80, Safari 6-13, Android 4.4.2, ...). These tables bridge the
two:

* ``FAMILY_ALIASES`` maps a usage family to the catalog family. Families not
  listed map to themselves.
* ``VERSION_TABLES`` maps, per catalog family, a usage major version to the
  catalog version whose TLS behaviour it shares. A value of the form
  ``"Family:version"`` moves the record to another family altogether. Versions
  not listed pass through unchanged, so releases newer than a table covers
  match once the catalog lists them.

Keep these as data. Matching logic lives in :mod:`pipeline.normalize`, and a
YAML file can extend both tables without touching code.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional


def _span(first: int, last: int, target: str) -> Dict[str, str]:
    """Map every major version in ``first..last`` (inclusive) to ``target``."""
    return {str(v): target for v in range(first, last + 1)}


def _rehome(family: str, first: int, last: int, target: Optional[str] = None) -> Dict[str, str]:
    """Map ``first..last`` onto ``family``, keeping the version unless ``target`` is given."""
    return {str(v): f"{family}:{target or v}" for v in range(first, last + 1)}


FAMILY_ALIASES: Mapping[str, str] = {
    "Chrome Mobile": "Chrome",
    "Chrome Mobile WebView": "Chrome",
    "Chrome Mobile iOS": "Chrome",
    "Chromium": "Chrome",
    "Firefox Mobile": "Firefox",
    "Thunderbird": "Firefox",
    "Firefox iOS": "Firefox",
    "Opera Mini": "Opera",
    "Opera Mobile": "Opera",
    "Mobile Safari": "Safari",
    "Mobile Safari UIWebView": "Safari",
    "Mobile Safari UI/WKWebView": "Safari",
    "Samsung Internet": "Android",
    "IE Mobile": "IE",
    "Edge Mobile": "Edge",
}


CHROME_VERSIONS: Mapping[str, str] = {
    **_span(30, 49, "49"),
    **_span(50, 69, "69"),
    **_span(71, 79, "70"),
    **_span(81, 89, "80"),
}

FIREFOX_VERSIONS: Mapping[str, str] = {
    **_span(24, 46, "47"),
    **_span(48, 49, "49"),
    **_span(50, 61, "62"),
    **_span(63, 79, "73"),
}

# Android major versions from the OS column and Samsung Internet majors both
# land here once the family aliases have been applied.
ANDROID_VERSIONS: Mapping[str, str] = {
    "2": "2.3.7",
    "4": "4.4.2",
    "5": "5.0.0",
    "6": "6.0",
    "7": "7.0",
    "8": "8.1",
    **_span(9, 99, "9.0"),
}

SAFARI_VERSIONS: Mapping[str, str] = {
    **_span(14, 99, "13"),
}

OPERA_VERSIONS: Mapping[str, str] = {
    **_span(15, 200, "66"),
}

EDGE_VERSIONS: Mapping[str, str] = {
    "12": "13",
    "14": "15",
    "17": "16",
    "19": "18",
    # Chromium based Edge (79+) shares the TLS stack of the same Chrome major.
    **_rehome("Chrome", 79, 79, "70"),
    **_rehome("Chrome", 80, 89, "80"),
    **_rehome("Chrome", 90, 200),
}

IE_VERSIONS: Mapping[str, str] = {
    "8": "8-10",
    "9": "8-10",
    "10": "8-10",
}


VERSION_TABLES: Mapping[str, Mapping[str, str]] = {
    "Chrome": CHROME_VERSIONS,
    "Firefox": FIREFOX_VERSIONS,
    "Android": ANDROID_VERSIONS,
    "Safari": SAFARI_VERSIONS,
    "Opera": OPERA_VERSIONS,
    "Edge": EDGE_VERSIONS,
    "IE": IE_VERSIONS,
}
