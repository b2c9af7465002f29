from __future__ import annotations

import hashlib

_SEPARATOR = "|"


def fingerprint(domain: str, page_url: str, video_src: str) -> str:
    """
    Stable identifier for a video on any hosting page.

    sha256 hex of "domain|pageUrl|videoSrc". The extension computes the same
    digest client-side, so the format here must not drift or cache lookups
    silently miss.
    """
    composite = _SEPARATOR.join([domain or "", page_url or "", video_src or ""])
    return hashlib.sha256(composite.encode("utf-8")).hexdigest()
