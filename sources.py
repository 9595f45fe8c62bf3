"""
sources.py — Source links for a Firm Analysis report
=====================================================
The model lists the URLs it grounded its answer on. The UI renders each as a
short hostname link under "Sources & References".

Usage:
    from sources import source_links
    for label, url in source_links(report.sources):
        st.markdown(f"[{label}]({url})")
"""

from typing import Iterable, List, Tuple
from urllib.parse import urlparse

FALLBACK_LABEL = "Source"


def safe_hostname(url: str) -> str:
    """Hostname without a leading `www.`, or "Source" when the URL is not usable."""
    try:
        parsed = urlparse(str(url).strip())
    except ValueError:
        return FALLBACK_LABEL
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return FALLBACK_LABEL
    host = parsed.hostname
    return host[4:] if host.startswith("www.") else host


def source_links(urls: Iterable[str]) -> List[Tuple[str, str]]:
    """(label, url) pairs in the model's order, skipping blanks and duplicates."""
    links = []
    seen = set()
    for url in urls or []:
        cleaned = str(url or "").strip()
        if not cleaned or cleaned in seen:
            continue
        seen.add(cleaned)
        links.append((safe_hostname(cleaned), cleaned))
    return links
