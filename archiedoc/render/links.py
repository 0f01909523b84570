"""
Unwrap Google tracking redirects in exported hyperlinks.
"""

from typing import Optional
from urllib.parse import urlparse, parse_qs


def normalize_href(href: Optional[str]) -> str:
    """
    Return the real destination of an anchor's href.

    Google Docs exports wrap every link as
    http://www.google.com/url?q=http%3A%2F%2Fwww.nytimes.com...&sa=D
    The decoded value of `q` is the target. Hrefs without a `q` parameter are
    returned unchanged, and a missing href gives an empty string.

    Args:
        href: Raw href attribute value, or None when the anchor has none

    Returns:
        Destination URL
    """
    if href is None:
        return ''
    targets = parse_qs(urlparse(href).query).get('q')
    if targets:
        return targets[0]
    return href
