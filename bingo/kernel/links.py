"""
Bingo Kernel: share links

    <base_url>?data=<percent-encoded token>

The codec produces the token; this module only embeds it in a URL and
pulls it back out.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

from bingo.config import settings
from bingo.kernel.codec import encode_sheet
from bingo.kernel.types import Sheet

SHARE_PARAM = settings.SHARE_PARAM


def build_share_link(sheet: Sheet, base_url: str | None = None, param: str = SHARE_PARAM) -> str:
    """Encode a sheet and attach it to base_url as the share parameter."""
    if base_url is None:
        base_url = settings.SHARE_BASE_URL
    token = quote(encode_sheet(sheet), safe="")

    parts = urlsplit(base_url)
    query = f"{parts.query}&{param}={token}" if parts.query else f"{param}={token}"
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def extract_token(url: str, param: str = SHARE_PARAM) -> str | None:
    """
    Token from the share parameter of url, or None.
    A missing or empty parameter is the normal no-link case.
    """
    for name, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        if name == param:
            return value or None
    return None

