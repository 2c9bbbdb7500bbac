"""First-match content negotiation on the ``Accept`` header.

Only the first media type listed by the client is considered. Quality
values are ignored, and so is every later entry.
"""

from __future__ import annotations

from typing import List, Mapping, Optional

from werkzeug.http import parse_list_header, parse_options_header

from respond.constants import ACCEPT_FORMATS


def parse_accept(header: Optional[str]) -> List[str]:
    """Split an ``Accept`` header into its media types, in client order.

    Parameters such as ``q=0.8`` are dropped and media types are lower-cased.

    Example:
        >>> parse_accept('text/html, application/json;q=0.9')
        ['text/html', 'application/json']
    """
    if not header:
        return []

    tokens = []
    for item in parse_list_header(header):
        mimetype, _params = parse_options_header(item)
        mimetype = mimetype.strip().lower()
        if mimetype:
            tokens.append(mimetype)
    return tokens


def select_format(
    header: Optional[str], formats: Mapping[str, str] = ACCEPT_FORMATS
) -> Optional[str]:
    """Return the format for the first media type in *header*.

    Returns:
        The format key (``json``, ``xml``, ``html`` or ``text``), or None when
        the header is empty or its first media type is unsupported
    """
    tokens = parse_accept(header)
    if not tokens:
        return None
    return formats.get(tokens[0])


__all__ = ["parse_accept", "select_format"]
