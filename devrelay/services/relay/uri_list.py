"""
text/uri-list handling.

Lines are separated by CRLF; lines starting with '#' are comments.
"""
from typing import List, Optional

URI_LIST_MEDIA_TYPE = "text/uri-list"


def parse_uri_list(body: str) -> List[str]:
    """Candidate URIs in the order the server listed them.

    Whitespace-only lines are not candidates; surrounding whitespace is trimmed.
    """
    lines = (line.strip() for line in body.split("\r\n"))
    return [line for line in lines if line and not line.startswith("#")]


def first_candidate(body: str) -> Optional[str]:
    """First candidate URI, or None when the list is empty."""
    candidates = parse_uri_list(body)
    return candidates[0] if candidates else None
