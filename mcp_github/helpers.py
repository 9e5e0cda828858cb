"""Response and header helpers shared by the request and pagination engines."""
import json
import logging
import re
from typing import Any, Dict, Optional

import httpx

from .errors import ApiError

logger = logging.getLogger(__name__)

_REL_RE = re.compile(r'rel="([^"]+)"')


def parse_response_body(resp: httpx.Response) -> Any:
    """Decode JSON when the content type says so, otherwise return raw text.

    A malformed JSON body falls back to text instead of raising.
    """
    content_type = resp.headers.get("content-type", "")
    if "application/json" not in content_type:
        return resp.text
    try:
        return resp.json()
    except ValueError as exc:
        logger.error(f"Failed to parse response body as JSON: {exc}")
        return resp.text


def create_api_error(status: int, body: Any) -> ApiError:
    msg = body if isinstance(body, str) else json.dumps(body)
    return ApiError(status, f"GitHub API error! Status: {status}. Message: {msg}")


def parse_link_header(link_header: Optional[str]) -> Dict[str, str]:
    """
    Parse an RFC 5988 Link header into a rel -> url mapping.

    Example:
        '<https://api.github.com/x?page=2>; rel="next", <...?page=5>; rel="last"'
        -> {"next": "https://api.github.com/x?page=2", "last": "...?page=5"}
    """
    if not link_header:
        return {}

    links: Dict[str, str] = {}
    for part in link_header.split(","):
        url_part, _, params = part.partition(";")
        url_part = url_part.strip()
        if not (url_part.startswith("<") and url_part.endswith(">")) or not params:
            continue
        match = _REL_RE.search(params)
        if match:
            # rel may hold several space-separated relation types
            for rel in match.group(1).split():
                links[rel] = url_part[1:-1]
    return links
