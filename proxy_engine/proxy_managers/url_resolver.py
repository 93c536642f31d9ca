import json
import re
from typing import Dict, List, Optional, Union
import httpx

# Some clients sit behind a middlebox that rewrites image URLs to
# http://1.1.x.x/bmi/<original>; undo it.
MANGLED_PREFIX = re.compile(r"http://1\.1\.\d\.\d/bmi/(https?://)?", re.IGNORECASE)

URL_JOINER = "&url="

QueryParams = Dict[str, Union[str, List[str]]]


def assemble_url(base_url: str, query_params: QueryParams) -> str:
    """Appends the remaining query parameters to the target URL."""
    url = httpx.URL(base_url)
    for key, value in query_params.items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            url = url.copy_add_param(key, item)
    return str(url)


def resolve_url(query_params: QueryParams) -> Optional[str]:
    """
    Extracts the target image URL from the query parameters.
    Returns None when no `url` parameter was given.
    """
    rest = dict(query_params)
    url = rest.pop("url", None)
    if not url:
        return None

    # Repeated url= parameters are fragments of a single URL
    if isinstance(url, list):
        url = URL_JOINER.join(url)

    if rest:
        url = assemble_url(url, rest)

    try:
        parsed = json.loads(url)
    except ValueError:
        parsed = None

    if isinstance(parsed, str):
        url = parsed
    elif isinstance(parsed, list):
        url = URL_JOINER.join(str(part) for part in parsed)

    return MANGLED_PREFIX.sub("http://", url, count=1)
