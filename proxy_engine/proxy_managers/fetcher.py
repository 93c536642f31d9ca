import logging
from typing import Dict, List, Mapping
import httpx
from proxy_engine.models.proxy_model import FetchedResource, HeaderValue

logger = logging.getLogger(__name__)

# httpx hands back the decoded body, so these no longer describe it
DROPPED_HEADERS = frozenset(
    {
        "connection",
        "content-encoding",
        "content-length",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)


def collect_headers(headers: httpx.Headers) -> Dict[str, HeaderValue]:
    """Flattens httpx headers; repeated names become a list of values."""
    collected: Dict[str, HeaderValue] = {}
    for name, value in headers.multi_items():
        name = name.lower()
        if name in DROPPED_HEADERS:
            continue
        if name not in collected:
            collected[name] = value
            continue
        existing = collected[name]
        if isinstance(existing, list):
            existing.append(value)
        else:
            collected[name] = [existing, value]
    return collected


class Fetcher:
    def __init__(self, client: httpx.AsyncClient, timeout: float = 10.0):
        self.client = client
        self.timeout = timeout

    async def fetch(self, url: str, headers: Mapping[str, str]) -> FetchedResource:
        """
        GETs the target image with the forwarded headers.
        A non-success status is returned as-is; network errors propagate.
        """
        response = await self.client.get(
            url, headers=dict(headers), timeout=self.timeout, follow_redirects=True
        )
        if not response.is_success:
            logger.info(f"Upstream {url} answered {response.status_code}")
            return FetchedResource(status_code=response.status_code)

        return FetchedResource(
            status_code=response.status_code,
            data=response.content,
            content_type=response.headers.get("content-type", ""),
            headers=collect_headers(response.headers),
        )
