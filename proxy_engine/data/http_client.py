# proxy_engine/data/http_client.py
import logging
from typing import Optional
import httpx

logger = logging.getLogger(__name__)

# Shared client for the FastAPI host, opened on startup
_http_client: Optional[httpx.AsyncClient] = None


def open_http_client() -> httpx.AsyncClient:
    """Initializes the shared httpx client."""
    global _http_client
    if _http_client is None:  # Ensure client is initialized only once
        _http_client = httpx.AsyncClient()
        logger.info("Upstream HTTP client opened.")
    return _http_client


async def close_http_client():
    """Closes the shared httpx client."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
        logger.info("Upstream HTTP client closed.")


def get_http_client() -> httpx.AsyncClient:
    """
    Returns the shared httpx client.
    Ensures that open_http_client() has been called, typically during app startup.
    """
    if _http_client is None:
        raise RuntimeError("HTTP client not initialized. Call open_http_client() on application startup.")
    return _http_client
