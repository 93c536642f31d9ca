import asyncio
from typing import Any, Dict, Mapping, Optional
import httpx
from proxy_engine.adapters.event_adapter import EventResponseAdapter
from proxy_engine.data.settings import get_settings
from proxy_engine.proxy_managers.pipeline import build_pipeline
from proxy_engine.utils import configure_logging


async def handle(event: Mapping[str, Any], transport: Optional[httpx.AsyncBaseTransport] = None) -> Dict[str, Any]:
    settings = get_settings()
    # Invocations share nothing, so each gets its own client
    async with httpx.AsyncClient(transport=transport) as client:
        adapter = EventResponseAdapter(build_pipeline(client, settings))
        return await adapter.handle(event)


def handler(event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
    """Event-style entry point (API Gateway / Netlify functions)."""
    configure_logging(get_settings().log_level)
    return asyncio.run(handle(event))
