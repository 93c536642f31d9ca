import httpx
from fastapi import APIRouter, Depends, Request
from proxy_engine.adapters.http_adapter import HttpResponseAdapter
from proxy_engine.data.http_client import get_http_client
from proxy_engine.data.settings import Settings, get_settings
from proxy_engine.proxy_managers.pipeline import build_pipeline


proxy_router = APIRouter(tags=["proxy"])


@proxy_router.get("/", summary="Proxy And Compress Image")
@proxy_router.get("/api", include_in_schema=False)
async def proxy_image(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Fetches the image named by `url` and returns it recompressed when that saves bandwidth.
    Without `url` it answers with the proxy's name, which clients use as a liveness probe.
    """
    adapter = HttpResponseAdapter(build_pipeline(client, settings))
    return await adapter.handle(request)
