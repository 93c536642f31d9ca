import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Mapping, Optional
from proxy_engine.data.settings import Settings
from proxy_engine.models.proxy_model import (
    CompressionOptions,
    CompressionOutcome,
    FetchedResource,
    FinalResponse,
    RequestContext,
)
from proxy_engine.proxy_managers import compression
from proxy_engine.proxy_managers.fetcher import Fetcher
from proxy_engine.proxy_managers.headers import patch_content_security, pick
from proxy_engine.proxy_managers.options import resolve_options
from proxy_engine.proxy_managers.url_resolver import QueryParams, resolve_url

logger = logging.getLogger(__name__)

IDENTIFYING_BODY = "bandwidth-hero-proxy"

Gate = Callable[[str, int, bool], bool]
Compressor = Callable[[bytes, bool, bool, int, int], CompressionOutcome]

# Process-wide, so asyncio.run() never waits on a timed-out compression when it exits
_compress_executor = ThreadPoolExecutor(thread_name_prefix="compress")


class ProxyPipeline:
    """
    One request, start to finish: resolve the URL and options, fetch the
    image, then either pass it through or recompress it, and patch headers.
    Every collaborator is injected so hosts and tests can swap them.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        settings: Settings,
        gate: Optional[Gate] = None,
        compressor: Optional[Compressor] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.fetcher = fetcher
        self.settings = settings
        self.gate = gate or functools.partial(
            compression.should_compress,
            min_length=settings.min_compress_length,
            min_transparent_length=settings.min_transparent_compress_length,
        )
        self.compressor = compressor or compression.compress
        self.log = log or logger

    def build_context(self, query_params: QueryParams, headers: Mapping[str, str]) -> Optional[RequestContext]:
        url = resolve_url(query_params)
        if url is None:
            return None
        options = resolve_options(
            self.settings.option_strategy,
            headers,
            query_params,
            self.settings.default_quality,
        )
        return RequestContext(
            url=url,
            forwarded_headers=pick(headers),
            options=options,
            host=headers.get("host"),
        )

    async def run(self, query_params: QueryParams, headers: Mapping[str, str]) -> FinalResponse:
        """Headers are expected with lower-case names."""
        context = self.build_context(query_params, headers)
        if context is None:
            return FinalResponse.text(200, IDENTIFYING_BODY)

        resource = await self.fetcher.fetch(context.url, context.forwarded_headers)
        if not resource.ok:
            return FinalResponse(status_code=resource.status_code)

        options = context.options
        if not self.gate(resource.content_type, resource.size, options.use_webp):
            self.log.info(f"Bypassing... Size: {resource.size}")
            return FinalResponse(
                status_code=200,
                body=resource.data,
                headers=patch_content_security(resource.headers, context.host),
                binary=True,
            )

        outcome = await self.compress_data(resource, options)
        return FinalResponse(
            status_code=200,
            body=outcome.output,
            headers=patch_content_security({**resource.headers, **outcome.headers}, context.host),
            binary=True,
        )

    async def compress_data(self, resource: FetchedResource, options: CompressionOptions) -> CompressionOutcome:
        original_size = resource.size
        loop = asyncio.get_running_loop()
        try:
            outcome = await asyncio.wait_for(
                loop.run_in_executor(
                    _compress_executor,
                    self.compressor,
                    resource.data,
                    options.use_webp,
                    options.grayscale,
                    options.quality,
                    original_size,
                ),
                timeout=self.settings.compress_timeout,
            )
        except Exception:
            self.log.error("Conversion failed")
            raise

        # Plain ratio, not a percentage; kept for log compatibility
        saved = (original_size - len(outcome.output)) / original_size if original_size else 0
        self.log.info(f"From {original_size}, Saved: {saved}%")
        return outcome


def build_pipeline(client, settings: Settings, log: Optional[logging.Logger] = None) -> ProxyPipeline:
    fetcher = Fetcher(client, timeout=settings.fetch_timeout)
    return ProxyPipeline(fetcher, settings, log=log)
