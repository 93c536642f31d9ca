import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping
from proxy_engine.models.proxy_model import FinalResponse
from proxy_engine.proxy_managers.pipeline import ProxyPipeline
from proxy_engine.proxy_managers.url_resolver import QueryParams

logger = logging.getLogger(__name__)


class ResponseAdapter(ABC):
    """
    Serializes pipeline results for one host.
    respond() is the single place where a failed request becomes a 500.
    """

    def __init__(self, pipeline: ProxyPipeline):
        self.pipeline = pipeline

    async def respond(self, query_params: QueryParams, headers: Mapping[str, str]) -> Any:
        try:
            final = await self.pipeline.run(query_params, headers)
            return self.render(final)
        except Exception as e:
            self.pipeline.log.exception(f"Proxy request failed: {e!r}")
            return self.render(FinalResponse.failure(e))

    @abstractmethod
    def render(self, final: FinalResponse) -> Any:
        ...
