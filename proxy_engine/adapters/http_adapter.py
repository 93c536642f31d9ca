from typing import Dict, List, Union
from fastapi import Request, Response
from proxy_engine.adapters.base import ResponseAdapter
from proxy_engine.models.proxy_model import FinalResponse


def request_query_params(request: Request) -> Dict[str, Union[str, List[str]]]:
    """Repeated query parameters are kept as lists."""
    params: Dict[str, Union[str, List[str]]] = {}
    for key, value in request.query_params.multi_items():
        if key not in params:
            params[key] = value
        elif isinstance(params[key], list):
            params[key].append(value)
        else:
            params[key] = [params[key], value]
    return params


class HttpResponseAdapter(ResponseAdapter):
    """Request/response hosts: build the framework response and send raw bytes."""

    async def handle(self, request: Request) -> Response:
        return await self.respond(request_query_params(request), dict(request.headers))

    def render(self, final: FinalResponse) -> Response:
        response = Response(
            content=final.body,
            status_code=final.status_code,
            media_type=None if final.binary else "text/plain",
        )
        for name, value in final.headers.items():
            response.headers[name] = value
        return response
