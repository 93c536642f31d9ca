import base64
from typing import Any, Dict, Mapping
from proxy_engine.adapters.base import ResponseAdapter
from proxy_engine.models.proxy_model import FinalResponse
from proxy_engine.proxy_managers.url_resolver import QueryParams


def event_query_params(event: Mapping[str, Any]) -> QueryParams:
    """
    Single-value parameters, upgraded to lists where the host also reports
    repeated values.
    """
    params: Dict[str, Any] = dict(event.get("queryStringParameters") or {})
    for key, values in (event.get("multiValueQueryStringParameters") or {}).items():
        if values and len(values) > 1:
            params[key] = list(values)
    return params


def event_headers(event: Mapping[str, Any]) -> Dict[str, str]:
    return {name.lower(): value for name, value in (event.get("headers") or {}).items()}


class EventResponseAdapter(ResponseAdapter):
    """Event-style hosts (API Gateway / Netlify functions) expect a result dict."""

    async def handle(self, event: Mapping[str, Any]) -> Dict[str, Any]:
        return await self.respond(event_query_params(event), event_headers(event))

    def render(self, final: FinalResponse) -> Dict[str, Any]:
        if final.binary:
            return {
                "statusCode": final.status_code,
                "body": base64.b64encode(final.body).decode("ascii"),
                "headers": final.headers,
                "isBase64Encoded": True,
            }
        result: Dict[str, Any] = {
            "statusCode": final.status_code,
            "body": final.body.decode("utf-8"),
        }
        if final.headers:
            result["headers"] = final.headers
        return result
