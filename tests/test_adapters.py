import base64
import logging
import httpx
import pytest
from helpers import RecordingCompressor
from proxy_engine.adapters.event_adapter import EventResponseAdapter, event_headers, event_query_params
from proxy_engine.adapters.http_adapter import HttpResponseAdapter
from proxy_engine.models.proxy_model import FinalResponse


def test_event_render_base64_encodes_images():
    final = FinalResponse(status_code=200, body=b"\x00\x01img", headers={"content-type": "image/webp"}, binary=True)
    result = EventResponseAdapter(pipeline=None).render(final)
    assert result == {
        "statusCode": 200,
        "body": base64.b64encode(b"\x00\x01img").decode("ascii"),
        "headers": {"content-type": "image/webp"},
        "isBase64Encoded": True,
    }


def test_event_render_text_and_failures():
    adapter = EventResponseAdapter(pipeline=None)
    assert adapter.render(FinalResponse.text(200, "bandwidth-hero-proxy")) == {
        "statusCode": 200,
        "body": "bandwidth-hero-proxy",
    }
    assert adapter.render(FinalResponse.failure(RuntimeError("boom"))) == {"statusCode": 500, "body": "boom"}
    assert adapter.render(FinalResponse.failure(RuntimeError())) == {"statusCode": 500, "body": ""}


def test_event_normalization():
    event = {
        "queryStringParameters": {"url": "b", "l": "20"},
        "multiValueQueryStringParameters": {"url": ["a", "b"], "l": ["20"]},
        "headers": {"Host": "proxy.example", "User-Agent": "UA"},
    }
    assert event_query_params(event) == {"url": ["a", "b"], "l": "20"}
    assert event_headers(event) == {"host": "proxy.example", "user-agent": "UA"}
    assert event_query_params({"queryStringParameters": None}) == {}
    assert event_headers({}) == {}


def test_http_render_sets_headers_and_raw_body():
    final = FinalResponse(status_code=200, body=b"img", headers={"content-type": "image/jpeg", "x-bytes-saved": "5"}, binary=True)
    response = HttpResponseAdapter(pipeline=None).render(final)
    assert response.status_code == 200
    assert response.body == b"img"
    assert response.headers["content-type"] == "image/jpeg"
    assert response.headers["x-bytes-saved"] == "5"


def test_http_render_failure_goes_through_response():
    response = HttpResponseAdapter(pipeline=None).render(FinalResponse.failure(ValueError("nope")))
    assert response.status_code == 500
    assert response.body == b"nope"
    assert response.headers["content-type"].startswith("text/plain")


@pytest.mark.asyncio
async def test_event_adapter_maps_network_error_to_500(make_pipeline):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    adapter = EventResponseAdapter(make_pipeline(handler))
    result = await adapter.handle({"queryStringParameters": {"url": "http://x/a.jpg"}, "headers": {}})

    assert result == {"statusCode": 500, "body": "connection refused"}


@pytest.mark.asyncio
async def test_http_adapter_maps_compression_error_to_500(make_pipeline):
    compressor = RecordingCompressor(error=RuntimeError("encoder crashed"))

    def handler(request):
        return httpx.Response(200, content=b"x" * 5000, headers={"content-type": "image/jpeg"})

    adapter = HttpResponseAdapter(make_pipeline(handler, gate=lambda *args: True, compressor=compressor))
    response = await adapter.respond({"url": "http://x/a.jpg"}, {})

    assert response.status_code == 500
    assert response.body == b"encoder crashed"


@pytest.mark.asyncio
async def test_event_adapter_end_to_end(make_pipeline):
    compressor = RecordingCompressor(output=b"w" * 500, headers={"content-type": "image/webp"})

    def handler(request):
        return httpx.Response(200, content=b"p" * 2000, headers={"content-type": "image/png"})

    adapter = EventResponseAdapter(make_pipeline(handler, compressor=compressor))
    result = await adapter.handle(
        {
            "queryStringParameters": {"url": "http://x/a.png"},
            "headers": {"X-Image-Lite-Bw": "1", "X-Image-Lite-Level": "40", "X-Image-Lite-Jpeg": "0"},
        }
    )

    assert result["statusCode"] == 200
    assert result["isBase64Encoded"] is True
    assert base64.b64decode(result["body"]) == b"w" * 500
    assert result["headers"]["content-type"] == "image/webp"


class StaticPipeline:
    log = logging.getLogger("static-pipeline")

    def __init__(self, final):
        self.final = final

    async def run(self, query_params, headers):
        return self.final


@pytest.mark.asyncio
async def test_http_adapter_maps_unsendable_header_to_500():
    final = FinalResponse(
        status_code=200,
        body=b"img",
        headers={"content-disposition": "inline; filename=文.jpg"},
        binary=True,
    )
    response = await HttpResponseAdapter(StaticPipeline(final)).respond({"url": "http://x/a.jpg"}, {})

    assert response.status_code == 500
    assert b"latin-1" in response.body
