"""
Tests for the upstream OpenPecha client
"""

import json

import httpx
import pytest

from app.config import Settings
from app.utils.openpecha_client import OpenPechaAPIError, OpenPechaClient


def make_client(handler) -> OpenPechaClient:
    return OpenPechaClient(
        config=Settings(openpecha_endpoint="http://openpecha.test/"),
        transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_list_texts_sends_query_string():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["accept"] = request.headers.get("accept")
        return httpx.Response(200, json=[{"id": "T1"}])

    client = make_client(handler)
    await client.start()
    try:
        data = await client.list_texts({"limit": 10, "offset": 20, "language": "bo"})
    finally:
        await client.stop()

    assert data == [{"id": "T1"}]
    assert seen["url"] == "http://openpecha.test/texts?limit=10&offset=20&language=bo"
    assert seen["accept"] == "application/json"


@pytest.mark.asyncio
async def test_create_sends_json_and_authorization():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        seen["headers"] = request.headers
        return httpx.Response(201, json={"id": "I1"})

    client = make_client(handler)
    data = await client.create_text_instance("T1", {"content": "abc"}, authorization="Bearer t")

    assert data == {"id": "I1"}
    assert seen["method"] == "POST"
    assert seen["path"] == "/texts/T1/instances"
    assert seen["body"] == {"content": "abc"}
    assert seen["headers"]["content-type"] == "application/json"
    assert seen["headers"]["authorization"] == "Bearer t"


@pytest.mark.asyncio
async def test_per_request_client_when_not_started():
    client = make_client(lambda request: httpx.Response(200, json={"id": request.url.path}))

    assert not client.started
    assert await client.get_person("P1") == {"id": "/persons/P1"}


@pytest.mark.asyncio
async def test_http_error_keeps_status_and_body():
    client = make_client(lambda request: httpx.Response(404, json={"error": "Text not found"}))

    with pytest.raises(OpenPechaAPIError) as exc_info:
        await client.get_text("missing")

    error = exc_info.value
    assert error.status_code == 404
    assert error.is_not_found
    assert error.body == {"error": "Text not found"}
    assert error.message == "Request failed with status code 404"


@pytest.mark.asyncio
async def test_non_json_error_body_kept_as_text():
    client = make_client(lambda request: httpx.Response(500, text="upstream exploded"))

    with pytest.raises(OpenPechaAPIError) as exc_info:
        await client.get_instance("I1")

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "upstream exploded"


@pytest.mark.asyncio
async def test_connection_error_has_no_status():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(OpenPechaAPIError) as exc_info:
        await make_client(handler).list_persons({"limit": 10, "offset": 0})

    assert exc_info.value.status_code is None
    assert "connection refused" in exc_info.value.message


@pytest.mark.asyncio
async def test_timeout_has_no_status():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(OpenPechaAPIError) as exc_info:
        await make_client(handler).get_text("T1")

    assert exc_info.value.status_code is None
    assert exc_info.value.message.startswith("Timed out")


@pytest.mark.asyncio
async def test_invalid_json_response():
    client = make_client(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(OpenPechaAPIError) as exc_info:
        await client.get_text("T1")

    assert exc_info.value.message.startswith("Invalid response from OpenPecha API")


@pytest.mark.asyncio
async def test_empty_response_is_none():
    client = make_client(lambda request: httpx.Response(204))

    assert await client.get_text("T1") is None


@pytest.mark.asyncio
@pytest.mark.parametrize("response, expected", [
    (httpx.Response(200, json=[]), "healthy"),
    (httpx.Response(503, text="maintenance"), "unhealthy"),
])
async def test_health_check(response, expected):
    assert await make_client(lambda request: response).health_check() == expected


@pytest.mark.asyncio
async def test_health_check_unreachable():
    def handler(request):
        raise httpx.ConnectError("no route", request=request)

    assert await make_client(handler).health_check() == "unreachable"


@pytest.mark.asyncio
async def test_start_is_idempotent():
    client = make_client(lambda request: httpx.Response(200, json=[]))
    await client.start()
    first = client._client
    await client.start()

    assert client._client is first
    await client.stop()
    assert not client.started
