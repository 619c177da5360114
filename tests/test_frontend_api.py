"""
Tests for the client-side gateway API
"""

import json

import httpx
import pytest

from frontend.api import GatewayAPI, GatewayRequestError, clean_params, error_message, unwrap_results


def make_api(client_settings, handler) -> GatewayAPI:
    return GatewayAPI(config=client_settings, transport=httpx.MockTransport(handler))


def test_unwrap_results():
    assert unwrap_results({"results": [1, 2], "count": 2}) == [1, 2]
    assert unwrap_results([3]) == [3]
    assert unwrap_results({"error": "x"}) == []
    assert unwrap_results(None) == []


def test_clean_params_keeps_zero_offset():
    assert clean_params({"limit": 10, "offset": 0, "language": "", "author": None}) == {"limit": 10, "offset": 0}
    assert clean_params(None) == {}


@pytest.mark.parametrize("response, expected", [
    (httpx.Response(400, json={"error": "Invalid title", "details": "title must be set"}), "title must be set"),
    (httpx.Response(404, json={"error": "Text not found", "details": None}), "Text not found"),
    (httpx.Response(422, json={"error": "Failed", "details": {"detail": "Parent missing"}}), "Parent missing"),
    (httpx.Response(500, json={"message": "boom"}), "boom"),
    (httpx.Response(502, text="Bad gateway"), "HTTP error! status: 502 - Bad gateway"),
    (httpx.Response(503, json=["unexpected"]), "HTTP error! status: 503"),
])
def test_error_message(response, expected):
    assert error_message(response) == expected


@pytest.mark.asyncio
async def test_fetch_texts_parses_results(client_settings, sample_text):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"results": [sample_text], "count": 1, "limit": 10, "offset": 0})

    async with make_api(client_settings, handler) as api:
        texts = await api.fetch_texts({"limit": 10, "offset": 0, "language": None})

    assert seen["url"] == "http://gateway.test/text?limit=10&offset=0"
    assert texts[0].id == "T1"
    assert texts[0].contributions[0].person_id == "P1"


@pytest.mark.asyncio
async def test_fetch_instance_uses_instances_route(client_settings, sample_instance):
    paths = []

    def handler(request):
        paths.append(request.url.path)
        return httpx.Response(200, json=sample_instance)

    instance = await make_api(client_settings, handler).fetch_instance("I1")

    assert paths == ["/instances/I1"]
    assert instance.annotations_of("segmentation")[0].span.end == 4


@pytest.mark.asyncio
async def test_create_text_returns_upstream_body(client_settings):
    sent = {}

    def handler(request):
        sent["method"] = request.method
        sent["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "T9"})

    created = await make_api(client_settings, handler).create_text({"type": "root"})

    assert created == {"id": "T9"}
    assert sent == {"method": "POST", "body": {"type": "root"}}


@pytest.mark.asyncio
async def test_error_response_raises(client_settings):
    def handler(request):
        return httpx.Response(400, json={"error": "Missing required fields", "details": "type is required"})

    with pytest.raises(GatewayRequestError) as exc_info:
        await make_api(client_settings, handler).create_text({})

    assert str(exc_info.value) == "type is required"
    assert exc_info.value.status_code == 400
    assert exc_info.value.payload["error"] == "Missing required fields"


@pytest.mark.asyncio
async def test_unreachable_gateway(client_settings):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(GatewayRequestError) as exc_info:
        await make_api(client_settings, handler).fetch_persons()

    assert exc_info.value.status_code is None
    assert exc_info.value.message.startswith("Failed to reach server")


@pytest.mark.asyncio
async def test_list_tolerates_stored_records(client_settings, sample_text):
    bdrc_only = {
        "id": "T2",
        "type": "translation",
        "title": {"en": "Entering the Path"},
        "language": "en",
        "contributions": [{"person_bdrc_id": "P6081", "role": "author"}],
    }
    malformed = {"title": {"en": "No id or type"}}

    def handler(request):
        return httpx.Response(200, json=[sample_text, bdrc_only, malformed])

    texts = await make_api(client_settings, handler).fetch_texts()

    assert [t.id for t in texts] == ["T1", "T2"]
    assert texts[1].contributions[0].person_bdrc_id == "P6081"


@pytest.mark.asyncio
async def test_malformed_single_record_raises_request_error(client_settings):
    def handler(request):
        return httpx.Response(200, json={"name": {"en": "No id"}})

    with pytest.raises(GatewayRequestError) as exc_info:
        await make_api(client_settings, handler).fetch_person("P1")

    assert exc_info.value.message.startswith("Invalid PersonSchema in server response")
    assert exc_info.value.payload == {"name": {"en": "No id"}}
