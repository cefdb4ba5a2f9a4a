import json

import httpx
import pytest

from truck_tracker.client import (
    TrackerClientError,
    error_message,
    get_truck_positions,
    update_truck_position,
)

API = "http://tracker.local"


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_update_sends_body_and_returns_data():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"identifier": "T1"}})

    async with mock_client(handler) as client:
        data = await update_truck_position("T1", 48.9, 2.3, "secret", api_url=API, client=client)

    assert data == {"identifier": "T1"}
    assert seen["url"] == f"{API}/update-position"
    assert seen["body"] == {"identifier": "T1", "latitude": 48.9, "longitude": 2.3, "key": "secret"}


@pytest.mark.asyncio
async def test_update_error_uses_error_message():
    def handler(request):
        return httpx.Response(404, json={"data": None, "error": {"status": 404, "name": "NotFoundError", "message": "Truck not found"}})

    async with mock_client(handler) as client:
        with pytest.raises(TrackerClientError) as excinfo:
            await update_truck_position("ghost", 0, 0, "x", api_url=API, client=client)

    assert str(excinfo.value) == "Truck not found"
    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_get_positions():
    def handler(request):
        assert request.url.path == "/truck-positions"
        return httpx.Response(200, json=[{"identifier": "A"}])

    async with mock_client(handler) as client:
        assert await get_truck_positions(api_url=API, client=client) == [{"identifier": "A"}]


def test_error_message_fallbacks():
    assert error_message(httpx.Response(500, json={"message": "boom"}), "default") == "boom"
    assert error_message(httpx.Response(500, json={"error": {"message": "inner"}, "message": "outer"}), "d") == "inner"
    assert error_message(httpx.Response(500, text="not json"), "default") == "default"
    assert error_message(httpx.Response(500, json=[1, 2]), "default") == "default"
