import httpx
import pytest
from tenacity import wait_none
from automation_coverage.core.http import get_json


def _client(handler):
    return httpx.AsyncClient(base_url="https://ci.example.com", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_transport_error_is_retried():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        if len(calls) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"jobs": []})

    async with _client(handler) as client:
        data = await get_json.retry_with(wait=wait_none())(client, "/api/json")

    assert data == {"jobs": []}
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_error_status_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(500, text="boom")

    async with _client(handler) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await get_json.retry_with(wait=wait_none())(client, "/api/json")

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_empty_body_gives_none():
    async with _client(lambda request: httpx.Response(200)) as client:
        assert await get_json(client, "/api/json") is None
