from __future__ import annotations

import asyncio
import base64

import httpx
import pytest

from beadpix.core.errors import StylizeError
from beadpix.stylize.openai_client import DEFAULT_PROMPT, stylize_image


def _run(coro):
    return asyncio.run(coro)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_stylize_returns_decoded_image():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = request.content
        return httpx.Response(200, json={"data": [{"b64_json": base64.b64encode(b"PNGDATA").decode()}]})

    async def go():
        async with _client(handler) as client:
            return await stylize_image(b"raw", api_key="sk-test", client=client)

    assert _run(go()) == b"PNGDATA"
    assert seen["auth"] == "Bearer sk-test"
    assert DEFAULT_PROMPT.encode() in seen["body"]
    assert b"gpt-image-1" in seen["body"]


def test_stylize_surfaces_service_error_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": "Invalid API key"}})

    async def go():
        async with _client(handler) as client:
            await stylize_image(b"raw", api_key="bad", client=client)

    with pytest.raises(StylizeError, match="Invalid API key"):
        _run(go())


def test_stylize_requires_image_data_in_response():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": []})

    async def go():
        async with _client(handler) as client:
            await stylize_image(b"raw", api_key="k", client=client)

    with pytest.raises(StylizeError, match="no image data"):
        _run(go())


def test_stylize_wraps_transport_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    async def go():
        async with _client(handler) as client:
            await stylize_image(b"raw", api_key="k", client=client)

    with pytest.raises(StylizeError, match="request failed"):
        _run(go())


def test_stylize_requires_key_and_image(monkeypatch):
    monkeypatch.setattr("beadpix.settings.OPENAI_API_KEY", "")
    with pytest.raises(StylizeError):
        _run(stylize_image(b"raw"))
    with pytest.raises(StylizeError):
        _run(stylize_image(b"", api_key="k"))
