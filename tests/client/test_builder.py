# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the httpx transport adapter and the HttpService builder."""

from __future__ import annotations

import logging

import httpx
import pytest
from pydantic import BaseModel

from httpmessenger.client.adapters.httpx_adapter import HttpxClientAdapter
from httpmessenger.client.ports.outbound import HttpClientPort
from httpmessenger.client.service import HttpService
from httpmessenger.core.config import Config
from httpmessenger.kernel.exceptions import ConfigurationException
from httpmessenger.logging.structlog_adapter import DISPATCHER_LOGGER


class Item(BaseModel):
    id: int
    name: str


def echo_headers(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"url": str(request.url), "headers": dict(request.headers)})


class CollectingHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


class TestHttpxClientAdapter:
    @pytest.mark.asyncio
    async def test_conforms_to_port(self):
        adapter = HttpxClientAdapter()
        try:
            assert isinstance(adapter, HttpClientPort)
        finally:
            await adapter.close()

    @pytest.mark.asyncio
    async def test_close_owned_client(self):
        adapter = HttpxClientAdapter(base_url="http://api.example.com")
        assert httpx.URL(adapter.base_url).host == "api.example.com"
        await adapter.close()
        assert adapter._client.is_closed

    @pytest.mark.asyncio
    async def test_borrowed_client_left_open(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(echo_headers))
        async with HttpxClientAdapter(client=client) as adapter:
            response = await adapter.request("GET", "http://test/ping")
            assert response.status_code == 200
        assert not client.is_closed
        await client.aclose()


class TestHttpServiceBuilder:
    @pytest.mark.asyncio
    async def test_build_applies_base_url_and_headers(self):
        service = (
            HttpService.rest()
            .base_url("http://api.example.com")
            .header("X-Api-Key", "k")
            .build()
        )
        try:
            client = service._client._client
            assert client.base_url.host == "api.example.com"
            assert client.headers["X-Api-Key"] == "k"
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_build_with_existing_client(self):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"ID": 1, "NAME": "a"})),
            base_url="http://test",
        )
        async with HttpService.rest().http_client(client).build() as service:
            result = await service.get("/items/1", Item)
        assert result.response == Item(id=1, name="a")
        await client.aclose()

    @pytest.mark.asyncio
    async def test_existing_client_rejects_base_url_and_headers(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(echo_headers))
        builder = HttpService.rest().http_client(client).base_url("http://other").header("X-Api-Key", "k")
        with pytest.raises(ConfigurationException, match="existing http_client") as exc_info:
            builder.build()
        assert exc_info.value.code == "BUILDER_CONFLICT"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_case_sensitive_build(self):
        service = HttpService.rest().case_insensitive(False).build()
        try:
            assert service._serializer.case_insensitive is False
        finally:
            await service.close()


class TestHttpServiceFromConfig:
    @pytest.mark.asyncio
    async def test_reads_client_section(self):
        config = Config({
            "messenger": {
                "client": {
                    "base_url": "http://cfg.example.com",
                    "headers": {"Accept": "application/json"},
                    "case_insensitive": False,
                }
            }
        })
        service = HttpService.from_config(config)
        try:
            client = service._client._client
            assert client.base_url.host == "cfg.example.com"
            assert client.headers["Accept"] == "application/json"
            assert service._serializer.case_insensitive is False
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_env_overrides_base_url(self, monkeypatch):
        monkeypatch.setenv("MESSENGER_CLIENT_BASE_URL", "http://env.example.com")
        service = HttpService.from_config(Config({}))
        try:
            assert service._client._client.base_url.host == "env.example.com"
            assert service._serializer.case_insensitive is True
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_env_string_does_not_replace_headers(self, monkeypatch):
        monkeypatch.setenv("MESSENGER_CLIENT_HEADERS", "x")
        config = Config({"messenger": {"client": {"headers": {"X-Api-Key": "k"}}}})
        service = HttpService.from_config(config, configure_logging=False)
        try:
            assert service._client._client.headers["X-Api-Key"] == "k"
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_dispatcher_events_follow_logging_level(self):
        collector = CollectingHandler()
        dispatcher = logging.getLogger(DISPATCHER_LOGGER)
        dispatcher.addHandler(collector)
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"id": 1, "name": "a"})),
            base_url="http://test",
        )
        try:
            for level, logged in (("WARNING", False), ("DEBUG", True)):
                collector.messages.clear()
                config = Config({"messenger": {"logging": {"format": "json", "dispatcher": level}}})
                await HttpService.from_config(config).close()

                await HttpService.rest().http_client(client).build().get("/items/1", Item)

                assert any("http_request" in message for message in collector.messages) is logged
                assert any("http_response" in message for message in collector.messages) is logged
        finally:
            dispatcher.removeHandler(collector)
            await client.aclose()
