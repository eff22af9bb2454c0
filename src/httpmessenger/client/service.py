"""HttpService — request dispatcher that wraps every call in an HttpMessenger."""

from __future__ import annotations

from types import TracebackType
from typing import Any, TypeVar

import httpx
import structlog

from httpmessenger.client.adapters.httpx_adapter import HttpxClientAdapter
from httpmessenger.client.messenger import HttpMessenger
from httpmessenger.client.ports.outbound import HttpClientPort
from httpmessenger.client.properties import ClientProperties
from httpmessenger.client.serialization import JsonSerializer
from httpmessenger.core.config import Config
from httpmessenger.kernel.exceptions import ConfigurationException, DeserializationException
from httpmessenger.logging.structlog_adapter import DISPATCHER_LOGGER, StructlogAdapter

logger = structlog.get_logger(DISPATCHER_LOGGER)

R = TypeVar("R")

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class HttpService:
    """Issues GET/POST/PUT/DELETE requests and reports the outcome uniformly.

    A non-2xx status never raises: it comes back as ``success=False`` with
    no payload. A 2xx response whose body cannot be decoded into the
    requested type raises :class:`DeserializationException`.

        service = (HttpService.rest()
            .base_url("http://localhost:8081")
            .build())

        result = await service.get("/items/1", Item)
        if result.success:
            print(result.response.name)
        else:
            print(await result.get_body())
    """

    def __init__(
        self,
        http_client: HttpClientPort,
        serializer: JsonSerializer | None = None,
    ) -> None:
        self._client = http_client
        self._serializer = serializer or JsonSerializer()

    async def post(self, url: str, data: Any) -> HttpMessenger[None]:
        """POST *data* as JSON. The envelope never carries a payload."""
        response = await self._send("POST", url, body=self._serializer.serialize(data))
        return HttpMessenger(None, response.is_success, response)

    async def post_with_response(self, url: str, data: Any, response_type: type[R]) -> HttpMessenger[R]:
        """POST *data* as JSON and decode a successful response into *response_type*."""
        response = await self._send("POST", url, body=self._serializer.serialize(data))
        return await self._to_messenger(response, response_type)

    async def put(self, url: str, data: Any) -> HttpMessenger[None]:
        """PUT *data* as JSON. The envelope never carries a payload."""
        response = await self._send("PUT", url, body=self._serializer.serialize(data))
        return HttpMessenger(None, response.is_success, response)

    async def get(self, url: str, response_type: type[R]) -> HttpMessenger[R]:
        """GET *url* and decode a successful response into *response_type*."""
        response = await self._send("GET", url)
        return await self._to_messenger(response, response_type)

    async def get_all(self, url: str, response_type: type[R]) -> HttpMessenger[R]:
        """GET a collection resource; behaves exactly like :meth:`get`."""
        response = await self._send("GET", url)
        return await self._to_messenger(response, response_type)

    async def delete(self, url: str) -> HttpMessenger[None]:
        """DELETE *url*. The envelope never carries a payload."""
        response = await self._send("DELETE", url)
        return HttpMessenger(None, response.is_success, response)

    async def _send(self, method: str, url: str, body: str | None = None) -> httpx.Response:
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["content"] = body.encode("utf-8")
            kwargs["headers"] = {"Content-Type": JSON_CONTENT_TYPE}

        logger.debug("http_request", method=method, url=url)
        response = await self._client.request(method, url, **kwargs)
        logger.debug(
            "http_response",
            method=method,
            url=url,
            status_code=response.status_code,
            success=response.is_success,
        )
        return response

    async def _to_messenger(self, response: httpx.Response, response_type: type[R]) -> HttpMessenger[R]:
        if not response.is_success:
            return HttpMessenger(None, False, response)

        await response.aread()
        try:
            payload = self._serializer.deserialize(response.text, response_type)
        except DeserializationException as exc:
            exc.context["status_code"] = response.status_code
            raise
        return HttpMessenger(payload, True, response)

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._client.close()

    async def __aenter__(self) -> HttpService:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @staticmethod
    def rest() -> HttpServiceBuilder:
        """Create a builder for an httpx-backed HttpService."""
        return HttpServiceBuilder()

    @classmethod
    def from_config(cls, config: Config, configure_logging: bool = True) -> HttpService:
        """Build a service from the ``messenger.client`` configuration section.

        With *configure_logging*, the ``messenger.logging`` section is applied
        through :class:`StructlogAdapter` first, so the dispatcher's
        ``http_request``/``http_response`` debug events follow its levels.
        """
        if configure_logging:
            StructlogAdapter().configure(config)
        props = config.bind(ClientProperties)
        builder = cls.rest().base_url(props.base_url).case_insensitive(props.case_insensitive)
        for name, value in props.headers.items():
            builder.header(name, str(value))
        return builder.build()


class HttpServiceBuilder:
    """Fluent builder for HttpService."""

    def __init__(self) -> None:
        self._base_url: str = ""
        self._headers: dict[str, str] = {}
        self._case_insensitive: bool = True
        self._http_client: httpx.AsyncClient | None = None

    def base_url(self, url: str) -> HttpServiceBuilder:
        """Set the base URL relative request paths resolve against."""
        self._base_url = url
        return self

    def header(self, name: str, value: str) -> HttpServiceBuilder:
        """Add a default header."""
        self._headers[name] = value
        return self

    def case_insensitive(self, enabled: bool = True) -> HttpServiceBuilder:
        """Toggle case-insensitive field matching when decoding responses."""
        self._case_insensitive = enabled
        return self

    def http_client(self, client: httpx.AsyncClient) -> HttpServiceBuilder:
        """Use an existing httpx client. Cannot be combined with base_url or header."""
        self._http_client = client
        return self

    def build(self) -> HttpService:
        """Build the HttpService."""
        if self._http_client is not None and (self._base_url or self._headers):
            raise ConfigurationException(
                "base_url/header cannot be combined with an existing http_client; configure that client instead",
                code="BUILDER_CONFLICT",
                context={"base_url": self._base_url, "headers": sorted(self._headers)},
            )
        adapter = HttpxClientAdapter(
            base_url=self._base_url,
            headers=self._headers,
            client=self._http_client,
        )
        return HttpService(adapter, JsonSerializer(case_insensitive=self._case_insensitive))
