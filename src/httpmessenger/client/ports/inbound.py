"""Inbound port: the request dispatcher contract."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from httpmessenger.client.messenger import HttpMessenger

R = TypeVar("R")


@runtime_checkable
class HttpServicePort(Protocol):
    """One operation per HTTP verb, each returning an :class:`HttpMessenger`."""

    async def post(self, url: str, data: Any) -> HttpMessenger[None]: ...

    async def post_with_response(self, url: str, data: Any, response_type: type[R]) -> HttpMessenger[R]: ...

    async def put(self, url: str, data: Any) -> HttpMessenger[None]: ...

    async def get(self, url: str, response_type: type[R]) -> HttpMessenger[R]: ...

    async def get_all(self, url: str, response_type: type[R]) -> HttpMessenger[R]: ...

    async def delete(self, url: str) -> HttpMessenger[None]: ...
