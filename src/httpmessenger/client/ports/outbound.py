"""Outbound port: HTTP transport interface."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HttpClientPort(Protocol):
    """Abstract HTTP transport.

    ``request`` must return a response exposing ``is_success``,
    ``status_code``, ``text`` and an awaitable ``aread()``.
    """

    async def request(self, method: str, url: str, **kwargs: Any) -> Any: ...

    async def close(self) -> None: ...
