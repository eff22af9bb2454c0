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
"""HttpMessenger — the uniform result envelope returned by every HttpService call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

import httpx

T = TypeVar("T")


@dataclass(frozen=True)
class HttpMessenger(Generic[T]):
    """Outcome of a single HTTP call.

    ``response`` holds the decoded payload and is only set when ``success``
    is true; a failed call always carries ``None``. The raw
    ``http_response`` is kept so the body can be read later with
    :meth:`get_body`.
    """

    response: T | None
    success: bool
    http_response: httpx.Response | None = None

    def __post_init__(self) -> None:
        if not self.success and self.response is not None:
            raise ValueError("A failed HttpMessenger cannot carry a response payload")

    @property
    def status_code(self) -> int | None:
        """Status code of the attached response, or ``None`` without one."""
        if self.http_response is None:
            return None
        return self.http_response.status_code

    async def get_body(self) -> str:
        """Read the raw response body as text.

        Returns an empty string when no response is attached. The transport
        caches the body, so this is safe after the payload was decoded.
        """
        if self.http_response is None:
            return ""
        await self.http_response.aread()
        return self.http_response.text
