"""Configuration properties for the HTTP messenger client."""

from __future__ import annotations

from dataclasses import dataclass, field

from httpmessenger.core.config import config_properties


@config_properties(prefix="messenger.client")
@dataclass
class ClientProperties:
    """Bound from ``messenger.client.*``."""

    base_url: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    case_insensitive: bool = True
