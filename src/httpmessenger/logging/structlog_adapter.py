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
"""StructlogAdapter — routes httpmessenger's structlog events through stdlib logging.

Settings come from ``messenger.logging``:

    messenger:
      logging:
        format: console        # or json
        dispatcher: DEBUG      # level for the HttpService request/response events
        level:
          root: INFO
          some.other.logger: WARNING
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from httpmessenger.core.config import Config

DISPATCHER_LOGGER = "httpmessenger.client"

_FORMATS = ("console", "json")


class StructlogAdapter:
    """LoggingPort backed by structlog over stdlib loggers.

    Levels are applied to stdlib loggers, so a structlog logger named
    :data:`DISPATCHER_LOGGER` is filtered by the level set for that name.
    """

    def __init__(self) -> None:
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._logger_levels: dict[str, str] = {}

    @property
    def logger_levels(self) -> dict[str, str]:
        """Per-logger levels applied by the last :meth:`configure`."""
        return dict(self._logger_levels)

    def configure(self, config: Config) -> None:
        """Apply the ``messenger.logging`` section."""
        level_section = dict(config.get_section("messenger.logging.level"))
        self._root_level = str(level_section.pop("root", "INFO")).upper()
        self._logger_levels = {name: str(level).upper() for name, level in level_section.items()}

        dispatcher_level = config.get("messenger.logging.dispatcher")
        if dispatcher_level is not None:
            self._logger_levels[DISPATCHER_LOGGER] = str(dispatcher_level).upper()

        fmt = str(config.get("messenger.logging.format", "console")).lower()
        self._format = fmt if fmt in _FORMATS else "console"

        self._install()
        for name, level in self._logger_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def _install(self) -> None:
        renderer: structlog.types.Processor = (
            structlog.processors.JSONRenderer() if self._format == "json" else structlog.dev.ConsoleRenderer()
        )
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.UnicodeDecoder(),
                renderer,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=getattr(logging, self._root_level, logging.INFO),
            force=True,
        )
