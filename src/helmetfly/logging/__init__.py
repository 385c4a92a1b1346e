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
"""helmetfly Logging: hexagonal logging port and adapters."""

from __future__ import annotations

from helmetfly.core.config import Config
from helmetfly.logging.port import LoggingPort
from helmetfly.logging.stdlib_adapter import StdlibLoggingAdapter
from helmetfly.logging.structlog_adapter import StructlogAdapter

_ADAPTERS: dict[str, type] = {
    "structlog": StructlogAdapter,
    "stdlib": StdlibLoggingAdapter,
}


def configure_logging(config: Config) -> LoggingPort:
    """Create the adapter named by ``helmetfly.logging.adapter`` and configure it."""
    name = str(config.get("helmetfly.logging.adapter", "structlog")).lower()
    try:
        adapter: LoggingPort = _ADAPTERS[name]()
    except KeyError:
        raise ValueError(f"Unknown logging adapter '{name}'; expected one of {sorted(_ADAPTERS)}") from None
    adapter.configure(config)
    return adapter


__all__ = ["LoggingPort", "StdlibLoggingAdapter", "StructlogAdapter", "configure_logging"]
