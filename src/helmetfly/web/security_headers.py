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
"""Security headers configuration and the per-process facade used by hosts."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from helmetfly.core.config import Config, config_properties
from helmetfly.headers.engine import CompositionEngine
from helmetfly.headers.mutation import ResolvedHeaderSet
from helmetfly.headers.policy import RequestContext
from helmetfly.headers.registry import PolicyRegistry
from helmetfly.headers.resolver import ConfigResolver, ResolvedPolicy


@config_properties(prefix="helmetfly.web.security-headers")
class SecurityHeadersProperties(BaseModel):
    """Configuration for security response headers (helmetfly.web.security-headers.*).

    ``policies`` maps policy names to ``true``, ``false`` or an options
    mapping. ``host_defaults`` are headers the hosting platform already
    applies before the policies run (for example a platform-wide HSTS
    value); policies only replace those when forced.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    use_defaults: bool = True
    policies: dict[str, bool | dict[str, Any]] = Field(default_factory=dict)
    host_defaults: dict[str, str] = Field(default_factory=dict)


class SecurityHeaders:
    """Resolved, validated security header configuration for one process.

    Construction resolves and validates the policy configuration, even when
    disabled, so an invalid configuration fails here, at startup, rather
    than on a request. A disabled instance applies no policies.
    The instance is read-only afterwards and safe to share across requests.
    """

    def __init__(
        self,
        policies: Mapping[str, Any] | None = None,
        *,
        host_defaults: Mapping[str, str] | None = None,
        use_defaults: bool = True,
        enabled: bool = True,
        registry: PolicyRegistry | None = None,
    ) -> None:
        self._enabled = enabled
        self._host_defaults = ResolvedHeaderSet(host_defaults or {})
        resolved = ConfigResolver(registry).resolve(policies, use_defaults=use_defaults)
        self._engine = CompositionEngine(resolved if enabled else ())

    @classmethod
    def from_properties(cls, properties: SecurityHeadersProperties) -> SecurityHeaders:
        return cls(
            properties.policies,
            host_defaults=properties.host_defaults,
            use_defaults=properties.use_defaults,
            enabled=properties.enabled,
        )

    @classmethod
    def from_config(cls, config: Config) -> SecurityHeaders:
        """Bind ``helmetfly.web.security-headers`` from *config* and resolve it."""
        return cls.from_properties(config.bind(SecurityHeadersProperties))

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def host_defaults(self) -> ResolvedHeaderSet:
        return self._host_defaults

    @property
    def policies(self) -> tuple[ResolvedPolicy, ...]:
        return self._engine.policies

    def resolve_headers(
        self,
        context: RequestContext | None = None,
        upstream_headers: Mapping[str, str] | None = None,
    ) -> ResolvedHeaderSet:
        """Return the final header set for one request.

        Upstream headers are the host defaults overlaid with *upstream_headers*
        (typically the headers already on the response).
        """
        merged = {name.lower(): (name, value) for name, value in self._host_defaults.items()}
        merged.update({name.lower(): (name, value) for name, value in (upstream_headers or {}).items()})
        return self._engine.apply(context, ResolvedHeaderSet(merged.values()))
