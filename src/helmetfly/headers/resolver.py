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
"""ConfigResolver: merges caller configuration against registry defaults.

The caller configuration maps policy names to ``False`` (disabled),
``True`` (enabled with defaults) or an options mapping (enabled, options
deep-merged over the defaults with caller values winning). Policies the
caller does not mention follow their registry default, unless
``use_defaults`` is off, in which case only explicitly enabled policies
are active.

Resolution validates every active policy, so a configuration that resolves
can be applied to any request without configuration-shape errors.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from helmetfly.core.config import deep_merge
from helmetfly.headers.policy import FORCE_OPTION, SecurityPolicy
from helmetfly.headers.registry import PolicyRegistry
from helmetfly.kernel.exceptions import InvalidOptionError, PolicyConfigurationError, UnknownPolicyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedPolicy:
    """An active policy paired with its effective, read-only options."""

    policy: SecurityPolicy
    options: Mapping[str, Any]

    @property
    def name(self) -> str:
        return self.policy.name

    @property
    def force(self) -> bool:
        return bool(self.options.get(FORCE_OPTION, False))


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list | tuple):
        return tuple(_freeze(item) for item in value)
    return value


class ConfigResolver:
    """Resolves a policy configuration into the ordered list of active policies."""

    def __init__(self, registry: PolicyRegistry | None = None) -> None:
        self._registry = registry if registry is not None else PolicyRegistry.default()

    @property
    def registry(self) -> PolicyRegistry:
        return self._registry

    def resolve(
        self,
        overrides: Mapping[str, Any] | None = None,
        *,
        use_defaults: bool = True,
    ) -> tuple[ResolvedPolicy, ...]:
        """Return active policies in canonical order with their effective options.

        Raises:
            UnknownPolicyError: a key does not name a registered policy.
            InvalidOptionError: a policy setting or option value is invalid.
            DirectiveError: the Content-Security-Policy directives are invalid.
        """
        overrides = {} if overrides is None else overrides
        if not isinstance(overrides, Mapping):
            raise PolicyConfigurationError(
                f"Security header configuration must be a mapping, got {type(overrides).__name__}",
                code="INVALID_CONFIGURATION",
            )
        for name in overrides:
            if name not in self._registry:
                raise UnknownPolicyError(str(name))

        resolved: list[ResolvedPolicy] = []
        for policy in self._registry:
            caller_options = self._caller_options(policy, overrides, use_defaults)
            if caller_options is None:
                continue
            effective = deep_merge(policy.default_options, policy.normalize_options(caller_options))
            policy.validate(effective)
            resolved.append(ResolvedPolicy(policy, _freeze(effective)))

        logger.info("Resolved security header policies: %s", ", ".join(p.name for p in resolved) or "<none>")
        return tuple(resolved)

    @staticmethod
    def _caller_options(
        policy: SecurityPolicy,
        overrides: Mapping[str, Any],
        use_defaults: bool,
    ) -> Mapping[str, Any] | None:
        """Return the caller's options for *policy*, or ``None`` when it is inactive."""
        if policy.name not in overrides:
            return {} if use_defaults and policy.default_enabled else None

        setting = overrides[policy.name]
        if setting is False:
            return None
        if setting is True:
            return {}
        if isinstance(setting, Mapping):
            return setting
        raise InvalidOptionError(
            policy.name,
            policy.name,
            f"expected true, false or an options mapping, got {type(setting).__name__}",
        )


def resolve(
    registry: PolicyRegistry,
    overrides: Mapping[str, Any] | None = None,
    *,
    use_defaults: bool = True,
) -> tuple[ResolvedPolicy, ...]:
    """Functional form of :meth:`ConfigResolver.resolve`."""
    return ConfigResolver(registry).resolve(overrides, use_defaults=use_defaults)
