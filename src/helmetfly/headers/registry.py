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
"""PolicyRegistry: the catalog of known policies in canonical order."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from helmetfly.headers.csp import ContentSecurityPolicy
from helmetfly.headers.policies import (
    DnsPrefetchControlPolicy,
    FrameguardPolicy,
    HidePoweredByPolicy,
    HstsPolicy,
    IeNoOpenPolicy,
    NoCachePolicy,
    NoSniffPolicy,
    XssFilterPolicy,
)
from helmetfly.headers.policy import SecurityPolicy
from helmetfly.kernel.exceptions import UnknownPolicyError

CANONICAL_ORDER: tuple[str, ...] = (
    "hidePoweredBy",
    "frameguard",
    "xssFilter",
    "noSniff",
    "ieNoOpen",
    "hsts",
    "dnsPrefetchControl",
    "noCache",
    "contentSecurityPolicy",
)


class PolicyRegistry:
    """Immutable, ordered catalog of policies keyed by name.

    Iteration order is the evaluation order used by the composition engine.
    """

    __slots__ = ("_policies",)

    def __init__(self, policies: Iterable[SecurityPolicy]) -> None:
        by_name: dict[str, SecurityPolicy] = {}
        for policy in policies:
            if policy.name in by_name:
                raise ValueError(f"Policy '{policy.name}' is registered twice")
            by_name[policy.name] = policy
        self._policies = by_name

    @classmethod
    def default(cls) -> PolicyRegistry:
        """Return the built-in catalog in canonical order."""
        return _DEFAULT_REGISTRY

    def get(self, name: str) -> SecurityPolicy:
        try:
            return self._policies[name]
        except KeyError:
            raise UnknownPolicyError(name) from None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._policies)

    def __contains__(self, name: object) -> bool:
        return name in self._policies

    def __iter__(self) -> Iterator[SecurityPolicy]:
        return iter(self._policies.values())

    def __len__(self) -> int:
        return len(self._policies)


_BUILT_IN: dict[str, SecurityPolicy] = {
    policy.name: policy
    for policy in (
        HidePoweredByPolicy(),
        FrameguardPolicy(),
        XssFilterPolicy(),
        NoSniffPolicy(),
        IeNoOpenPolicy(),
        HstsPolicy(),
        DnsPrefetchControlPolicy(),
        NoCachePolicy(),
        ContentSecurityPolicy(),
    )
}

_DEFAULT_REGISTRY = PolicyRegistry(_BUILT_IN[name] for name in CANONICAL_ORDER)
