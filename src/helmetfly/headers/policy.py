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
"""SecurityPolicy: a named, pure computation from options to header mutations."""

from __future__ import annotations

import abc
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

from helmetfly.headers.mutation import HeaderMutation
from helmetfly.kernel.exceptions import InvalidOptionError

#: Option understood by every policy; consumed by the composition override rule.
FORCE_OPTION = "force"


@dataclass(frozen=True)
class RequestContext:
    """Per-request facts a policy may consult while evaluating."""

    method: str = "GET"
    path: str = "/"
    scheme: str = "http"
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_secure(self) -> bool:
        return self.scheme in ("https", "wss")


EMPTY_CONTEXT = RequestContext()


class SecurityPolicy(abc.ABC):
    """Base class for header policies.

    Subclasses declare their ``name``, whether they are enabled by default,
    their default options and any option aliases, then implement
    :meth:`validate` and :meth:`evaluate`. Instances hold no state, so one
    instance is shared by every concurrent request.
    """

    name: ClassVar[str]
    default_enabled: ClassVar[bool] = True
    default_options: ClassVar[Mapping[str, Any]] = MappingProxyType({})
    option_aliases: ClassVar[Mapping[str, str]] = MappingProxyType({})

    def normalize_options(self, options: Mapping[str, Any]) -> dict[str, Any]:
        """Rewrite aliased option keys to their canonical spelling."""
        normalized: dict[str, Any] = {}
        for key, value in options.items():
            canonical = self.option_aliases.get(key, key)
            if canonical in normalized:
                raise InvalidOptionError(self.name, key, f"conflicts with '{canonical}'")
            normalized[canonical] = value
        return normalized

    def validate(self, options: Mapping[str, Any]) -> None:
        """Check effective options; raise :class:`InvalidOptionError` on bad input.

        The default implementation rejects unknown keys and performs a trial
        evaluation against an empty request context.
        """
        self._check_keys(options)
        self.evaluate(options, EMPTY_CONTEXT)

    def _check_keys(self, options: Mapping[str, Any]) -> None:
        allowed = set(self.default_options) | {FORCE_OPTION}
        for key in options:
            if key not in allowed:
                raise InvalidOptionError(self.name, key, "unrecognized option")
        self._flag(options, FORCE_OPTION)

    @abc.abstractmethod
    def evaluate(self, options: Mapping[str, Any], context: RequestContext) -> Sequence[HeaderMutation]:
        """Return the header mutations for one request."""
        ...

    def _flag(self, options: Mapping[str, Any], key: str) -> bool:
        value = options.get(key, False)
        if not isinstance(value, bool):
            raise InvalidOptionError(self.name, key, "must be a boolean")
        return value

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
