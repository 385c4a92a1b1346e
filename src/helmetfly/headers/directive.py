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
"""PolicyDirective: one unit of header-affecting configuration.

Directive names are accepted in camel form (``defaultSrc``) or hyphenated
form (``default-src``), case-insensitively for the hyphenated form, and are
stored under their camel-form canonical identity.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

DirectiveValue = str | bool | int | tuple[str, ...]

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def hyphenate(name: str) -> str:
    """Return the wire spelling of a directive name: ``defaultSrc`` -> ``default-src``."""
    return _CAMEL_BOUNDARY_RE.sub("-", name.strip()).replace("_", "-").lower()


def canonical_name(name: str) -> str:
    """Return the camel-form identity of a directive name: ``default-src`` -> ``defaultSrc``."""
    head, *rest = hyphenate(name).split("-")
    return head + "".join(part.capitalize() for part in rest)


def is_hyphenated(name: str) -> bool:
    return "-" in name


@dataclass(frozen=True)
class PolicyDirective:
    """A directive key plus its value.

    ``value`` is a single string, a flag, a numeric duration, or an ordered
    tuple of source tokens. The key is alias-normalized on construction, so
    ``PolicyDirective("script-src", ...)`` and ``PolicyDirective("scriptSrc", ...)``
    compare equal.
    """

    key: str
    value: DirectiveValue

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", canonical_name(self.key))
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(self.value))

    @property
    def wire_name(self) -> str:
        return hyphenate(self.key)

    def render(self) -> str:
        """Serialize as ``<wire-name> <value...>``.

        Tokens are emitted exactly as given; quoting of keyword sources such
        as ``'self'`` is the caller's responsibility. ``True`` and empty token
        lists render the bare name.
        """
        value = self.value
        if value is True or value == ():
            return self.wire_name
        if isinstance(value, tuple):
            return " ".join((self.wire_name, *value))
        return f"{self.wire_name} {value}"
