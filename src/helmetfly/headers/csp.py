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
"""Content-Security-Policy directive compiler.

Turns a mapping of directive name to source list into the single
``Content-Security-Policy`` header value::

    >>> compile_directives({"defaultSrc": ["'self'"], "script-src": ["'self'", "trusted-cdn.com"]})
    SetHeader(name='Content-Security-Policy', value="default-src 'self'; script-src 'self' trusted-cdn.com")

Directive names may be written in camel or hyphenated form, but not both
for the same directive. Every value is a list of source tokens, even for a
single source. Tokens are emitted exactly as given: keyword sources must
already carry their quotes (``"'self'"``, not ``"self"``).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from helmetfly.headers.directive import PolicyDirective, canonical_name
from helmetfly.headers.mutation import HeaderMutation, SetHeader
from helmetfly.headers.policy import FORCE_OPTION, RequestContext, SecurityPolicy
from helmetfly.kernel.exceptions import (
    DuplicateDirectiveError,
    InvalidDirectiveValueError,
    InvalidOptionError,
    MissingDefaultSrcError,
)

CSP_HEADER = "Content-Security-Policy"
CSP_REPORT_ONLY_HEADER = "Content-Security-Policy-Report-Only"

POLICY_NAME = "contentSecurityPolicy"

KNOWN_DIRECTIVES = frozenset(
    {
        "baseUri",
        "blockAllMixedContent",
        "childSrc",
        "connectSrc",
        "defaultSrc",
        "fontSrc",
        "formAction",
        "frameAncestors",
        "frameSrc",
        "imgSrc",
        "manifestSrc",
        "mediaSrc",
        "navigateTo",
        "objectSrc",
        "pluginTypes",
        "prefetchSrc",
        "reportTo",
        "reportUri",
        "requireSriFor",
        "sandbox",
        "scriptSrc",
        "scriptSrcAttr",
        "scriptSrcElem",
        "styleSrc",
        "styleSrcAttr",
        "styleSrcElem",
        "upgradeInsecureRequests",
        "workerSrc",
    }
)

_FORBIDDEN_TOKEN_CHARS = frozenset(" \t\r\n;,")

_RESERVED_OPTIONS = frozenset({"directives", "reportOnly", FORCE_OPTION})


class CSPDirectiveSet:
    """Ordered, immutable set of CSP directives keyed by canonical name.

    Directives keep the order in which they were supplied; each source list
    keeps its order with duplicates dropped. Serialization is therefore
    deterministic for identical input.
    """

    __slots__ = ("_directives",)

    def __init__(self, directives: Sequence[PolicyDirective]) -> None:
        self._directives = tuple(directives)

    @classmethod
    def from_mapping(cls, directives: Mapping[str, Any]) -> CSPDirectiveSet:
        spellings: dict[str, str] = {}
        entries: list[PolicyDirective] = []
        for key, value in directives.items():
            if not isinstance(key, str) or not key.strip():
                raise InvalidOptionError(POLICY_NAME, repr(key), "directive names must be non-empty strings")
            name = canonical_name(key)
            if name in spellings:
                raise DuplicateDirectiveError(name, (spellings[name], key))
            if name not in KNOWN_DIRECTIVES:
                raise InvalidOptionError(POLICY_NAME, key, "unknown Content-Security-Policy directive")
            spellings[name] = key
            entries.append(PolicyDirective(name, _source_tokens(name, value)))
        return cls(entries)

    def __iter__(self) -> Iterator[PolicyDirective]:
        return iter(self._directives)

    def __len__(self) -> int:
        return len(self._directives)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and any(d.key == canonical_name(name) for d in self._directives)

    def serialize(self) -> str:
        return "; ".join(directive.render() for directive in self._directives)


def _source_tokens(directive: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str | bytes):
        raise InvalidDirectiveValueError(directive, "must be a list of source tokens, not a single string")
    if not isinstance(value, Sequence):
        raise InvalidDirectiveValueError(directive, f"must be a list of source tokens, got {type(value).__name__}")

    tokens: list[str] = []
    for token in value:
        if not isinstance(token, str) or not token:
            raise InvalidDirectiveValueError(directive, f"source {token!r} is not a non-empty string")
        if _FORBIDDEN_TOKEN_CHARS.intersection(token):
            raise InvalidDirectiveValueError(directive, f"source {token!r} contains whitespace, ';' or ','")
        if token not in tokens:
            tokens.append(token)
    return tuple(tokens)


def compile_directives(directives: Mapping[str, Any], *, report_only: bool = False) -> SetHeader:
    """Compile a directive mapping into one Content-Security-Policy mutation.

    Raises:
        DuplicateDirectiveError: a directive appears in both spellings.
        InvalidDirectiveValueError: a value is not a list of valid tokens.
        MissingDefaultSrcError: ``defaultSrc`` is absent.
        InvalidOptionError: an unknown directive name.
    """
    directive_set = CSPDirectiveSet.from_mapping(directives)
    if "defaultSrc" not in directive_set:
        raise MissingDefaultSrcError()
    header = CSP_REPORT_ONLY_HEADER if report_only else CSP_HEADER
    return SetHeader(header, directive_set.serialize())


class ContentSecurityPolicy(SecurityPolicy):
    """Whitelists content sources per resource type. Off unless enabled.

    Directives may be nested under ``directives`` or given directly as
    option keys; both forms are merged before compiling.
    """

    name = POLICY_NAME
    default_enabled = False
    default_options = MappingProxyType({"directives": MappingProxyType({}), "reportOnly": False})

    def _check_keys(self, options: Mapping[str, Any]) -> None:
        # Any key besides the reserved options is a directive, checked by the compiler.
        self._flag(options, FORCE_OPTION)

    def evaluate(self, options: Mapping[str, Any], context: RequestContext) -> Sequence[HeaderMutation]:
        return (compile_directives(self._directives(options), report_only=self._flag(options, "reportOnly")),)

    def _directives(self, options: Mapping[str, Any]) -> dict[str, Any]:
        nested = options.get("directives", {})
        if not isinstance(nested, Mapping):
            raise InvalidOptionError(self.name, "directives", "must be a mapping of directive name to sources")

        directives = dict(nested)
        spellings = {canonical_name(key): key for key in nested if isinstance(key, str)}
        for key, value in options.items():
            if key in _RESERVED_OPTIONS:
                continue
            name = canonical_name(key) if isinstance(key, str) else key
            if name in spellings:
                raise DuplicateDirectiveError(name, (spellings[name], key))
            directives[key] = value
        return directives
