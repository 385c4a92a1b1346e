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
"""Built-in header policies other than Content-Security-Policy.

Each policy is a lookup from a small options mapping to one or a few
``SetHeader`` / ``RemoveHeader`` mutations on well-known header names.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from helmetfly.headers.mutation import HeaderMutation, RemoveHeader, SetHeader
from helmetfly.headers.policy import RequestContext, SecurityPolicy
from helmetfly.kernel.exceptions import InvalidOptionError

# Browser preload lists only accept one year or more.
HSTS_PRELOAD_MIN_AGE = 31536000


class HidePoweredByPolicy(SecurityPolicy):
    """Removes ``X-Powered-By``, or replaces it with a decoy value."""

    name = "hidePoweredBy"
    default_options = MappingProxyType({"setTo": None})

    def evaluate(self, options: Mapping[str, Any], context: RequestContext) -> Sequence[HeaderMutation]:
        set_to = options.get("setTo")
        if set_to is None:
            return (RemoveHeader("X-Powered-By"),)
        if not isinstance(set_to, str) or not set_to:
            raise InvalidOptionError(self.name, "setTo", "must be a non-empty string")
        return (SetHeader("X-Powered-By", set_to),)


class FrameguardPolicy(SecurityPolicy):
    """Controls framing of the page through ``X-Frame-Options``."""

    name = "frameguard"
    default_options = MappingProxyType({"action": "sameorigin"})

    _ACTIONS = MappingProxyType({"deny": "DENY", "sameorigin": "SAMEORIGIN"})

    def evaluate(self, options: Mapping[str, Any], context: RequestContext) -> Sequence[HeaderMutation]:
        action = options.get("action", "sameorigin")
        value = self._ACTIONS.get(action.lower()) if isinstance(action, str) else None
        if value is None:
            raise InvalidOptionError(self.name, "action", f"{action!r} is not one of {sorted(self._ACTIONS)}")
        return (SetHeader("X-Frame-Options", value),)


class XssFilterPolicy(SecurityPolicy):
    """Enables the legacy reflected-XSS filter in blocking mode."""

    name = "xssFilter"
    default_options = MappingProxyType({"reportUri": None})

    def evaluate(self, options: Mapping[str, Any], context: RequestContext) -> Sequence[HeaderMutation]:
        value = "1; mode=block"
        report_uri = options.get("reportUri")
        if report_uri is not None:
            if not isinstance(report_uri, str) or not report_uri or any(c in report_uri for c in "; \t"):
                raise InvalidOptionError(self.name, "reportUri", "must be a URI without spaces or ';'")
            value = f"{value}; report={report_uri}"
        return (SetHeader("X-XSS-Protection", value),)


class NoSniffPolicy(SecurityPolicy):
    name = "noSniff"

    def evaluate(self, options: Mapping[str, Any], context: RequestContext) -> Sequence[HeaderMutation]:
        return (SetHeader("X-Content-Type-Options", "nosniff"),)


class IeNoOpenPolicy(SecurityPolicy):
    name = "ieNoOpen"

    def evaluate(self, options: Mapping[str, Any], context: RequestContext) -> Sequence[HeaderMutation]:
        return (SetHeader("X-Download-Options", "noopen"),)


class HstsPolicy(SecurityPolicy):
    """Asks browsers to use HTTPS only, through ``Strict-Transport-Security``.

    The policy always produces its mutation (unless ``setIf`` declines the
    request). Whether it replaces an upstream value is decided by the
    composition engine from the ``force`` option.
    """

    name = "hsts"
    default_options = MappingProxyType(
        {
            "maxAgeSeconds": 15552000,
            "includeSubDomains": False,
            "preload": False,
            "setIf": None,
        }
    )
    option_aliases = MappingProxyType({"maxAge": "maxAgeSeconds"})

    def validate(self, options: Mapping[str, Any]) -> None:
        # setIf is a per-request predicate; only its shape is checked here.
        self._check_keys(options)
        set_if = options.get("setIf")
        if set_if is not None and not callable(set_if):
            raise InvalidOptionError(self.name, "setIf", "must be callable")
        self._header_value(options)

    def evaluate(self, options: Mapping[str, Any], context: RequestContext) -> Sequence[HeaderMutation]:
        value = self._header_value(options)
        set_if = options.get("setIf")
        if set_if is not None and not set_if(context):
            return ()
        return (SetHeader("Strict-Transport-Security", value),)

    def _header_value(self, options: Mapping[str, Any]) -> str:
        max_age = options.get("maxAgeSeconds", self.default_options["maxAgeSeconds"])
        if isinstance(max_age, bool) or not isinstance(max_age, int) or max_age < 0:
            raise InvalidOptionError(self.name, "maxAgeSeconds", f"must be a non-negative integer, got {max_age!r}")
        include_sub_domains = self._flag(options, "includeSubDomains")
        preload = self._flag(options, "preload")

        parts = [f"max-age={max_age}"]
        if include_sub_domains:
            parts.append("includeSubDomains")
        if preload:
            if not include_sub_domains or max_age < HSTS_PRELOAD_MIN_AGE:
                raise InvalidOptionError(
                    self.name,
                    "preload",
                    f"requires includeSubDomains and maxAgeSeconds >= {HSTS_PRELOAD_MIN_AGE}",
                )
            parts.append("preload")
        return "; ".join(parts)


class DnsPrefetchControlPolicy(SecurityPolicy):
    name = "dnsPrefetchControl"
    default_options = MappingProxyType({"allow": False})

    def evaluate(self, options: Mapping[str, Any], context: RequestContext) -> Sequence[HeaderMutation]:
        allow = self._flag(options, "allow")
        return (SetHeader("X-DNS-Prefetch-Control", "on" if allow else "off"),)


class NoCachePolicy(SecurityPolicy):
    """Disables client and proxy caching. Off unless explicitly enabled."""

    name = "noCache"
    default_enabled = False
    default_options = MappingProxyType({"noEtag": False})

    _HEADERS = (
        SetHeader("Surrogate-Control", "no-store"),
        SetHeader("Cache-Control", "no-store, no-cache, must-revalidate, proxy-revalidate"),
        SetHeader("Pragma", "no-cache"),
        SetHeader("Expires", "0"),
    )

    def evaluate(self, options: Mapping[str, Any], context: RequestContext) -> Sequence[HeaderMutation]:
        no_etag = self._flag(options, "noEtag")
        if no_etag:
            return (*self._HEADERS, RemoveHeader("ETag"))
        return self._HEADERS
