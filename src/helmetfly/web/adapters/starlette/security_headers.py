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
"""Security headers middleware for Starlette: pure ASGI."""

from __future__ import annotations

import logging
from typing import Any

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Receive, Scope, Send

from helmetfly.headers.mutation import ResolvedHeaderSet
from helmetfly.headers.policy import RequestContext
from helmetfly.kernel.exceptions import PolicyEvaluationError
from helmetfly.web.security_headers import SecurityHeaders

logger = logging.getLogger(__name__)


def request_context(scope: Scope) -> RequestContext:
    """Build the policy-facing view of an ASGI HTTP scope."""
    return RequestContext(
        method=scope.get("method", "GET"),
        path=scope.get("path", "/"),
        scheme=scope.get("scheme", "http"),
        headers=Headers(scope=scope),
    )


class SecurityHeadersMiddleware:
    """Applies the configured security header policies to every HTTP response.

    The headers already on the response (plus any configured host defaults)
    are the upstream headers for the composition. Only the difference is
    written back, so headers no policy touches, including repeated ones
    such as ``Set-Cookie``, pass through unchanged.

    Uses raw ASGI protocol instead of ``BaseHTTPMiddleware`` so streaming
    responses and background tasks are unaffected.
    """

    def __init__(self, app: ASGIApp, security_headers: SecurityHeaders | None = None) -> None:
        self.app = app
        self._security_headers = security_headers or SecurityHeaders()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self._security_headers.enabled:
            await self.app(scope, receive, send)
            return

        context = request_context(scope)

        async def send_with_headers(message: Any) -> None:
            if message["type"] == "http.response.start":
                self._apply(context, MutableHeaders(scope=message))
            await send(message)

        await self.app(scope, receive, send_with_headers)

    def _apply(self, context: RequestContext, headers: MutableHeaders) -> None:
        upstream: dict[str, str] = {}
        for name, value in headers.items():
            upstream.setdefault(name, value)

        try:
            resolved = self._security_headers.resolve_headers(context, upstream)
        except PolicyEvaluationError as exc:
            logger.error(
                "Security headers not applied to %s %s: %s", context.method, context.path, exc, exc_info=exc.cause
            )
            return

        _write_difference(headers, ResolvedHeaderSet(upstream), resolved)


def _write_difference(headers: MutableHeaders, upstream: ResolvedHeaderSet, resolved: ResolvedHeaderSet) -> None:
    for name, value in resolved.items():
        if upstream.get(name) != value:
            headers[name] = value
    for name in upstream:
        if name not in resolved:
            del headers[name]
