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
"""CompositionEngine: folds policy mutations into one header set per request.

Rules, applied per mutation in canonical policy order:

- ``SetHeader`` for a header still holding its upstream value is skipped
  unless the policy's options set ``force: true``; the upstream value is
  kept verbatim. Once a policy removes or replaces it, later writes apply.
  Otherwise last write wins.
- ``RemoveHeader`` always deletes, upstream or not.

If any policy fails, the whole composition fails with
:class:`PolicyEvaluationError` and no header set is returned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from helmetfly.headers.mutation import RemoveHeader, ResolvedHeaderSet, SetHeader
from helmetfly.headers.policy import EMPTY_CONTEXT, RequestContext
from helmetfly.headers.resolver import ResolvedPolicy
from helmetfly.kernel.exceptions import PolicyEvaluationError

logger = logging.getLogger(__name__)


class CompositionEngine:
    """Applies a resolved policy list to per-request upstream headers.

    The engine holds only the immutable policy list, so a single instance
    may serve any number of concurrent requests.
    """

    __slots__ = ("_policies",)

    def __init__(self, policies: Iterable[ResolvedPolicy]) -> None:
        self._policies: tuple[ResolvedPolicy, ...] = tuple(policies)

    @property
    def policies(self) -> tuple[ResolvedPolicy, ...]:
        return self._policies

    def apply(
        self,
        context: RequestContext | None = None,
        upstream_headers: Mapping[str, str] | None = None,
    ) -> ResolvedHeaderSet:
        """Compute the final header set for one request."""
        return apply(self._policies, context, upstream_headers)


def apply(
    policies: Sequence[ResolvedPolicy],
    context: RequestContext | None = None,
    upstream_headers: Mapping[str, str] | None = None,
) -> ResolvedHeaderSet:
    """Fold *policies* over *upstream_headers* and return the resolved set.

    Raises:
        PolicyEvaluationError: a policy failed; nothing is applied.
    """
    context = context or EMPTY_CONTEXT
    upstream = ResolvedHeaderSet(upstream_headers or {})
    # lower-cased name -> (spelling, value)
    working: dict[str, tuple[str, str]] = {name.lower(): (name, value) for name, value in upstream.items()}
    # upstream headers still holding their upstream value
    protected = set(working)

    for resolved in policies:
        try:
            mutations = resolved.policy.evaluate(resolved.options, context)
        except Exception as exc:
            raise PolicyEvaluationError(resolved.name, exc) from exc

        for mutation in mutations:
            key = mutation.name.lower()
            if isinstance(mutation, RemoveHeader):
                working.pop(key, None)
                protected.discard(key)
            elif isinstance(mutation, SetHeader):
                if key in protected and not resolved.force:
                    logger.debug(
                        "Keeping upstream %s header; policy '%s' is not forced", mutation.name, resolved.name
                    )
                    continue
                spelling = working[key][0] if key in working else mutation.name
                working[key] = (spelling, mutation.value)
                protected.discard(key)

    return ResolvedHeaderSet(working.values())
