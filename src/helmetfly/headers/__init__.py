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
"""Security header policy engine.

Typical startup/request flow::

    policies = ConfigResolver().resolve({"frameguard": {"action": "deny"}, "noCache": True})
    engine = CompositionEngine(policies)
    headers = engine.apply(RequestContext(path="/"), upstream_headers={"Content-Type": "text/html"})
"""

from helmetfly.headers.csp import CSPDirectiveSet, ContentSecurityPolicy, compile_directives
from helmetfly.headers.directive import PolicyDirective, canonical_name, hyphenate
from helmetfly.headers.engine import CompositionEngine, apply
from helmetfly.headers.mutation import HeaderMutation, RemoveHeader, ResolvedHeaderSet, SetHeader
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
from helmetfly.headers.policy import RequestContext, SecurityPolicy
from helmetfly.headers.registry import CANONICAL_ORDER, PolicyRegistry
from helmetfly.headers.resolver import ConfigResolver, ResolvedPolicy, resolve

__all__ = [
    # Model
    "PolicyDirective",
    "HeaderMutation",
    "SetHeader",
    "RemoveHeader",
    "ResolvedHeaderSet",
    "RequestContext",
    "canonical_name",
    "hyphenate",
    # Policies
    "SecurityPolicy",
    "HidePoweredByPolicy",
    "FrameguardPolicy",
    "XssFilterPolicy",
    "NoSniffPolicy",
    "IeNoOpenPolicy",
    "HstsPolicy",
    "DnsPrefetchControlPolicy",
    "NoCachePolicy",
    "ContentSecurityPolicy",
    # CSP
    "CSPDirectiveSet",
    "compile_directives",
    # Registry / resolution / composition
    "CANONICAL_ORDER",
    "PolicyRegistry",
    "ConfigResolver",
    "ResolvedPolicy",
    "resolve",
    "CompositionEngine",
    "apply",
]
