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
"""Tests for PolicyRegistry."""

from __future__ import annotations

import pytest

from helmetfly.headers.policies import FrameguardPolicy, NoSniffPolicy
from helmetfly.headers.registry import CANONICAL_ORDER, PolicyRegistry
from helmetfly.kernel.exceptions import UnknownPolicyError


class TestDefaultRegistry:
    def test_canonical_order(self) -> None:
        assert PolicyRegistry.default().names == (
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
        assert PolicyRegistry.default().names == CANONICAL_ORDER

    def test_default_enabled_table(self) -> None:
        enabled = {policy.name: policy.default_enabled for policy in PolicyRegistry.default()}
        assert enabled == {
            "hidePoweredBy": True,
            "frameguard": True,
            "xssFilter": True,
            "noSniff": True,
            "ieNoOpen": True,
            "hsts": True,
            "dnsPrefetchControl": True,
            "noCache": False,
            "contentSecurityPolicy": False,
        }

    def test_default_is_shared(self) -> None:
        assert PolicyRegistry.default() is PolicyRegistry.default()

    def test_get_unknown(self) -> None:
        with pytest.raises(UnknownPolicyError) as exc_info:
            PolicyRegistry.default().get("turboMode")
        assert exc_info.value.policy_name == "turboMode"

    def test_contains(self) -> None:
        assert "hsts" in PolicyRegistry.default()
        assert "turboMode" not in PolicyRegistry.default()


class TestCustomRegistry:
    def test_order_follows_construction(self) -> None:
        registry = PolicyRegistry([NoSniffPolicy(), FrameguardPolicy()])
        assert registry.names == ("noSniff", "frameguard")
        assert len(registry) == 2

    def test_duplicate_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="noSniff"):
            PolicyRegistry([NoSniffPolicy(), NoSniffPolicy()])
