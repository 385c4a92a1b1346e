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
"""Tests for the built-in header policies."""

from __future__ import annotations

import pytest

from helmetfly.headers.mutation import RemoveHeader, SetHeader
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
from helmetfly.headers.policy import EMPTY_CONTEXT, RequestContext
from helmetfly.kernel.exceptions import InvalidOptionError


class TestHsts:
    @pytest.mark.parametrize("max_age", [0, 1, 86400, 7776000, 31536000])
    def test_max_age_rendered_exactly(self, max_age: int) -> None:
        mutations = HstsPolicy().evaluate({"maxAgeSeconds": max_age}, EMPTY_CONTEXT)
        assert mutations == (SetHeader("Strict-Transport-Security", f"max-age={max_age}"),)

    def test_default_max_age(self) -> None:
        policy = HstsPolicy()
        mutations = policy.evaluate(policy.default_options, EMPTY_CONTEXT)
        assert mutations == (SetHeader("Strict-Transport-Security", "max-age=15552000"),)

    @pytest.mark.parametrize("max_age", [-1, 1.5, "7776000", True, None])
    def test_invalid_max_age(self, max_age: object) -> None:
        with pytest.raises(InvalidOptionError) as exc_info:
            HstsPolicy().evaluate({"maxAgeSeconds": max_age}, EMPTY_CONTEXT)
        assert exc_info.value.option == "maxAgeSeconds"
        assert exc_info.value.policy_name == "hsts"

    def test_include_sub_domains_and_preload(self) -> None:
        mutations = HstsPolicy().evaluate(
            {"maxAgeSeconds": 31536000, "includeSubDomains": True, "preload": True}, EMPTY_CONTEXT
        )
        assert mutations[0].value == "max-age=31536000; includeSubDomains; preload"

    def test_preload_requires_sub_domains(self) -> None:
        with pytest.raises(InvalidOptionError, match="preload"):
            HstsPolicy().evaluate({"maxAgeSeconds": 31536000, "preload": True}, EMPTY_CONTEXT)

    def test_preload_requires_one_year(self) -> None:
        with pytest.raises(InvalidOptionError, match="preload"):
            HstsPolicy().evaluate({"maxAgeSeconds": 86400, "includeSubDomains": True, "preload": True}, EMPTY_CONTEXT)

    def test_force_does_not_change_output(self) -> None:
        forced = HstsPolicy().evaluate({"maxAgeSeconds": 100, "force": True}, EMPTY_CONTEXT)
        assert forced == (SetHeader("Strict-Transport-Security", "max-age=100"),)

    def test_set_if_declines_request(self) -> None:
        options = {"maxAgeSeconds": 100, "setIf": lambda ctx: ctx.is_secure}
        assert HstsPolicy().evaluate(options, RequestContext(scheme="http")) == ()
        assert HstsPolicy().evaluate(options, RequestContext(scheme="https")) != ()

    def test_validate_does_not_call_set_if(self) -> None:
        def set_if(ctx: RequestContext) -> bool:
            raise AssertionError("called at startup")

        HstsPolicy().validate({"maxAgeSeconds": 100, "setIf": set_if})

    def test_validate_rejects_non_callable_set_if(self) -> None:
        with pytest.raises(InvalidOptionError, match="setIf"):
            HstsPolicy().validate({"setIf": "yes"})

    def test_max_age_alias(self) -> None:
        assert HstsPolicy().normalize_options({"maxAge": 10}) == {"maxAgeSeconds": 10}

    def test_alias_and_canonical_conflict(self) -> None:
        with pytest.raises(InvalidOptionError):
            HstsPolicy().normalize_options({"maxAge": 10, "maxAgeSeconds": 20})


class TestFrameguard:
    def test_deny(self) -> None:
        assert FrameguardPolicy().evaluate({"action": "deny"}, EMPTY_CONTEXT) == (SetHeader("X-Frame-Options", "DENY"),)

    def test_sameorigin(self) -> None:
        mutations = FrameguardPolicy().evaluate({"action": "sameorigin"}, EMPTY_CONTEXT)
        assert mutations == (SetHeader("X-Frame-Options", "SAMEORIGIN"),)

    def test_action_case_insensitive(self) -> None:
        assert FrameguardPolicy().evaluate({"action": "DENY"}, EMPTY_CONTEXT)[0].value == "DENY"

    def test_default_action(self) -> None:
        assert FrameguardPolicy().evaluate({}, EMPTY_CONTEXT)[0].value == "SAMEORIGIN"

    @pytest.mark.parametrize("action", ["bogus", "allow-from", "", 1, None])
    def test_invalid_action(self, action: object) -> None:
        with pytest.raises(InvalidOptionError) as exc_info:
            FrameguardPolicy().evaluate({"action": action}, EMPTY_CONTEXT)
        assert exc_info.value.option == "action"


class TestSimplePolicies:
    def test_no_sniff(self) -> None:
        assert NoSniffPolicy().evaluate({}, EMPTY_CONTEXT) == (SetHeader("X-Content-Type-Options", "nosniff"),)

    def test_ie_no_open(self) -> None:
        assert IeNoOpenPolicy().evaluate({}, EMPTY_CONTEXT) == (SetHeader("X-Download-Options", "noopen"),)

    def test_xss_filter(self) -> None:
        assert XssFilterPolicy().evaluate({}, EMPTY_CONTEXT) == (SetHeader("X-XSS-Protection", "1; mode=block"),)

    def test_xss_filter_report_uri(self) -> None:
        mutations = XssFilterPolicy().evaluate({"reportUri": "/report-xss"}, EMPTY_CONTEXT)
        assert mutations[0].value == "1; mode=block; report=/report-xss"

    def test_xss_filter_rejects_injected_report_uri(self) -> None:
        with pytest.raises(InvalidOptionError):
            XssFilterPolicy().evaluate({"reportUri": "/a; mode=off"}, EMPTY_CONTEXT)

    def test_hide_powered_by_removes(self) -> None:
        assert HidePoweredByPolicy().evaluate({}, EMPTY_CONTEXT) == (RemoveHeader("X-Powered-By"),)

    def test_hide_powered_by_set_to(self) -> None:
        mutations = HidePoweredByPolicy().evaluate({"setTo": "PHP 4.2.0"}, EMPTY_CONTEXT)
        assert mutations == (SetHeader("X-Powered-By", "PHP 4.2.0"),)

    def test_dns_prefetch_control(self) -> None:
        policy = DnsPrefetchControlPolicy()
        assert policy.evaluate({}, EMPTY_CONTEXT) == (SetHeader("X-DNS-Prefetch-Control", "off"),)
        assert policy.evaluate({"allow": True}, EMPTY_CONTEXT) == (SetHeader("X-DNS-Prefetch-Control", "on"),)

    def test_dns_prefetch_control_rejects_non_bool(self) -> None:
        with pytest.raises(InvalidOptionError):
            DnsPrefetchControlPolicy().evaluate({"allow": "yes"}, EMPTY_CONTEXT)

    def test_no_cache(self) -> None:
        mutations = NoCachePolicy().evaluate({}, EMPTY_CONTEXT)
        assert {m.name: m.value for m in mutations} == {
            "Surrogate-Control": "no-store",
            "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
            "Pragma": "no-cache",
            "Expires": "0",
        }

    def test_no_cache_no_etag(self) -> None:
        mutations = NoCachePolicy().evaluate({"noEtag": True}, EMPTY_CONTEXT)
        assert mutations[-1] == RemoveHeader("ETag")


class TestValidation:
    def test_unknown_option_rejected(self) -> None:
        with pytest.raises(InvalidOptionError) as exc_info:
            FrameguardPolicy().validate({"action": "deny", "mode": "strict"})
        assert exc_info.value.option == "mode"

    def test_force_accepted_by_every_policy(self) -> None:
        NoSniffPolicy().validate({"force": True})
        FrameguardPolicy().validate({"action": "deny", "force": False})

    def test_force_must_be_bool(self) -> None:
        with pytest.raises(InvalidOptionError, match="force"):
            NoSniffPolicy().validate({"force": "yes"})

    def test_validate_runs_trial_evaluation(self) -> None:
        with pytest.raises(InvalidOptionError):
            FrameguardPolicy().validate({"action": "bogus"})

    def test_defaults_enabled(self) -> None:
        assert NoSniffPolicy.default_enabled is True
        assert NoCachePolicy.default_enabled is False
