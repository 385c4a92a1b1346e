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
"""Tests for the helmetfly exception hierarchy."""

from __future__ import annotations

from helmetfly.kernel.exceptions import (
    DirectiveError,
    DuplicateDirectiveError,
    HelmetflyException,
    InvalidDirectiveValueError,
    InvalidOptionError,
    MissingDefaultSrcError,
    PolicyConfigurationError,
    PolicyEvaluationError,
    SecurityHeadersException,
    UnknownPolicyError,
)


class TestHelmetflyException:
    def test_basic_message(self):
        exc = HelmetflyException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = HelmetflyException("bad", code="BAD_001", context={"key": "value"})
        assert exc.code == "BAD_001"
        assert exc.context["key"] == "value"

    def test_context_defaults_to_empty_dict(self):
        exc = HelmetflyException("test")
        exc.context["key"] = "value"
        exc2 = HelmetflyException("test2")
        assert exc2.context == {}


class TestPolicyErrors:
    def test_unknown_policy_names_key(self):
        exc = UnknownPolicyError("turboMode")
        assert exc.policy_name == "turboMode"
        assert exc.code == "UNKNOWN_POLICY"
        assert exc.context == {"policy": "turboMode"}
        assert "turboMode" in str(exc)

    def test_invalid_option(self):
        exc = InvalidOptionError("frameguard", "action", "'bogus' is not allowed")
        assert exc.policy_name == "frameguard"
        assert exc.option == "action"
        assert exc.code == "INVALID_OPTION"
        assert "frameguard" in str(exc)

    def test_directive_errors(self):
        assert MissingDefaultSrcError().directive == "defaultSrc"
        assert MissingDefaultSrcError().code == "MISSING_DEFAULT_SRC"
        assert InvalidDirectiveValueError("scriptSrc", "not a list").context == {"directive": "scriptSrc"}
        dup = DuplicateDirectiveError("defaultSrc", ("defaultSrc", "default-src"))
        assert dup.spellings == ("defaultSrc", "default-src")
        assert "default-src" in str(dup)

    def test_evaluation_error_keeps_cause(self):
        cause = ValueError("broken")
        exc = PolicyEvaluationError("hsts", cause)
        assert exc.policy_name == "hsts"
        assert exc.cause is cause
        assert "hsts" in str(exc)


class TestExceptionHierarchy:
    def test_configuration_errors(self):
        for cls in (UnknownPolicyError, InvalidOptionError, DirectiveError):
            assert issubclass(cls, PolicyConfigurationError)

    def test_directive_errors(self):
        for cls in (InvalidDirectiveValueError, DuplicateDirectiveError, MissingDefaultSrcError):
            assert issubclass(cls, DirectiveError)

    def test_evaluation_error_is_not_configuration_error(self):
        assert not issubclass(PolicyEvaluationError, PolicyConfigurationError)
        assert issubclass(PolicyEvaluationError, SecurityHeadersException)

    def test_all_are_helmetfly_exceptions(self):
        assert issubclass(SecurityHeadersException, HelmetflyException)
        assert issubclass(HelmetflyException, Exception)
