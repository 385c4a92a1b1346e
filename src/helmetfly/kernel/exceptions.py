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
"""Unified exception hierarchy for helmetfly.

All library exceptions inherit from HelmetflyException, enabling unified
error handling across modules.

Categories:
- PolicyConfigurationError: configuration-shape errors, fatal at startup
- PolicyEvaluationError: a per-request policy evaluation failure
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Base Exception
# =============================================================================


class HelmetflyException(Exception):
    """Base exception for all helmetfly errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "UNKNOWN_POLICY").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class SecurityHeadersException(HelmetflyException):
    """Errors raised while resolving or applying security header policies."""


# =============================================================================
# Configuration Exceptions (fatal at startup)
# =============================================================================


class PolicyConfigurationError(SecurityHeadersException):
    """The policy configuration is malformed and must not be served."""


class UnknownPolicyError(PolicyConfigurationError):
    """A configuration key does not name a registered policy."""

    def __init__(self, policy_name: str) -> None:
        super().__init__(
            f"Unknown security header policy '{policy_name}'",
            code="UNKNOWN_POLICY",
            context={"policy": policy_name},
        )
        self.policy_name = policy_name


class InvalidOptionError(PolicyConfigurationError):
    """A policy option has an unsupported value or is not recognized."""

    def __init__(self, policy_name: str, option: str, message: str) -> None:
        super().__init__(
            f"Invalid option '{option}' for policy '{policy_name}': {message}",
            code="INVALID_OPTION",
            context={"policy": policy_name, "option": option},
        )
        self.policy_name = policy_name
        self.option = option


class DirectiveError(PolicyConfigurationError):
    """Base for Content-Security-Policy directive errors."""

    def __init__(self, message: str, code: str, directive: str | None = None) -> None:
        context: dict[str, Any] = {}
        if directive is not None:
            context["directive"] = directive
        super().__init__(message, code=code, context=context)
        self.directive = directive


class InvalidDirectiveValueError(DirectiveError):
    """A directive value is not an ordered list of source tokens."""

    def __init__(self, directive: str, message: str) -> None:
        super().__init__(
            f"Invalid value for directive '{directive}': {message}",
            code="INVALID_DIRECTIVE_VALUE",
            directive=directive,
        )


class DuplicateDirectiveError(DirectiveError):
    """The same directive was given in both its camel and hyphenated forms."""

    def __init__(self, directive: str, spellings: tuple[str, ...]) -> None:
        super().__init__(
            f"Directive '{directive}' is given more than once ({', '.join(spellings)})",
            code="DUPLICATE_DIRECTIVE",
            directive=directive,
        )
        self.spellings = spellings


class MissingDefaultSrcError(DirectiveError):
    """Content-Security-Policy is enabled without a ``defaultSrc`` directive."""

    def __init__(self) -> None:
        super().__init__(
            "Content-Security-Policy requires a 'defaultSrc' directive",
            code="MISSING_DEFAULT_SRC",
            directive="defaultSrc",
        )


# =============================================================================
# Evaluation Exceptions (per request)
# =============================================================================


class PolicyEvaluationError(SecurityHeadersException):
    """A policy failed while computing its header mutations.

    The whole composition is aborted; no partial header set is produced.
    """

    def __init__(self, policy_name: str, cause: BaseException) -> None:
        super().__init__(
            f"Policy '{policy_name}' failed to evaluate: {cause}",
            code="POLICY_EVALUATION_FAILED",
            context={"policy": policy_name},
        )
        self.policy_name = policy_name
        self.cause = cause
