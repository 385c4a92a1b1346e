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
"""Tests for Config loading, placeholders, merging, and binding."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest

from helmetfly.core.config import Config, config_properties, deep_merge


class TestConfig:
    def test_get_nested_value(self):
        config = Config({"helmetfly": {"logging": {"format": "json"}}})
        assert config.get("helmetfly.logging.format") == "json"

    def test_get_with_default(self):
        config = Config({})
        assert config.get("missing.key", "default") == "default"

    def test_false_value_is_not_missing(self):
        config = Config({"web": {"enabled": False}})
        assert config.get("web.enabled", True) is False

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("HELMETFLY_LOGGING_FORMAT", "json")
        config = Config({"helmetfly": {"logging": {"format": "console"}}})
        assert config.get("helmetfly.logging.format") == "json"

    def test_env_var_key_with_hyphen(self, monkeypatch):
        monkeypatch.setenv("HELMETFLY_WEB_SECURITY_HEADERS_ENABLED", "false")
        config = Config({})
        assert config.get("helmetfly.web.security-headers.enabled") == "false"

    def test_get_section(self):
        config = Config({"helmetfly": {"web": {"security-headers": {"enabled": True}}}})
        assert config.get_section("helmetfly.web.security-headers") == {"enabled": True}
        assert config.get_section("helmetfly.missing") == {}


class TestPlaceholders:
    def test_env_placeholder(self, monkeypatch):
        monkeypatch.setenv("REPORT_HOST", "reports.example.com")
        config = Config({"csp": {"report": "https://${REPORT_HOST}/csp"}})
        assert config.get("csp.report") == "https://reports.example.com/csp"

    def test_config_reference(self):
        config = Config({"cdn": "trusted-cdn.com", "csp": {"script": "${cdn}"}})
        assert config.get("csp.script") == "trusted-cdn.com"

    def test_inline_default(self):
        config = Config({"csp": {"script": "${HELMETFLY_TEST_UNSET_VAR:'self'}"}})
        assert config.get("csp.script") == "'self'"

    def test_unresolvable(self):
        config = Config({"csp": {"script": "${HELMETFLY_TEST_UNSET_VAR}"}})
        with pytest.raises(ValueError, match="Cannot resolve placeholder"):
            config.get("csp.script")

    def test_circular_reference(self):
        config = Config({"a": "${b}", "b": "${a}"})
        with pytest.raises(ValueError, match="circular"):
            config.get("a")


class TestFileLoading:
    def test_load_from_yaml_file(self, tmp_path: Path):
        config_file = tmp_path / "helmetfly.yaml"
        config_file.write_text("helmetfly:\n  logging:\n    format: json\n")
        config = Config.from_file(config_file)
        assert config.get("helmetfly.logging.format") == "json"
        assert config.get("helmetfly.logging.level.root") == "INFO"

    def test_load_from_toml_file(self, tmp_path: Path):
        config_file = tmp_path / "helmetfly.toml"
        config_file.write_text('[helmetfly.web.security-headers.policies]\nnoCache = true\n')
        config = Config.from_file(config_file)
        assert config.get_section("helmetfly.web.security-headers.policies") == {"noCache": True}

    def test_framework_defaults_recorded(self, tmp_path: Path):
        config_file = tmp_path / "helmetfly.yaml"
        config_file.write_text("{}\n")
        config = Config.from_file(config_file)
        assert config.loaded_sources[0].startswith("helmetfly-defaults.yaml")
        assert config.loaded_sources[1] == str(config_file)

    def test_without_defaults(self, tmp_path: Path):
        config_file = tmp_path / "helmetfly.yaml"
        config_file.write_text("app: {}\n")
        config = Config.from_file(config_file, load_defaults=False)
        assert config.get("helmetfly.logging.format") is None

    def test_missing_file_keeps_defaults(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.get("helmetfly.web.security-headers.enabled") is True

    def test_profiles_merge_in_order(self, tmp_path: Path):
        (tmp_path / "helmetfly.yaml").write_text("helmetfly:\n  logging:\n    format: console\n")
        (tmp_path / "helmetfly-dev.yaml").write_text("helmetfly:\n  logging:\n    format: json\n")
        (tmp_path / "helmetfly-local.yaml").write_text("helmetfly:\n  logging:\n    level:\n      root: DEBUG\n")

        config = Config.from_file(tmp_path / "helmetfly.yaml", active_profiles=["dev", "local", "absent"])
        assert config.get("helmetfly.logging.format") == "json"
        assert config.get("helmetfly.logging.level.root") == "DEBUG"


class TestDeepMerge:
    def test_override_wins(self):
        assert deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested(self):
        merged = deep_merge({"hsts": {"maxAgeSeconds": 1, "force": False}}, {"hsts": {"force": True}})
        assert merged == {"hsts": {"maxAgeSeconds": 1, "force": True}}

    def test_inputs_not_mutated(self):
        base = {"csp": {"directives": {}}}
        override = {"csp": {"directives": {"defaultSrc": ["'self'"]}}}
        merged = deep_merge(base, override)
        merged["csp"]["directives"]["imgSrc"] = ["data:"]
        assert base == {"csp": {"directives": {}}}
        assert override == {"csp": {"directives": {"defaultSrc": ["'self'"]}}}

    def test_scalar_replaces_mapping(self):
        assert deep_merge({"noCache": {"noEtag": True}}, {"noCache": False}) == {"noCache": False}


class TestBinding:
    def test_bind_to_dataclass(self):
        @config_properties(prefix="helmetfly.example")
        @dataclass
        class ExampleProperties:
            name: str = "default"
            port: int = 5
            debug: bool = False

        config = Config({"helmetfly": {"example": {"name": "svc", "port": "20", "debug": "yes"}}})
        props = config.bind(ExampleProperties)
        assert props.name == "svc"
        assert props.port == 20
        assert props.debug is True

    def test_bind_requires_decorator(self):
        @dataclass
        class Plain:
            name: str = "x"

        with pytest.raises(ValueError, match="config_properties"):
            Config({}).bind(Plain)
