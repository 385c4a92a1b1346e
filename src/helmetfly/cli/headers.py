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
"""'helmetfly headers' and 'helmetfly check': resolve a configuration offline."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from helmetfly.cli.console import console
from helmetfly.core.config import Config
from helmetfly.headers.policy import RequestContext
from helmetfly.kernel.exceptions import HelmetflyException
from helmetfly.web.security_headers import SecurityHeaders

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML or TOML configuration file.",
)
_profile_option = click.option(
    "--profile",
    "-p",
    "profiles",
    multiple=True,
    help="Active profile overlay (repeatable).",
)


def _load(config_path: Path | None, profiles: tuple[str, ...]) -> SecurityHeaders:
    """Build the facade, exiting with status 1 on an invalid configuration."""
    try:
        if config_path is None:
            return SecurityHeaders()
        return SecurityHeaders.from_config(Config.from_file(config_path, active_profiles=list(profiles)))
    except (HelmetflyException, ValueError) as exc:
        console.print(f"[error]Invalid security header configuration:[/error] {escape(str(exc))}")
        raise SystemExit(1) from None


def _parse_upstream(values: tuple[str, ...]) -> dict[str, str]:
    upstream: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected 'Name: value', got {raw!r}", param_hint="--upstream")
        upstream[name.strip()] = value.strip()
    return upstream


@click.command()
@_config_option
@_profile_option
@click.option("--upstream", "-u", multiple=True, help="Header already on the response, as 'Name: value'.")
@click.option("--path", default="/", show_default=True, help="Request path for the evaluation context.")
@click.option("--https/--http", "secure", default=True, help="Request scheme for the evaluation context.")
def headers_command(
    config_path: Path | None,
    profiles: tuple[str, ...],
    upstream: tuple[str, ...],
    path: str,
    secure: bool,
) -> None:
    """Print the response headers a configuration produces."""
    security_headers = _load(config_path, profiles)
    upstream_headers = _parse_upstream(upstream)
    context = RequestContext(path=path, scheme="https" if secure else "http")

    try:
        resolved = security_headers.resolve_headers(context, upstream_headers)
    except HelmetflyException as exc:
        console.print(f"[error]Evaluation failed:[/error] {escape(str(exc))}")
        raise SystemExit(1) from None

    policies = ", ".join(p.name for p in security_headers.policies) or "none"
    console.print(f"\n[info]Active policies:[/info] {policies}\n")

    table = Table(title="Response Headers", border_style="dim")
    table.add_column("Header", style="info")
    table.add_column("Value")
    table.add_column("Source", style="dim")
    upstream_lower = {name.lower(): value for name, value in security_headers.host_defaults.items()}
    upstream_lower.update({name.lower(): value for name, value in upstream_headers.items()})
    for name, value in resolved.items():
        source = "upstream" if upstream_lower.get(name.lower()) == value else "policy"
        table.add_row(escape(name), escape(value), source)
    console.print(table)
    console.print()


@click.command()
@_config_option
@_profile_option
def check_command(config_path: Path | None, profiles: tuple[str, ...]) -> None:
    """Validate a configuration and list the active policies."""
    security_headers = _load(config_path, profiles)
    if not security_headers.enabled:
        console.print("  [warning]![/warning] Security headers are disabled")
        return
    for resolved in security_headers.policies:
        console.print(f"  [success]✓[/success] {resolved.name}")
    console.print("\n  [success]Configuration is valid.[/success]\n")
