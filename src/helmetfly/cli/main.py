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
"""helmetfly CLI: inspect and validate security header configuration."""

from __future__ import annotations

import click

from helmetfly.cli.console import print_banner


class HelmetflyCLI(click.Group):
    """Custom Click group that shows the helmetfly banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


@click.group(cls=HelmetflyCLI)
@click.version_option(package_name="helmetfly")
def cli() -> None:
    """helmetfly: security header policy tooling."""


from helmetfly.cli.headers import check_command, headers_command

cli.add_command(headers_command, name="headers")
cli.add_command(check_command, name="check")
