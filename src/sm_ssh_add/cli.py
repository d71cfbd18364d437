#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""sm-ssh-add command-line interface entrypoint."""

from __future__ import annotations

from typing import Any

from attrs import evolve
import click
from provide.foundation import TelemetryConfig, get_hub

from sm_ssh_add import __version__
from sm_ssh_add.commands.generate import generate_command
from sm_ssh_add.commands.load import load_command
from sm_ssh_add.commands.paths import paths_command
from sm_ssh_add.config import SmSshAddRuntimeConfig

USAGE_EXIT_CODE = 1


class UsageExitGroup(click.Group):
    """Click group that reports every usage error with exit status 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = USAGE_EXIT_CODE
            raise

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = USAGE_EXIT_CODE
            raise


@click.group(cls=UsageExitGroup, context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(
    __version__,
    "-V",
    "--version",
    prog_name="sm-ssh-add",
    message="%(prog)s version %(version)s",
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Generate SSH keys into a secret manager and load them into ssh-agent.

    Configure logging via environment variables:
    - SM_SSH_ADD_LOG_LEVEL: Set log level (trace, debug, info, warning, error)
    - SM_SSH_ADD_CONFIG: Use a config file other than ~/.config/sm-ssh-add.json
    - PROVIDE_LOG_FILE: Write logs to file
    """
    ctx.ensure_object(dict)

    # Load sm-ssh-add configuration from environment
    runtime_config = SmSshAddRuntimeConfig.from_env()

    # Initialize Foundation with proper configuration
    base_telemetry = TelemetryConfig.from_env()
    telemetry_config = evolve(
        base_telemetry,
        service_name="sm-ssh-add",
        logging=evolve(
            base_telemetry.logging,
            default_level=runtime_config.log_level,  # type: ignore[arg-type]
        ),
    )

    hub = get_hub()
    hub.initialize_foundation(telemetry_config)

    ctx.obj["runtime_config"] = runtime_config


cli.add_command(generate_command, name="generate")
cli.add_command(load_command, name="load")
cli.add_command(paths_command, name="paths")

main = cli

if __name__ == "__main__":
    cli()

# 🔑🏦🔚
