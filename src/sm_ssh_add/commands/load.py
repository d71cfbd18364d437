#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Load command for the sm-ssh-add CLI."""

from __future__ import annotations

import click

from sm_ssh_add.commands.common import fail, get_prompt, load_tool_config
from sm_ssh_add.config import ProviderSettings
from sm_ssh_add.console import get_command_logger
from sm_ssh_add.exceptions import SmSshAddError
from sm_ssh_add.providers import init_provider
from sm_ssh_add.workflows import connect_default_agent, load_keys, resolve_load_paths

# Get structured logger for this command
log = get_command_logger("load")


@click.command("load")
@click.option(
    "--from-config",
    is_flag=True,
    help="Load every path listed in the config file.",
)
@click.argument("path", required=False)
@click.pass_context
def load_command(ctx: click.Context, from_config: bool, path: str | None) -> None:
    """Loads the key stored at PATH (or all configured keys) into ssh-agent."""
    log.debug("Load command started", path=path, from_config=from_config)
    prompt = get_prompt(ctx)

    try:
        tool_config = load_tool_config(ctx)
        paths = resolve_load_paths(tool_config, path, from_config)
        # The agent is checked before any secret manager credentials are requested.
        agent = connect_default_agent()
        try:
            provider = init_provider(ProviderSettings.from_env(tool_config), prompt)
        except SmSshAddError:
            agent.close()
            raise
        result = load_keys(provider, paths, prompt=prompt, agent_factory=lambda: agent)
    except SmSshAddError as e:
        fail(ctx, log, e, path=path, from_config=from_config)

    log.info(
        "Load finished",
        loaded=len(result.loaded),
        already_loaded=len(result.already_loaded),
    )


# 🔑🏦🔚
