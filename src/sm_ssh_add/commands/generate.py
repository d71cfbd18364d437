#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Generate command for the sm-ssh-add CLI."""

from __future__ import annotations

import click
from provide.foundation.console import pout

from sm_ssh_add.commands.common import fail, get_prompt, load_tool_config
from sm_ssh_add.config import ProviderSettings
from sm_ssh_add.console import get_command_logger
from sm_ssh_add.exceptions import SmSshAddError
from sm_ssh_add.providers import init_provider
from sm_ssh_add.workflows import generate_key

# Get structured logger for this command
log = get_command_logger("generate")


@click.command("generate")
@click.option(
    "--require-passphrase",
    is_flag=True,
    help="Prompt for a passphrase to encrypt the private key.",
)
@click.option(
    "--save-path",
    is_flag=True,
    help="Add the path to the config file for 'load --from-config'.",
)
@click.option(
    "--regenerate",
    is_flag=True,
    help="Overwrite an existing key at the path.",
)
@click.argument("path")
@click.argument("comment", required=False, default="")
@click.pass_context
def generate_command(
    ctx: click.Context,
    require_passphrase: bool,
    save_path: bool,
    regenerate: bool,
    path: str,
    comment: str,
) -> None:
    """Generates an Ed25519 key pair and stores it at PATH."""
    log.debug(
        "Generate command started",
        path=path,
        require_passphrase=require_passphrase,
        save_path=save_path,
        regenerate=regenerate,
    )
    prompt = get_prompt(ctx)

    try:
        tool_config = load_tool_config(ctx)
        provider = init_provider(ProviderSettings.from_env(tool_config), prompt)
        result = generate_key(
            provider,
            tool_config,
            path,
            comment,
            prompt=prompt,
            require_passphrase=require_passphrase,
            save_path=save_path,
            regenerate=regenerate,
        )
    except SmSshAddError as e:
        fail(ctx, log, e, path=path)

    pout(result.material.public_key.decode("utf-8").rstrip("\n"))
    pout(f"Stored SSH key at {path}")
    if result.path_saved:
        pout(f"Added {path} to config")


# 🔑🏦🔚
