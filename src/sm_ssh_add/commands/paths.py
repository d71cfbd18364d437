#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Paths command for the sm-ssh-add CLI."""

from __future__ import annotations

import click
from provide.foundation.console import pout

from sm_ssh_add.commands.common import fail, load_tool_config
from sm_ssh_add.console import get_command_logger
from sm_ssh_add.exceptions import SmSshAddError

log = get_command_logger("paths")


@click.command("paths")
@click.pass_context
def paths_command(ctx: click.Context) -> None:
    """Lists the paths that 'load --from-config' will load."""
    try:
        tool_config = load_tool_config(ctx)
    except SmSshAddError as e:
        fail(ctx, log, e)

    paths = tool_config.get_paths()
    if not paths:
        pout("No paths configured.")
        return

    for entry in paths:
        pout(entry)


# 🔑🏦🔚
