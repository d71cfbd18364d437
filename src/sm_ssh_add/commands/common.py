#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Shared plumbing for the CLI commands."""

from __future__ import annotations

from typing import Any, NoReturn

import click
from provide.foundation.console import perr

from sm_ssh_add.config import SmSshAddRuntimeConfig, ToolConfig
from sm_ssh_add.exceptions import ArgumentError, SmSshAddError
from sm_ssh_add.prompts import ConsolePrompt, Prompt


def get_runtime_config(ctx: click.Context) -> SmSshAddRuntimeConfig:
    obj = ctx.find_object(dict) or {}
    runtime = obj.get("runtime_config")
    if runtime is None:
        runtime = SmSshAddRuntimeConfig.from_env()
    return runtime


def get_prompt(ctx: click.Context) -> Prompt:
    obj = ctx.find_object(dict) or {}
    return obj.get("prompt") or ConsolePrompt()


def load_tool_config(ctx: click.Context) -> ToolConfig:
    """Read the config file named by the runtime config."""
    return ToolConfig.load(get_runtime_config(ctx).effective_config_file)


def fail(ctx: click.Context, log: Any, error: SmSshAddError, **context: Any) -> NoReturn:
    """Report ``error`` and exit: usage errors via click, the rest with status 1."""
    if isinstance(error, ArgumentError):
        raise click.UsageError(str(error), ctx=ctx) from error
    log.error("Command failed", error=str(error), error_type=type(error).__name__, **context)
    perr(f"error: {error}")
    ctx.exit(1)


# 🔑🏦🔚
