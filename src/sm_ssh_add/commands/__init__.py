#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Command modules for the sm-ssh-add CLI."""

from __future__ import annotations

from sm_ssh_add.commands.generate import generate_command
from sm_ssh_add.commands.load import load_command
from sm_ssh_add.commands.paths import paths_command

__all__ = [
    "generate_command",
    "load_command",
    "paths_command",
]

# 🔑🏦🔚
