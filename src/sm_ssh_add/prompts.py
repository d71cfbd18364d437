#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Interactive secret entry (passphrases and AppRole secret-ids)."""

from __future__ import annotations

from typing import Protocol

import click

from sm_ssh_add.exceptions import ArgumentError, PassphraseMismatchError


class Prompt(Protocol):
    """Source of secrets typed by the user."""

    def secret(self, message: str) -> str: ...


class ConsolePrompt:
    """Reads secrets from the terminal without echoing them."""

    def secret(self, message: str) -> str:
        value: str = click.prompt(
            message,
            hide_input=True,
            default="",
            show_default=False,
            err=True,
        )
        return value


def read_new_passphrase(prompt: Prompt) -> bytes:
    """Ask for a new passphrase twice and return it once both entries match."""
    first = prompt.secret("Enter passphrase")
    second = prompt.secret("Confirm passphrase")
    if first != second:
        raise PassphraseMismatchError("passphrases do not match")
    if not first:
        raise ArgumentError("passphrase cannot be empty")
    return first.encode("utf-8")


def read_passphrase(prompt: Prompt, path: str) -> bytes:
    """Ask for the passphrase protecting the key stored at ``path``."""
    return prompt.secret(f"Enter passphrase for {path}").encode("utf-8")


# 🔑🏦🔚
