#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""sm-ssh-add runtime configuration for CLI startup."""

from __future__ import annotations

from pathlib import Path

from attrs import define
from provide.foundation.config.base import field
from provide.foundation.config.env import RuntimeConfig

from sm_ssh_add.config.defaults import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_ENV_VAR,
    CONFIG_FILE_NAME,
    LOG_LEVEL_ENV_VAR,
)

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def parse_log_level(value: str) -> str:
    """Validate and normalize log levels."""
    normalized = value.strip().upper()
    if normalized not in VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {value}")
    return normalized


def default_config_path() -> Path:
    """Return the per-user config file location."""
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


@define
class SmSshAddRuntimeConfig(RuntimeConfig):
    """sm-ssh-add runtime configuration for CLI startup."""

    log_level: str = field(
        default="WARNING",
        env_var=LOG_LEVEL_ENV_VAR,
        converter=parse_log_level,
        metadata={"help": "Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)"},
    )

    config_file: str | None = field(
        default=None,
        env_var=CONFIG_FILE_ENV_VAR,
        metadata={"help": "Path to the config file (default: ~/.config/sm-ssh-add.json)"},
    )

    @property
    def effective_config_file(self) -> Path:
        if self.config_file:
            return Path(self.config_file).expanduser()
        return default_config_path()
