#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""sm-ssh-add configuration: runtime settings, the config file and provider settings."""

from __future__ import annotations

from sm_ssh_add.config.runtime import SmSshAddRuntimeConfig, default_config_path
from sm_ssh_add.config.settings import (
    ProviderKind,
    ProviderSettings,
    ToolConfig,
    resolve_agent_socket,
)

__all__ = [
    "ProviderKind",
    "ProviderSettings",
    "SmSshAddRuntimeConfig",
    "ToolConfig",
    "default_config_path",
    "resolve_agent_socket",
]

# 🔑🏦🔚
