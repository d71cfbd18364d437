#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""SSH key generation and ssh-agent access."""

from __future__ import annotations

from sm_ssh_add.ssh.agent import AgentClient
from sm_ssh_add.ssh.keygen import generate_key_pair

__all__ = [
    "AgentClient",
    "generate_key_pair",
]

# 🔑🏦🔚
