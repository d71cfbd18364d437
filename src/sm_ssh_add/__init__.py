#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""sm-ssh-add core package exports."""

from __future__ import annotations

from provide.foundation.utils import get_version

from sm_ssh_add.exceptions import SmSshAddError
from sm_ssh_add.models import AgentKeyRecord, KeyMaterial
from sm_ssh_add.providers import SecretProvider, init_provider
from sm_ssh_add.ssh import AgentClient, generate_key_pair
from sm_ssh_add.workflows import generate_key, load_keys, resolve_load_paths

__version__ = get_version("sm-ssh-add", caller_file=__file__)

__all__ = [
    "AgentClient",
    "AgentKeyRecord",
    "KeyMaterial",
    "SecretProvider",
    "SmSshAddError",
    "__version__",
    "generate_key",
    "generate_key_pair",
    "init_provider",
    "load_keys",
    "resolve_load_paths",
]

# 🔑🏦🔚
