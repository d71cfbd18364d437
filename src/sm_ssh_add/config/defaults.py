#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Centralized default values for sm-ssh-add configuration."""

from __future__ import annotations

# =================================
# Config file defaults
# =================================
CONFIG_FILE_NAME = "sm-ssh-add.json"
CONFIG_DIR_NAME = ".config"
DEFAULT_FILE_PERMS = 0o600  # Read/write for owner only

# =================================
# Environment variables
# =================================
# First entry takes precedence
ADDRESS_ENV_VARS = ("BAO_ADDR", "VAULT_ADDR")
TOKEN_ENV_VARS = ("BAO_TOKEN", "VAULT_TOKEN")
APPROLE_SECRET_ID_ENV_VAR = "VAULT_APPROLE_SECRET_ID"
AGENT_SOCKET_ENV_VAR = "SSH_AUTH_SOCK"
CONFIG_FILE_ENV_VAR = "SM_SSH_ADD_CONFIG"
LOG_LEVEL_ENV_VAR = "SM_SSH_ADD_LOG_LEVEL"

# =================================
# Secret layout
# =================================
FIELD_PRIVATE_KEY = "private_key"
FIELD_PUBLIC_KEY = "public_key"
FIELD_REQUIRE_PASSPHRASE = "require_passphrase"
FIELD_COMMENT = "comment"

# =================================
# AppRole defaults
# =================================
APPROLE_ROLE_NAME = "sm-ssh-add"
APPROLE_SECRET_ID_HINT = f"vault write -f auth/approle/role/{APPROLE_ROLE_NAME}/secret-id"

# =================================
# Key generation defaults
# =================================
KEY_ALGORITHM = "ssh-ed25519"

# 🔑🏦🔚
