#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Custom exceptions for sm-ssh-add."""

from __future__ import annotations

from provide.foundation.errors import FoundationError


class SmSshAddError(FoundationError):
    """Base exception for all sm-ssh-add errors."""

    pass


class ArgumentError(SmSshAddError):
    """Raised for command-line misuse. Always reported with a usage hint."""

    pass


class ConflictingArgumentsError(ArgumentError):
    """Raised when mutually exclusive arguments are combined."""

    pass


class ConfigError(SmSshAddError):
    """Raised when the config file is missing, unreadable or invalid."""

    pass


class PersistenceError(ConfigError):
    """Raised when the config file cannot be written back to disk."""

    pass


class NoPathsConfiguredError(SmSshAddError):
    """Raised when a batch load is requested but no paths are configured."""

    pass


class DuplicateKeyError(SmSshAddError):
    """Raised when generating over an existing key without --regenerate."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"key already exists at {path}; use --regenerate to overwrite it"
        )
        self.path = path


class PassphraseMismatchError(SmSshAddError):
    """Raised when the passphrase confirmation does not match."""

    pass


class KeyGenerationError(SmSshAddError):
    """Raised when the key pair primitive or its encoding fails."""

    pass


class SecretProviderError(SmSshAddError):
    """Base exception for secret manager failures."""

    pass


class ProviderConnectionError(SecretProviderError):
    """Raised when the secret manager cannot be reached or authenticated."""

    pass


class PathNotFoundError(SecretProviderError):
    """Raised when nothing is stored at the requested path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"path not found in secret manager: {path}")
        self.path = path


class InvalidFormatError(SecretProviderError):
    """Raised when stored data lacks required fields or has malformed ones."""

    pass


class AgentError(SmSshAddError):
    """Base exception for ssh-agent failures."""

    pass


class AgentNotFoundError(AgentError):
    """Raised when no agent socket is configured in the environment."""

    pass


class AgentConnectionError(AgentError):
    """Raised when the agent socket is unreachable or the agent misbehaves."""

    pass


class DecryptionError(AgentError):
    """Raised when a private key cannot be parsed or decrypted."""

    pass


class KeyAlreadyLoadedError(AgentError):
    """Raised when the agent already holds a key with the same fingerprint.

    Callers treat this as a successful no-op.
    """

    def __init__(self, fingerprint: str) -> None:
        super().__init__(f"key already exists in ssh-agent: {fingerprint}")
        self.fingerprint = fingerprint


# 🔑🏦🔚
