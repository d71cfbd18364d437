#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Persisted tool configuration and resolved provider settings.

The config file is a small JSON document::

    {
      "default_provider": "vault",
      "vault_paths": ["secret/data/ssh/github"],
      "vault_approle_role_id": "..."
    }

Environment lookups for the secret manager and the agent happen here, once,
so that the rest of the code receives explicit values.
"""

from __future__ import annotations

from collections.abc import Mapping
import enum
import os
from pathlib import Path
from typing import Any

from attrs import define, field
from provide.foundation import logger
from provide.foundation.errors import FoundationError
from provide.foundation.file.directory import ensure_parent_dir
from provide.foundation.file.formats import write_json
from provide.foundation.serialization import json_loads

from sm_ssh_add.config.defaults import (
    ADDRESS_ENV_VARS,
    AGENT_SOCKET_ENV_VAR,
    APPROLE_SECRET_ID_ENV_VAR,
    DEFAULT_FILE_PERMS,
    TOKEN_ENV_VARS,
)
from sm_ssh_add.exceptions import ConfigError, PersistenceError


class ProviderKind(enum.Enum):
    """Known secret manager backends."""

    VAULT = "vault"

    @classmethod
    def parse(cls, value: str) -> ProviderKind:
        if not value:
            raise ConfigError("default_provider cannot be empty")
        try:
            return cls(value)
        except ValueError:
            known = ", ".join(kind.value for kind in cls)
            raise ConfigError(f"invalid provider: {value!r} (expected one of: {known})") from None


def _first_env(environ: Mapping[str, str], names: tuple[str, ...]) -> str:
    for name in names:
        value = environ.get(name, "")
        if value:
            return value
    return ""


@define
class ToolConfig:
    """The user's config file, including the list of paths to batch-load."""

    default_provider: ProviderKind
    vault_paths: list[str] = field(factory=list)
    vault_approle_role_id: str = ""
    path: Path | None = field(default=None, eq=False, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], path: Path | None = None) -> ToolConfig:
        provider = ProviderKind.parse(data.get("default_provider") or "")

        paths = data.get("vault_paths") or []
        if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
            raise ConfigError("vault_paths must be a list of strings")

        role_id = data.get("vault_approle_role_id") or ""
        if not isinstance(role_id, str):
            raise ConfigError("vault_approle_role_id must be a string")

        return cls(
            default_provider=provider,
            vault_paths=list(paths),
            vault_approle_role_id=role_id,
            path=path,
        )

    @classmethod
    def load(cls, path: Path) -> ToolConfig:
        """Read and validate the config file at ``path``."""
        if not path.exists():
            raise ConfigError(f"config file not found: {path}")

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"failed to read config file {path}: {e}") from e

        try:
            data = json_loads(text)
        except (ValueError, FoundationError) as e:
            raise ConfigError(f"failed to parse config file {path} (invalid JSON): {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"failed to parse config file {path} (invalid JSON)")

        logger.debug("Loaded config file", path=str(path))
        return cls.from_dict(data, path=path)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"default_provider": self.default_provider.value}
        if self.vault_paths:
            data["vault_paths"] = list(self.vault_paths)
        if self.vault_approle_role_id:
            data["vault_approle_role_id"] = self.vault_approle_role_id
        return data

    def save(self) -> None:
        """Write the whole config back to its file with owner-only permissions."""
        if self.path is None:
            raise PersistenceError("config has no file location to save to")

        try:
            ensure_parent_dir(self.path)
            write_json(self.path, self.to_dict(), indent=2)
            os.chmod(self.path, DEFAULT_FILE_PERMS)
        except (OSError, FoundationError) as e:
            raise PersistenceError(f"failed to write config file {self.path}: {e}") from e

        logger.debug("Saved config file", path=str(self.path), paths=len(self.vault_paths))

    def get_paths(self) -> list[str]:
        """Return the configured paths in insertion order (never None)."""
        return list(self.vault_paths)

    def add_path(self, entry: str) -> bool:
        """Append ``entry`` and persist, unless it is already present.

        Returns True when the path was added. The in-memory list keeps the
        new entry even if persisting it raises ``PersistenceError``.
        """
        if entry in self.vault_paths:
            return False
        self.vault_paths.append(entry)
        self.save()
        return True


@define(frozen=True)
class ProviderSettings:
    """Everything needed to build and authenticate one secret provider."""

    kind: ProviderKind
    address: str = ""
    token: str = field(default="", repr=False)
    role_id: str = ""
    secret_id: str = field(default="", repr=False)

    @property
    def uses_approle(self) -> bool:
        return bool(self.role_id)

    @classmethod
    def from_env(
        cls,
        tool_config: ToolConfig,
        environ: Mapping[str, str] | None = None,
    ) -> ProviderSettings:
        """Resolve backend address and credentials from the environment."""
        env = os.environ if environ is None else environ
        return cls(
            kind=tool_config.default_provider,
            address=_first_env(env, ADDRESS_ENV_VARS),
            token=_first_env(env, TOKEN_ENV_VARS),
            role_id=tool_config.vault_approle_role_id,
            secret_id=env.get(APPROLE_SECRET_ID_ENV_VAR, ""),
        )


def resolve_agent_socket(environ: Mapping[str, str] | None = None) -> str:
    """Return the ssh-agent socket path from the environment, or ''."""
    env = os.environ if environ is None else environ
    return env.get(AGENT_SOCKET_ENV_VAR, "")


# 🔑🏦🔚
