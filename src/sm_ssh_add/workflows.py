#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""The generate and load workflows.

Both take their collaborators explicitly (provider, config, prompt, agent
factory) so they can run against in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Callable

from attrs import define, field
from provide.foundation import logger
from provide.foundation.console import perr, pout

from sm_ssh_add.config.settings import ToolConfig
from sm_ssh_add.exceptions import (
    AgentError,
    ArgumentError,
    ConflictingArgumentsError,
    DuplicateKeyError,
    KeyAlreadyLoadedError,
    NoPathsConfiguredError,
    PersistenceError,
    SecretProviderError,
)
from sm_ssh_add.models import KeyMaterial
from sm_ssh_add.prompts import Prompt, read_new_passphrase, read_passphrase
from sm_ssh_add.providers.base import SecretProvider
from sm_ssh_add.ssh.agent import AgentClient
from sm_ssh_add.ssh.keygen import generate_key_pair, normalize_comment

AgentFactory = Callable[[], AgentClient]


def connect_default_agent() -> AgentClient:
    return AgentClient.connect()


@define
class GenerateResult:
    material: KeyMaterial
    path: str
    path_saved: bool = False


@define
class LoadResult:
    loaded: list[str] = field(factory=list)
    already_loaded: list[str] = field(factory=list)


def generate_key(
    provider: SecretProvider,
    tool_config: ToolConfig | None,
    path: str,
    comment: str = "",
    *,
    prompt: Prompt,
    require_passphrase: bool = False,
    save_path: bool = False,
    regenerate: bool = False,
) -> GenerateResult:
    """Generate a key pair, store it at ``path`` and optionally remember the path.

    Raises:
        ArgumentError: If the comment contains an interior line break
        DuplicateKeyError: If ``path`` is taken and ``regenerate`` is False
        PassphraseMismatchError: If the passphrase confirmation differs
        KeyGenerationError: If key generation fails
        SecretProviderError: If the existence check or the store fails
    """
    comment = normalize_comment(comment)
    if not regenerate and provider.check_exists(path):
        raise DuplicateKeyError(path)

    passphrase = read_new_passphrase(prompt) if require_passphrase else None

    material = generate_key_pair(comment, passphrase)
    provider.store(path, material)
    logger.info("Stored key", path=path, provider=provider.name, regenerate=regenerate)

    result = GenerateResult(material=material, path=path)
    if save_path and tool_config is not None:
        try:
            result.path_saved = tool_config.add_path(path)
        except PersistenceError as e:
            logger.warning("Failed to save path to config", path=path, error=str(e))
            perr(f"Warning: key stored but path not saved to config: {e}")
    return result


def resolve_load_paths(tool_config: ToolConfig, path: str | None, from_config: bool) -> list[str]:
    """Return the paths a load should process.

    Exactly one of an explicit ``path`` or ``from_config`` must be given.
    """
    if from_config and path:
        raise ConflictingArgumentsError("cannot use both --from-config and a direct path")
    if from_config:
        paths = tool_config.get_paths()
        if not paths:
            raise NoPathsConfiguredError("no paths configured; use generate --save-path to add one")
        return paths
    if not path:
        raise ArgumentError("a path or --from-config is required")
    return [path]


def load_keys(
    provider: SecretProvider,
    paths: list[str],
    *,
    prompt: Prompt,
    agent_factory: AgentFactory = connect_default_agent,
) -> LoadResult:
    """Fetch each key in ``paths`` and add it to the ssh-agent.

    The agent connection is opened once. Any fetch or add failure aborts the
    remaining paths; keys the agent already holds are skipped.
    """
    agent = agent_factory()
    result = LoadResult()
    try:
        for path in paths:
            _load_one(provider, agent, path, prompt, result)
    finally:
        try:
            agent.close()
        except AgentError as e:
            logger.warning("Failed to close ssh-agent", error=str(e))
            perr(f"Warning: failed to close ssh-agent: {e}")
    return result


def _load_one(
    provider: SecretProvider,
    agent: AgentClient,
    path: str,
    prompt: Prompt,
    result: LoadResult,
) -> None:
    try:
        material = provider.get(path)
    except SecretProviderError as e:
        perr(f"Failed to load key from {path}: {e}")
        raise

    passphrase = read_passphrase(prompt, path) if material.requires_passphrase else None

    try:
        agent.add_key(material, passphrase)
    except KeyAlreadyLoadedError:
        logger.info("Key already loaded", path=path)
        pout(f"Key from {path} already loaded in agent")
        result.already_loaded.append(path)
        return
    except AgentError as e:
        perr(f"Failed to add key from {path}: {e}")
        raise

    pout(f"Loaded key from {path} into ssh-agent")
    result.loaded.append(path)


# 🔑🏦🔚
