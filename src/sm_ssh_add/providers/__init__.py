#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Secret provider selection."""

from __future__ import annotations

from collections.abc import Callable

from provide.foundation import logger

from sm_ssh_add.config.settings import ProviderKind, ProviderSettings
from sm_ssh_add.exceptions import ConfigError
from sm_ssh_add.prompts import ConsolePrompt, Prompt
from sm_ssh_add.providers.base import SecretProvider
from sm_ssh_add.providers.vault import VaultProvider

ProviderFactory = Callable[[ProviderSettings, Prompt], SecretProvider]

PROVIDER_FACTORIES: dict[ProviderKind, ProviderFactory] = {
    ProviderKind.VAULT: VaultProvider.connect,
}


def init_provider(settings: ProviderSettings, prompt: Prompt | None = None) -> SecretProvider:
    """Build and authenticate the provider selected by ``settings``.

    The returned provider holds one session that is reused for every call.
    """
    factory = PROVIDER_FACTORIES.get(settings.kind)
    if factory is None:
        raise ConfigError(f"unsupported provider: {settings.kind.value}")

    logger.debug("Initializing secret provider", provider=settings.kind.value)
    return factory(settings, prompt or ConsolePrompt())


__all__ = [
    "PROVIDER_FACTORIES",
    "SecretProvider",
    "VaultProvider",
    "init_provider",
]

# 🔑🏦🔚
