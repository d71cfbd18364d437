#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""HashiCorp Vault / OpenBao KV v2 provider built on hvac.

Paths are logical KV v2 paths including the ``data`` segment, for example
``secret/data/ssh/github``. Records are written as ``{"data": {...}}``.
"""

from __future__ import annotations

from typing import Any

import hvac
from hvac.exceptions import VaultError
from provide.foundation import logger
from provide.foundation.console import perr
from requests.exceptions import RequestException

from sm_ssh_add.config.defaults import APPROLE_SECRET_ID_HINT
from sm_ssh_add.config.settings import ProviderSettings
from sm_ssh_add.exceptions import PathNotFoundError, ProviderConnectionError, SecretProviderError
from sm_ssh_add.models import KeyMaterial
from sm_ssh_add.prompts import Prompt
from sm_ssh_add.providers.base import SecretProvider, material_from_payload, material_to_payload

BACKEND_ERRORS = (VaultError, RequestException)


def prompt_for_secret_id(prompt: Prompt) -> str:
    """Ask the user for a single-use AppRole secret-id."""
    perr("Generate a single-use Secret ID using a command similar to below:")
    perr(APPROLE_SECRET_ID_HINT)
    secret_id = prompt.secret("Enter Vault/OpenBao AppRole Secret ID").strip()
    if not secret_id:
        raise ProviderConnectionError("secret ID cannot be empty")
    return secret_id


class VaultProvider(SecretProvider):
    """Key storage in a Vault or OpenBao KV v2 secrets engine."""

    name = "vault"

    def __init__(self, client: hvac.Client) -> None:
        self.client = client

    @classmethod
    def connect(cls, settings: ProviderSettings, prompt: Prompt) -> VaultProvider:
        """Create, authenticate and verify a client session.

        AppRole login is used when a role-id is configured, otherwise the
        token from the environment.
        """
        if not settings.address:
            raise ProviderConnectionError("vault address required: set BAO_ADDR or VAULT_ADDR")

        client = hvac.Client(url=settings.address)

        if settings.uses_approle:
            secret_id = settings.secret_id or prompt_for_secret_id(prompt)
            try:
                client.auth.approle.login(role_id=settings.role_id, secret_id=secret_id)
            except BACKEND_ERRORS as e:
                raise ProviderConnectionError(f"failed to login with AppRole: {e}") from e
            logger.debug("Authenticated with AppRole", address=settings.address)
        else:
            if not settings.token:
                raise ProviderConnectionError("vault token required: set BAO_TOKEN or VAULT_TOKEN")
            client.token = settings.token

        try:
            client.auth.token.lookup_self()
        except BACKEND_ERRORS as e:
            raise ProviderConnectionError(f"failed to connect to vault at {settings.address}: {e}") from e

        logger.debug("Vault session verified", address=settings.address)
        return cls(client)

    def _read(self, path: str, operation: str) -> dict[str, Any] | None:
        try:
            return self.client.read(path)
        except BACKEND_ERRORS as e:
            raise SecretProviderError(f"failed to {operation} {path} in vault: {e}") from e

    def get(self, path: str) -> KeyMaterial:
        secret = self._read(path, "read")
        if secret is None:
            raise PathNotFoundError(path)

        data = secret.get("data") or {}
        material = material_from_payload(data.get("data"), path)
        logger.debug("Read key from vault", path=path, fingerprint=material.fingerprint)
        return material

    def store(self, path: str, material: KeyMaterial) -> None:
        try:
            self.client.write_data(path, data={"data": material_to_payload(material)})
        except BACKEND_ERRORS as e:
            raise SecretProviderError(f"failed to write {path} to vault: {e}") from e
        logger.debug("Stored key in vault", path=path, fingerprint=material.fingerprint)

    def check_exists(self, path: str) -> bool:
        secret = self._read(path, "check")
        if not secret or not secret.get("data"):
            return False
        payload = secret["data"].get("data")
        return isinstance(payload, dict) and len(payload) > 0


# 🔑🏦🔚
