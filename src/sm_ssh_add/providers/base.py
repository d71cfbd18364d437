#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Secret provider interface and the stored key record layout."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from sm_ssh_add.config.defaults import (
    FIELD_COMMENT,
    FIELD_PRIVATE_KEY,
    FIELD_PUBLIC_KEY,
    FIELD_REQUIRE_PASSPHRASE,
)
from sm_ssh_add.exceptions import InvalidFormatError
from sm_ssh_add.models import KeyMaterial, public_key_blob

TRUE_STRINGS = frozenset({"1", "t", "true", "y", "yes"})
FALSE_STRINGS = frozenset({"0", "f", "false", "n", "no", ""})


def parse_passphrase_flag(value: Any, path: str) -> bool:
    """Coerce a stored ``require_passphrase`` value to a bool.

    Accepts native booleans and string booleans; a missing value is False.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_STRINGS:
            return True
        if normalized in FALSE_STRINGS:
            return False
    raise InvalidFormatError(f"failed to parse {FIELD_REQUIRE_PASSPHRASE} at {path}: {value!r}")


def material_to_payload(material: KeyMaterial) -> dict[str, Any]:
    """Serialize key material into the stored field layout."""
    return {
        FIELD_PRIVATE_KEY: material.private_key.decode("utf-8"),
        FIELD_PUBLIC_KEY: material.public_key.decode("utf-8"),
        FIELD_REQUIRE_PASSPHRASE: material.requires_passphrase,
        FIELD_COMMENT: material.comment,
    }


def material_from_payload(payload: Any, path: str) -> KeyMaterial:
    """Rebuild key material from a stored payload, validating every field."""
    if not isinstance(payload, Mapping):
        raise InvalidFormatError(f"invalid key format in secret manager at {path}")

    private_key = payload.get(FIELD_PRIVATE_KEY)
    if not isinstance(private_key, str) or not private_key:
        raise InvalidFormatError(f"invalid key format at {path}: missing {FIELD_PRIVATE_KEY}")

    public_key = payload.get(FIELD_PUBLIC_KEY)
    if not isinstance(public_key, str) or not public_key:
        raise InvalidFormatError(f"invalid key format at {path}: missing {FIELD_PUBLIC_KEY}")
    try:
        public_key_blob(public_key)
    except ValueError as e:
        raise InvalidFormatError(f"invalid key format at {path}: malformed {FIELD_PUBLIC_KEY}") from e

    comment = payload.get(FIELD_COMMENT)
    return KeyMaterial(
        private_key=private_key.encode("utf-8"),
        public_key=public_key.encode("utf-8"),
        requires_passphrase=parse_passphrase_flag(payload.get(FIELD_REQUIRE_PASSPHRASE), path),
        comment=comment if isinstance(comment, str) else "",
    )


class SecretProvider(ABC):
    """Uniform get/store/check_exists access to one authenticated backend."""

    name: str = "secret manager"

    @abstractmethod
    def get(self, path: str) -> KeyMaterial:
        """Fetch the key material stored at ``path``.

        Raises:
            PathNotFoundError: If nothing is stored at ``path``
            InvalidFormatError: If the stored record is incomplete or malformed
        """

    @abstractmethod
    def store(self, path: str, material: KeyMaterial) -> None:
        """Write ``material`` to ``path``, replacing whatever is there."""

    @abstractmethod
    def check_exists(self, path: str) -> bool:
        """Return True if a non-empty record is stored at ``path``."""


# 🔑🏦🔚
