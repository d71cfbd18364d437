#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Data types shared by the key generator, the providers and the agent client."""

from __future__ import annotations

import base64
import hashlib

from attrs import define, field


def _require_non_empty(instance: object, attribute: object, value: bytes) -> None:
    if not value:
        raise ValueError(f"{attribute.name} must not be empty")  # type: ignore[attr-defined]


def fingerprint_sha256(blob: bytes) -> str:
    """Return the OpenSSH style SHA256 fingerprint of a public key blob."""
    digest = hashlib.sha256(blob).digest()
    return "SHA256:" + base64.b64encode(digest).decode("ascii").rstrip("=")


def public_key_blob(public_key: bytes | str) -> bytes:
    """Extract the wire-format key blob from an authorized-keys line."""
    text = public_key.decode("utf-8") if isinstance(public_key, bytes) else public_key
    fields = text.split()
    if len(fields) < 2:
        raise ValueError("public key is not in authorized_keys format")
    return base64.b64decode(fields[1], validate=True)


@define(frozen=True)
class KeyMaterial:
    """An SSH key pair as generated or as stored in a secret manager.

    ``private_key`` holds the PEM encoded private key, encrypted when
    ``requires_passphrase`` is set. ``public_key`` holds the authorized-keys
    text form. The passphrase itself is never part of this record.
    """

    private_key: bytes = field(validator=_require_non_empty, repr=False)
    public_key: bytes = field(validator=_require_non_empty)
    requires_passphrase: bool = False
    comment: str = ""

    @property
    def fingerprint(self) -> str:
        return fingerprint_sha256(public_key_blob(self.public_key))


@define(frozen=True)
class AgentKeyRecord:
    """A key identity as reported by the ssh-agent."""

    blob: bytes = field(repr=False)
    comment: str = ""

    @property
    def fingerprint(self) -> str:
        return fingerprint_sha256(self.blob)


# 🔑🏦🔚
