#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Ed25519 SSH key pair generation."""

from __future__ import annotations

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519
from provide.foundation import logger

from sm_ssh_add.config.defaults import KEY_ALGORITHM
from sm_ssh_add.exceptions import ArgumentError, KeyGenerationError
from sm_ssh_add.models import KeyMaterial


def normalize_comment(comment: str) -> str:
    """Drop trailing line breaks; a comment must fit on the public key line."""
    comment = comment.rstrip("\r\n")
    if "\n" in comment or "\r" in comment:
        raise ArgumentError("comment cannot contain line breaks")
    return comment


def format_authorized_key(public_line: bytes, comment: str) -> bytes:
    """Append ``comment`` to an ``<algorithm> <base64>`` line.

    Trailing newlines in the comment are dropped and the result always ends
    with exactly one newline.
    """
    comment = normalize_comment(comment)
    line = public_line.strip()
    if comment:
        line += b" " + comment.encode("utf-8")
    return line + b"\n"


def generate_key_pair(comment: str = "", passphrase: bytes | None = None) -> KeyMaterial:
    """Generate a fresh Ed25519 key pair.

    Args:
        comment: Free text appended to the public key line
        passphrase: When non-empty, the private key is written in an
            encrypted OpenSSH envelope that needs this passphrase to open

    Returns:
        KeyMaterial with an OpenSSH PEM private key and an authorized-keys
        public key line

    Raises:
        ArgumentError: If the comment contains an interior line break
        KeyGenerationError: If the key cannot be generated or encoded
    """
    comment = normalize_comment(comment)
    encrypted = bool(passphrase)
    encryption: serialization.KeySerializationEncryption
    if encrypted:
        encryption = serialization.BestAvailableEncryption(passphrase)  # type: ignore[arg-type]
    else:
        encryption = serialization.NoEncryption()

    try:
        private_key = ed25519.Ed25519PrivateKey.generate()
        private_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.OpenSSH,
            encryption_algorithm=encryption,
        )
        public_line = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.OpenSSH,
            format=serialization.PublicFormat.OpenSSH,
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyGenerationError(f"failed to generate {KEY_ALGORITHM} key: {e}") from e

    material = KeyMaterial(
        private_key=private_pem,
        public_key=format_authorized_key(public_line, comment),
        requires_passphrase=encrypted,
        comment=comment,
    )
    logger.debug(
        "Generated key pair",
        algorithm=KEY_ALGORITHM,
        fingerprint=material.fingerprint,
        encrypted=encrypted,
    )
    return material


# 🔑🏦🔚
