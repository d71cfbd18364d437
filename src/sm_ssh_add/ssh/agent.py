#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""ssh-agent client: list, add and remove identities over the agent protocol.

Framing and message encoding are handled by paramiko; the private key is
parsed with cryptography and sent to the agent as an
``SSH2_AGENTC_ADD_IDENTITY`` request without lifetime or confirm
constraints.
"""

from __future__ import annotations

import socket
import struct
from types import TracebackType
from typing import TYPE_CHECKING

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from paramiko import Message
from paramiko.agent import AgentSSH
from paramiko.ssh_exception import SSHException
from provide.foundation import logger

from sm_ssh_add.config.defaults import AGENT_SOCKET_ENV_VAR
from sm_ssh_add.config.settings import resolve_agent_socket
from sm_ssh_add.exceptions import (
    AgentConnectionError,
    AgentError,
    AgentNotFoundError,
    DecryptionError,
    KeyAlreadyLoadedError,
)
from sm_ssh_add.models import AgentKeyRecord, KeyMaterial, fingerprint_sha256, public_key_blob

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

SSH_AGENT_FAILURE = 5
SSH_AGENT_SUCCESS = 6
SSH2_AGENTC_REQUEST_IDENTITIES = 11
SSH2_AGENT_IDENTITIES_ANSWER = 12
SSH2_AGENTC_ADD_IDENTITY = 17
SSH2_AGENTC_REMOVE_IDENTITY = 18

# cryptography curve name -> SSH curve identifier
EC_CURVE_NAMES = {
    "secp256r1": "nistp256",
    "secp384r1": "nistp384",
    "secp521r1": "nistp521",
}


def parse_private_key(material: KeyMaterial, passphrase: bytes | None = None) -> PrivateKeyTypes:
    """Parse the private key of ``material``, decrypting it when required."""
    if material.requires_passphrase and not passphrase:
        raise DecryptionError("private key is passphrase protected but no passphrase was given")

    password = passphrase if material.requires_passphrase else None
    data = material.private_key
    try:
        if b"OPENSSH PRIVATE KEY" in data:
            return serialization.load_ssh_private_key(data, password=password)
        return serialization.load_pem_private_key(data, password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        if material.requires_passphrase:
            raise DecryptionError(f"failed to parse private key with passphrase: {e}") from e
        raise DecryptionError(f"failed to parse private key: {e}") from e


def private_key_blob(key: PrivateKeyTypes) -> bytes:
    """Return the SSH public key blob belonging to a private key."""
    line = key.public_key().public_bytes(
        encoding=serialization.Encoding.OpenSSH,
        format=serialization.PublicFormat.OpenSSH,
    )
    return public_key_blob(line)


def build_add_message(key: PrivateKeyTypes, comment: str = "") -> Message:
    """Build an SSH2_AGENTC_ADD_IDENTITY message for a supported key type."""
    msg = Message()
    msg.add_byte(struct.pack("B", SSH2_AGENTC_ADD_IDENTITY))

    if isinstance(key, ed25519.Ed25519PrivateKey):
        pub_bytes = key.public_key().public_bytes_raw()
        seed = key.private_bytes_raw()
        msg.add_string("ssh-ed25519")
        msg.add_string(pub_bytes)
        msg.add_string(seed + pub_bytes)  # 64 bytes: seed || public

    elif isinstance(key, rsa.RSAPrivateKey):
        nums = key.private_numbers()
        pub = nums.public_numbers
        msg.add_string("ssh-rsa")
        msg.add_mpint(pub.n)
        msg.add_mpint(pub.e)
        msg.add_mpint(nums.d)
        msg.add_mpint(nums.iqmp)
        msg.add_mpint(nums.p)
        msg.add_mpint(nums.q)

    elif isinstance(key, ec.EllipticCurvePrivateKey):
        curve = EC_CURVE_NAMES.get(key.curve.name)
        if curve is None:
            raise AgentError(f"unsupported ECDSA curve: {key.curve.name}")
        point = key.public_key().public_bytes(
            serialization.Encoding.X962,
            serialization.PublicFormat.UncompressedPoint,
        )
        msg.add_string(f"ecdsa-sha2-{curve}")
        msg.add_string(curve)
        msg.add_string(point)
        msg.add_mpint(key.private_numbers().private_value)

    else:
        raise AgentError(f"unsupported key type: {type(key).__name__}")

    msg.add_string(comment)
    return msg


class AgentClient:
    """A single connection to a running ssh-agent."""

    def __init__(self, agent: AgentSSH, socket_path: str = "") -> None:
        self._agent: AgentSSH | None = agent
        self.socket_path = socket_path

    @classmethod
    def connect(cls, socket_path: str | None = None) -> AgentClient:
        """Connect to the agent listening on ``socket_path``.

        Without an explicit path the socket named by SSH_AUTH_SOCK is used.

        Raises:
            AgentNotFoundError: If no socket path is configured
            AgentConnectionError: If the socket is unreachable or the agent
                does not answer the initial identity request
        """
        if socket_path is None:
            socket_path = resolve_agent_socket()
        if not socket_path:
            raise AgentNotFoundError(f"ssh-agent not found: {AGENT_SOCKET_ENV_VAR} is not set")

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(socket_path)
        except OSError as e:
            sock.close()
            raise AgentConnectionError(f"failed to connect to ssh-agent at {socket_path}: {e}") from e

        agent = AgentSSH()
        try:
            agent._connect(sock)
        except (SSHException, OSError) as e:
            sock.close()
            raise AgentConnectionError(f"ssh-agent at {socket_path} did not respond: {e}") from e

        logger.debug("Connected to ssh-agent", socket=socket_path)
        return cls(agent, socket_path)

    @property
    def closed(self) -> bool:
        return self._agent is None

    def _request(self, msg: Message | bytes) -> tuple[int, Message]:
        if self._agent is None:
            raise AgentConnectionError("ssh-agent connection is closed")
        try:
            return self._agent._send_message(msg)
        except (SSHException, OSError) as e:
            raise AgentConnectionError(f"ssh-agent request failed: {e}") from e

    def list_keys(self) -> list[AgentKeyRecord]:
        """Return every identity the agent currently holds."""
        ptype, result = self._request(struct.pack("B", SSH2_AGENTC_REQUEST_IDENTITIES))
        if ptype != SSH2_AGENT_IDENTITIES_ANSWER:
            raise AgentError("failed to list keys in ssh-agent")

        records = []
        for _ in range(result.get_int()):
            blob = result.get_binary()
            comment = result.get_string().decode("utf-8", "replace")
            records.append(AgentKeyRecord(blob=blob, comment=comment))
        return records

    def key_exists(self, fingerprint: str) -> bool:
        return any(record.fingerprint == fingerprint for record in self.list_keys())

    def add_key(self, material: KeyMaterial, passphrase: bytes | None = None) -> str:
        """Add ``material`` to the agent unless a key with its fingerprint is loaded.

        Returns:
            The SHA256 fingerprint of the added key

        Raises:
            DecryptionError: If the private key cannot be parsed or decrypted
            KeyAlreadyLoadedError: If the agent already holds this key
            AgentError: If the agent refuses the key
        """
        key = parse_private_key(material, passphrase)
        fingerprint = fingerprint_sha256(private_key_blob(key))

        if self.key_exists(fingerprint):
            raise KeyAlreadyLoadedError(fingerprint)

        ptype, _ = self._request(build_add_message(key, material.comment))
        if ptype != SSH_AGENT_SUCCESS:
            raise AgentError("ssh-agent rejected the key")

        logger.debug("Added key to ssh-agent", fingerprint=fingerprint)
        return fingerprint

    def remove_key(self, material: KeyMaterial) -> None:
        """Remove the identity matching ``material``'s public key."""
        try:
            blob = public_key_blob(material.public_key)
        except ValueError as e:
            raise AgentError(f"cannot remove key with malformed public key: {e}") from e

        msg = Message()
        msg.add_byte(struct.pack("B", SSH2_AGENTC_REMOVE_IDENTITY))
        msg.add_string(blob)

        ptype, _ = self._request(msg)
        if ptype != SSH_AGENT_SUCCESS:
            raise AgentError(f"ssh-agent could not remove key {fingerprint_sha256(blob)}")

    def close(self) -> None:
        """Release the connection. Further calls are no-ops."""
        if self._agent is None:
            return
        agent, self._agent = self._agent, None
        try:
            agent._close()
        except OSError as e:
            raise AgentError(f"failed to close ssh-agent connection: {e}") from e

    def __enter__(self) -> AgentClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


# 🔑🏦🔚
