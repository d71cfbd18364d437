#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Shared pytest fixtures and helpers for sm-ssh-add tests."""

from __future__ import annotations

from collections.abc import Iterator
import json
from pathlib import Path
import shutil
import socketserver
import struct
import tempfile
import threading
from typing import Any

from paramiko import Message
import provide.testkit  # noqa: F401 - Installs setproctitle blocker early
from provide.testkit.logger import reset_foundation_setup_for_testing
import pytest

from sm_ssh_add.config import ProviderKind, ToolConfig
from sm_ssh_add.exceptions import PathNotFoundError
from sm_ssh_add.models import KeyMaterial
from sm_ssh_add.providers.base import SecretProvider, material_from_payload, material_to_payload
from sm_ssh_add.ssh.agent import (
    SSH2_AGENT_IDENTITIES_ANSWER,
    SSH2_AGENTC_ADD_IDENTITY,
    SSH2_AGENTC_REMOVE_IDENTITY,
    SSH2_AGENTC_REQUEST_IDENTITIES,
    SSH_AGENT_FAILURE,
    SSH_AGENT_SUCCESS,
    AgentClient,
)


class MemoryProvider(SecretProvider):
    """In-memory stand-in for a KV v2 backend.

    Payloads are kept in the stored field layout so that reads go through
    the same validation as the real provider.
    """

    name = "memory"

    def __init__(self, records: dict[str, Any] | None = None) -> None:
        self.records: dict[str, Any] = dict(records or {})
        self.store_calls: list[str] = []

    def get(self, path: str) -> KeyMaterial:
        if path not in self.records:
            raise PathNotFoundError(path)
        return material_from_payload(self.records[path], path)

    def store(self, path: str, material: KeyMaterial) -> None:
        self.store_calls.append(path)
        self.records[path] = material_to_payload(material)

    def check_exists(self, path: str) -> bool:
        return bool(self.records.get(path))


class ScriptedPrompt:
    """Answers prompts from a fixed list and records what was asked."""

    def __init__(self, *answers: str) -> None:
        self.answers = list(answers)
        self.messages: list[str] = []

    def secret(self, message: str) -> str:
        self.messages.append(message)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {message}")
        return self.answers.pop(0)


class FakeAgentState:
    """Identity store behind the fake agent socket (ed25519 keys only)."""

    def __init__(self) -> None:
        self.keys: dict[bytes, str] = {}
        self.reject_adds = False
        self.lock = threading.Lock()

    def dispatch(self, body: bytes) -> bytes:
        msg = Message(body)
        request = msg.get_byte()[0]
        reply = Message()

        with self.lock:
            if request == SSH2_AGENTC_REQUEST_IDENTITIES:
                reply.add_byte(struct.pack("B", SSH2_AGENT_IDENTITIES_ANSWER))
                reply.add_int(len(self.keys))
                for blob, comment in self.keys.items():
                    reply.add_string(blob)
                    reply.add_string(comment)
            elif request == SSH2_AGENTC_ADD_IDENTITY and not self.reject_adds:
                key_type = msg.get_text()
                if key_type != "ssh-ed25519":
                    reply.add_byte(struct.pack("B", SSH_AGENT_FAILURE))
                else:
                    public = msg.get_binary()
                    msg.get_binary()
                    comment = msg.get_text()
                    blob = Message()
                    blob.add_string(key_type)
                    blob.add_string(public)
                    self.keys.setdefault(blob.asbytes(), comment)
                    reply.add_byte(struct.pack("B", SSH_AGENT_SUCCESS))
            elif request == SSH2_AGENTC_REMOVE_IDENTITY:
                blob = msg.get_binary()
                found = self.keys.pop(blob, None) is not None
                reply.add_byte(struct.pack("B", SSH_AGENT_SUCCESS if found else SSH_AGENT_FAILURE))
            else:
                reply.add_byte(struct.pack("B", SSH_AGENT_FAILURE))

        return reply.asbytes()


class _AgentRequestHandler(socketserver.BaseRequestHandler):
    def _recv_exact(self, size: int) -> bytes:
        data = b""
        while len(data) < size:
            chunk = self.request.recv(size - len(data))
            if not chunk:
                return b""
            data += chunk
        return data

    def handle(self) -> None:
        while True:
            header = self._recv_exact(4)
            if not header:
                return
            body = self._recv_exact(struct.unpack(">I", header)[0])
            reply = self.server.state.dispatch(body)  # type: ignore[attr-defined]
            self.request.sendall(struct.pack(">I", len(reply)) + reply)


class _AgentServer(socketserver.ThreadingUnixStreamServer):
    daemon_threads = True
    block_on_close = False


class FakeAgent:
    """A minimal ssh-agent listening on a Unix socket in a background thread."""

    def __init__(self, socket_path: str) -> None:
        self.socket_path = socket_path
        self.state = FakeAgentState()
        self.server = _AgentServer(socket_path, _AgentRequestHandler)
        self.server.state = self.state  # type: ignore[attr-defined]
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)

    @property
    def keys(self) -> dict[bytes, str]:
        return self.state.keys

    def start(self) -> None:
        self.thread.start()

    def stop(self) -> None:
        self.server.shutdown()
        self.server.server_close()
        self.thread.join(timeout=5)

    def connect(self) -> AgentClient:
        return AgentClient.connect(self.socket_path)


@pytest.fixture(autouse=True)
def reset_foundation_logging() -> Iterator[None]:
    """Reset foundation logging state before each test to avoid conflicts."""
    reset_foundation_setup_for_testing()
    yield
    # Reset again after test to ensure clean state
    reset_foundation_setup_for_testing()


@pytest.fixture
def short_tmp() -> Iterator[Path]:
    """A temporary directory with a path short enough for a Unix socket."""
    temp_path = Path(tempfile.mkdtemp(prefix="sma-"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fake_agent(short_tmp: Path) -> Iterator[FakeAgent]:
    """A running fake ssh-agent."""
    agent = FakeAgent(str(short_tmp / "agent.sock"))
    agent.start()
    yield agent
    agent.stop()


@pytest.fixture
def memory_provider() -> MemoryProvider:
    return MemoryProvider()


@pytest.fixture
def make_prompt() -> type[ScriptedPrompt]:
    """Factory for prompts that answer from a fixed script."""
    return ScriptedPrompt


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A config file selecting the vault provider with no saved paths."""
    path = tmp_path / ".config" / "sm-ssh-add.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({"default_provider": "vault"}))
    return path


@pytest.fixture
def tool_config(config_file: Path) -> ToolConfig:
    return ToolConfig(default_provider=ProviderKind.VAULT, path=config_file)


# 🔑🏦🔚
