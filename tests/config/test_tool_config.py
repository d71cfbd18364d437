#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Tests for the config file, provider settings and runtime config."""

from __future__ import annotations

import json
import os
from pathlib import Path
import stat
from unittest.mock import patch

from hypothesis import HealthCheck, given, settings, strategies as st
import pytest

from sm_ssh_add.config import (
    ProviderKind,
    ProviderSettings,
    SmSshAddRuntimeConfig,
    ToolConfig,
    default_config_path,
    resolve_agent_socket,
)
from sm_ssh_add.config.runtime import parse_log_level
from sm_ssh_add.exceptions import ConfigError, PersistenceError


@pytest.mark.unit
class TestProviderKind:
    """Test ProviderKind.parse."""

    def test_vault(self) -> None:
        assert ProviderKind.parse("vault") is ProviderKind.VAULT

    def test_empty(self) -> None:
        with pytest.raises(ConfigError, match="cannot be empty"):
            ProviderKind.parse("")

    def test_unknown(self) -> None:
        with pytest.raises(ConfigError, match="invalid provider"):
            ProviderKind.parse("keychain")


@pytest.mark.unit
class TestLoad:
    """Test ToolConfig.load."""

    def test_minimal(self, config_file: Path) -> None:
        config = ToolConfig.load(config_file)

        assert config.default_provider is ProviderKind.VAULT
        assert config.get_paths() == []
        assert config.vault_approle_role_id == ""
        assert config.path == config_file

    def test_full(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "default_provider": "vault",
                    "vault_paths": ["secret/data/ssh/a", "secret/data/ssh/b"],
                    "vault_approle_role_id": "role-1",
                }
            )
        )

        config = ToolConfig.load(path)

        assert config.get_paths() == ["secret/data/ssh/a", "secret/data/ssh/b"]
        assert config.vault_approle_role_id == "role-1"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="config file not found"):
            ToolConfig.load(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError, match="invalid JSON"):
            ToolConfig.load(path)

    def test_unreadable_path(self, tmp_path: Path) -> None:
        path = tmp_path / "sm-ssh-add.json"
        path.mkdir()

        with pytest.raises(ConfigError, match="failed to read config file") as exc_info:
            ToolConfig.load(path)

        assert "invalid JSON" not in str(exc_info.value)

    def test_not_an_object(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigError, match="invalid JSON"):
            ToolConfig.load(path)

    def test_missing_provider(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"vault_paths": []}))

        with pytest.raises(ConfigError, match="default_provider cannot be empty"):
            ToolConfig.load(path)

    def test_invalid_provider(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"default_provider": "1password"}))

        with pytest.raises(ConfigError, match="invalid provider"):
            ToolConfig.load(path)

    def test_paths_must_be_strings(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"default_provider": "vault", "vault_paths": [1]}))

        with pytest.raises(ConfigError, match="vault_paths"):
            ToolConfig.load(path)


@pytest.mark.unit
class TestPaths:
    """Test get_paths and add_path."""

    def test_add_path_persists(self, tool_config: ToolConfig, config_file: Path) -> None:
        assert tool_config.add_path("secret/data/ssh/a") is True

        on_disk = json.loads(config_file.read_text())
        assert on_disk == {"default_provider": "vault", "vault_paths": ["secret/data/ssh/a"]}
        assert ToolConfig.load(config_file).get_paths() == ["secret/data/ssh/a"]

    def test_add_path_keeps_order(self, tool_config: ToolConfig, config_file: Path) -> None:
        for entry in ("c", "a", "b"):
            tool_config.add_path(entry)

        assert ToolConfig.load(config_file).get_paths() == ["c", "a", "b"]

    def test_add_existing_path_is_noop(self, tool_config: ToolConfig, config_file: Path) -> None:
        tool_config.add_path("secret/data/ssh/a")
        before = config_file.read_text()

        with patch("sm_ssh_add.config.settings.write_json") as mock_write:
            assert tool_config.add_path("secret/data/ssh/a") is False
            mock_write.assert_not_called()

        assert tool_config.get_paths() == ["secret/data/ssh/a"]
        assert config_file.read_text() == before

    def test_get_paths_returns_copy(self, tool_config: ToolConfig) -> None:
        tool_config.get_paths().append("sneaky")
        assert tool_config.get_paths() == []

    def test_saved_file_is_owner_only(self, tool_config: ToolConfig, config_file: Path) -> None:
        tool_config.add_path("secret/data/ssh/a")
        assert stat.S_IMODE(os.stat(config_file).st_mode) == 0o600

    def test_role_id_survives_save(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"default_provider": "vault", "vault_approle_role_id": "r"}))

        config = ToolConfig.load(path)
        config.add_path("p")

        assert json.loads(path.read_text())["vault_approle_role_id"] == "r"

    def test_write_failure(self, tool_config: ToolConfig) -> None:
        with patch("sm_ssh_add.config.settings.write_json", side_effect=OSError("read-only")):
            with pytest.raises(PersistenceError, match="read-only"):
                tool_config.add_path("secret/data/ssh/a")

        # The in-memory list keeps the entry even though the save failed.
        assert tool_config.get_paths() == ["secret/data/ssh/a"]

    def test_save_without_location(self) -> None:
        config = ToolConfig(default_provider=ProviderKind.VAULT)
        with pytest.raises(PersistenceError):
            config.save()

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture], max_examples=25)
    @given(st.lists(st.sampled_from(["a", "b", "c", "d"]), max_size=12))
    def test_add_path_has_set_semantics(self, tmp_path: Path, entries: list[str]) -> None:
        path = tmp_path / "prop.json"
        config = ToolConfig(default_provider=ProviderKind.VAULT, path=path)

        for entry in entries:
            config.add_path(entry)

        expected = list(dict.fromkeys(entries))
        assert config.get_paths() == expected
        if expected:
            assert ToolConfig.load(path).get_paths() == expected


@pytest.mark.unit
class TestProviderSettings:
    """Test ProviderSettings.from_env and resolve_agent_socket."""

    def test_bao_vars_take_precedence(self, tool_config: ToolConfig) -> None:
        env = {
            "BAO_ADDR": "http://bao:8200",
            "VAULT_ADDR": "http://vault:8200",
            "BAO_TOKEN": "bao-token",
            "VAULT_TOKEN": "vault-token",
        }

        resolved = ProviderSettings.from_env(tool_config, env)

        assert resolved.kind is ProviderKind.VAULT
        assert resolved.address == "http://bao:8200"
        assert resolved.token == "bao-token"
        assert not resolved.uses_approle

    def test_vault_vars_fallback(self, tool_config: ToolConfig) -> None:
        env = {"BAO_ADDR": "", "VAULT_ADDR": "http://vault:8200", "VAULT_TOKEN": "vault-token"}

        resolved = ProviderSettings.from_env(tool_config, env)

        assert resolved.address == "http://vault:8200"
        assert resolved.token == "vault-token"

    def test_approle(self, tool_config: ToolConfig) -> None:
        tool_config.vault_approle_role_id = "role-1"
        env = {"VAULT_ADDR": "http://vault:8200", "VAULT_APPROLE_SECRET_ID": "sid"}

        resolved = ProviderSettings.from_env(tool_config, env)

        assert resolved.uses_approle
        assert resolved.role_id == "role-1"
        assert resolved.secret_id == "sid"

    def test_secrets_not_in_repr(self, tool_config: ToolConfig) -> None:
        resolved = ProviderSettings.from_env(tool_config, {"VAULT_TOKEN": "hunter2"})
        assert "hunter2" not in repr(resolved)

    def test_agent_socket(self) -> None:
        assert resolve_agent_socket({"SSH_AUTH_SOCK": "/tmp/agent.sock"}) == "/tmp/agent.sock"
        assert resolve_agent_socket({}) == ""


@pytest.mark.unit
class TestRuntimeConfig:
    """Test SmSshAddRuntimeConfig."""

    def test_defaults(self) -> None:
        config = SmSshAddRuntimeConfig()
        assert config.log_level == "WARNING"
        assert config.effective_config_file == default_config_path()

    def test_default_path_location(self) -> None:
        assert default_config_path() == Path.home() / ".config" / "sm-ssh-add.json"

    @patch.dict(os.environ, {"SM_SSH_ADD_CONFIG": "/tmp/custom.json", "SM_SSH_ADD_LOG_LEVEL": "debug"})
    def test_from_env(self) -> None:
        config = SmSshAddRuntimeConfig.from_env()
        assert config.effective_config_file == Path("/tmp/custom.json")
        assert config.log_level == "DEBUG"

    def test_parse_log_level(self) -> None:
        assert parse_log_level(" info ") == "INFO"
        with pytest.raises(ValueError, match="Invalid log level"):
            parse_log_level("loud")


# 🔑🏦🔚
