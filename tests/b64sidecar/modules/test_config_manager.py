"""
Unit tests for ConfigManager module
"""

import json
import os
from pathlib import Path

import pytest
import yaml
from b64sidecar.modules.config_manager import (ConfigManager, SidecarConfig,
                                               get_config_manager)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point HOME at a temp dir and clear B64SIDECAR_* variables."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for key in list(os.environ):
        if key.startswith("B64SIDECAR_"):
            monkeypatch.delenv(key)
    return tmp_path


class TestSidecarConfig:
    """Test SidecarConfig dataclass"""

    def test_defaults(self):
        config = SidecarConfig()
        assert config.strict_exit_code is False
        assert config.log_level == "WARNING"
        assert config.log_file is None
        assert config.timeout == 30.0

    def test_from_dict_drops_unknown_fields(self):
        config = SidecarConfig.from_dict({"log_level": "debug", "bogus": 1})
        assert config.log_level == "DEBUG"
        assert not hasattr(config, "bogus")

    @pytest.mark.parametrize(
        "value,expected",
        [("true", True), ("1", True), ("yes", True), ("false", False), ("0", False), (True, True)],
    )
    def test_from_dict_coerces_bools(self, value, expected):
        assert SidecarConfig.from_dict({"strict_exit_code": value}).strict_exit_code is expected

    def test_from_dict_coerces_timeout(self):
        assert SidecarConfig.from_dict({"timeout": "2.5"}).timeout == 2.5

    @pytest.mark.parametrize("value", ["soon", None, [1, 2]])
    def test_from_dict_invalid_timeout_keeps_default(self, value):
        assert SidecarConfig.from_dict({"timeout": value}).timeout == 30.0

    def test_round_trip_dict(self):
        config = SidecarConfig(strict_exit_code=True, log_file="/tmp/x.log")
        assert SidecarConfig.from_dict(config.to_dict()) == config


class TestConfigManager:
    """Test ConfigManager loading and precedence"""

    def test_defaults_only(self):
        manager = ConfigManager()
        assert manager.config == SidecarConfig()
        assert manager.get_config_sources() == ["defaults"]

    def test_user_config_file(self, isolated_env):
        config_dir = isolated_env / ".b64sidecar"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text(yaml.safe_dump({"strict_exit_code": True}))

        manager = ConfigManager()
        assert manager.config.strict_exit_code is True
        assert manager.get_config_sources()[1].startswith("user:")

    def test_explicit_yaml_file_wins_over_user_file(self, isolated_env):
        config_dir = isolated_env / ".b64sidecar"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text(yaml.safe_dump({"log_level": "ERROR"}))
        explicit = isolated_env / "custom.yaml"
        explicit.write_text(yaml.safe_dump({"log_level": "INFO"}))

        manager = ConfigManager(config_path=explicit)
        assert manager.config.log_level == "INFO"
        assert manager.get_config_sources() == ["defaults", f"explicit:{explicit}"]

    def test_explicit_json_file(self, isolated_env):
        explicit = isolated_env / "config.json"
        explicit.write_text(json.dumps({"timeout": 5}))
        assert ConfigManager(config_path=explicit).config.timeout == 5.0

    def test_missing_explicit_file_uses_defaults(self, isolated_env):
        manager = ConfigManager(config_path=isolated_env / "missing.yaml")
        assert manager.config == SidecarConfig()

    def test_invalid_file_is_skipped(self, isolated_env):
        explicit = isolated_env / "broken.yaml"
        explicit.write_text("key: [unclosed")
        manager = ConfigManager(config_path=explicit)
        assert manager.config == SidecarConfig()
        assert manager.get_config_sources() == ["defaults"]

    def test_non_mapping_file_is_skipped(self, isolated_env):
        explicit = isolated_env / "list.yaml"
        explicit.write_text("- a\n- b\n")
        assert ConfigManager(config_path=explicit).config == SidecarConfig()

    def test_env_overrides_file(self, isolated_env, monkeypatch):
        explicit = isolated_env / "custom.yaml"
        explicit.write_text(yaml.safe_dump({"strict_exit_code": False}))
        monkeypatch.setenv("B64SIDECAR_STRICT_EXIT_CODE", "true")

        manager = ConfigManager(config_path=explicit)
        assert manager.config.strict_exit_code is True
        assert manager.get_config_sources()[-1] == "environment"

    def test_apply_overrides(self, monkeypatch):
        monkeypatch.setenv("B64SIDECAR_STRICT_EXIT_CODE", "true")
        manager = ConfigManager()
        config = manager.apply_overrides(strict_exit_code=False, log_file=None)
        assert config.strict_exit_code is False
        assert config.log_file is None
        assert manager.get_config_sources()[-1] == "command-line"

    def test_apply_overrides_all_none(self):
        manager = ConfigManager()
        manager.apply_overrides(strict_exit_code=None)
        assert "command-line" not in manager.get_config_sources()

    def test_invalid_timeout_from_env_uses_default(self, monkeypatch):
        monkeypatch.setenv("B64SIDECAR_TIMEOUT", "soon")
        assert ConfigManager().config.timeout == 30.0


def test_get_config_manager_reuses_instance():
    first = get_config_manager()
    assert get_config_manager() is first
    assert get_config_manager(Path("other.yaml")) is not first
