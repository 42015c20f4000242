"""
Configuration Manager for b64sidecar

Configuration is merged with the following precedence:
1. Command-line flags (highest priority, applied by the CLI)
2. Environment variables (B64SIDECAR_*)
3. Explicit config file (--config) or user config (~/.b64sidecar/config.yaml)
4. Default configuration (lowest priority)
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .constants import (APP_NAME, DEFAULT_LOG_LEVEL, DEFAULT_TIMEOUT_SECONDS,
                        ENV_PREFIX, LOG_FORMAT)

logger = logging.getLogger(__name__)


@dataclass
class SidecarConfig:
    """Main configuration object for the sidecar"""

    # Exit with a non-zero code when the response reports a failure
    strict_exit_code: bool = False

    # Logging configuration
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = LOG_FORMAT
    log_file: Optional[str] = None

    # Host-side client
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SidecarConfig":
        """Create config from dictionary, dropping unknown fields"""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in valid_fields}

        removed_fields = set(data.keys()) - set(filtered_data.keys())
        if removed_fields:
            logger.debug(f"Ignoring unknown config fields: {removed_fields}")

        if "strict_exit_code" in filtered_data:
            filtered_data["strict_exit_code"] = _to_bool(filtered_data["strict_exit_code"])
        if "timeout" in filtered_data:
            try:
                filtered_data["timeout"] = float(filtered_data["timeout"])
            except (TypeError, ValueError):
                logger.warning(
                    f"Invalid timeout {filtered_data['timeout']!r}, using the default"
                )
                del filtered_data["timeout"]
        if "log_level" in filtered_data:
            filtered_data["log_level"] = str(filtered_data["log_level"]).upper()

        return cls(**filtered_data)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class ConfigManager:
    """Manages configuration loading and merging from multiple sources"""

    def __init__(self, config_path: Optional[Path] = None, app_name: str = APP_NAME):
        """
        Initialize ConfigManager

        Args:
            config_path: Optional explicit config file path
            app_name: Application name (default: 'b64sidecar')
        """
        self.app_name = app_name
        self.user_config_dir = Path.home() / f".{app_name}"
        self.user_config_path = self.user_config_dir / "config.yaml"
        self.explicit_config_path = Path(config_path) if config_path else None
        self._config: Optional[SidecarConfig] = None
        self._config_sources: List[str] = []

    @property
    def config(self) -> SidecarConfig:
        """Get the current configuration, loading if necessary"""
        if self._config is None:
            self.load_config()
        return self._config

    def load_config(self) -> SidecarConfig:
        """
        Load configuration: defaults > config file > environment variables

        Returns:
            Merged configuration object
        """
        config_dict = SidecarConfig().to_dict()
        self._config_sources = ["defaults"]

        if self.explicit_config_path is not None:
            if self.explicit_config_path.exists():
                file_config = self._load_config_file(self.explicit_config_path)
                if file_config:
                    config_dict = self._merge_configs(config_dict, file_config)
                    self._config_sources.append(f"explicit:{self.explicit_config_path}")
            else:
                logger.warning(f"Config file {self.explicit_config_path} does not exist")
        elif self.user_config_path.exists():
            file_config = self._load_config_file(self.user_config_path)
            if file_config:
                config_dict = self._merge_configs(config_dict, file_config)
                self._config_sources.append(f"user:{self.user_config_path}")

        env_config = self._load_env_config()
        if env_config:
            config_dict = self._merge_configs(config_dict, env_config)
            self._config_sources.append("environment")

        self._config = SidecarConfig.from_dict(config_dict)

        logger.debug(
            f"[{self.app_name}] Configuration loaded from sources: {', '.join(self._config_sources)}"
        )

        return self._config

    def _load_config_file(self, path: Path) -> Optional[Dict[str, Any]]:
        """
        Load configuration from a file

        Args:
            path: Path to configuration file

        Returns:
            Configuration dictionary or None if failed
        """
        try:
            with open(path, "r") as f:
                if path.suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {path}: {e}")
            return None

        if data is None:
            return None
        if not isinstance(data, dict):
            logger.warning(f"Config file {path} does not contain a mapping, skipping")
            return None
        return data

    def _load_env_config(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables

        Examples:
            B64SIDECAR_LOG_LEVEL=DEBUG
            B64SIDECAR_STRICT_EXIT_CODE=true

        Returns:
            Configuration dictionary from environment
        """
        config = {}
        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                config[key[len(ENV_PREFIX):].lower()] = value
        return config

    def _merge_configs(self, base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
        """Overlay one configuration dictionary on another"""
        result = base.copy()
        result.update(overlay)
        return result

    def apply_overrides(self, **overrides: Any) -> SidecarConfig:
        """
        Apply command-line overrides on top of the loaded configuration.

        Arguments that are None are left alone.
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        if values:
            merged = self._merge_configs(self.config.to_dict(), values)
            self._config = SidecarConfig.from_dict(merged)
            self._config_sources.append("command-line")
        return self.config

    def get_config_sources(self) -> List[str]:
        """Get list of configuration sources that were loaded"""
        return self._config_sources.copy()


_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_path: Optional[Path] = None) -> ConfigManager:
    """Get the shared ConfigManager, creating it on first use or for a new path"""
    global _config_manager
    if _config_manager is None or config_path is not None:
        _config_manager = ConfigManager(config_path=config_path)
    return _config_manager


def get_config() -> SidecarConfig:
    """Get the current configuration"""
    return get_config_manager().config
