"""
Configuration Management

Provides configuration classes and environment-based configuration loading.
"""

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_BUFFER_SIZE,
    DEFAULT_MAX_FRAME_SIZE,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    PROTOCOL_SEPARATOR,
)
from .exceptions import ConfigurationError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ClientConfig:
    """Client configuration settings."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    username: str = ""
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    buffer_size: int = DEFAULT_BUFFER_SIZE
    max_frame_size: int = DEFAULT_MAX_FRAME_SIZE
    poll_interval: float = DEFAULT_POLL_INTERVAL
    enable_keepalive: bool = True
    log_level: str = "INFO"

    def validate(self) -> None:
        """Validate configuration values."""
        errors: List[str] = []

        if not isinstance(self.host, str) or not self.host.strip():
            errors.append("host must be a non-empty string")

        if not isinstance(self.port, int) or not (1 <= self.port <= 65535):
            errors.append("port must be an integer between 1 and 65535")

        if not isinstance(self.username, str):
            errors.append("username must be a string")
        elif PROTOCOL_SEPARATOR in self.username or "\n" in self.username:
            errors.append("username must not contain ':' or newlines")

        if not isinstance(self.connect_timeout, (int, float)) or self.connect_timeout <= 0:
            errors.append("connect_timeout must be a positive number")

        if not isinstance(self.buffer_size, int) or self.buffer_size < 1:
            errors.append("buffer_size must be a positive integer")

        if not isinstance(self.max_frame_size, int) or self.max_frame_size < 1:
            errors.append("max_frame_size must be a positive integer")

        if not isinstance(self.poll_interval, (int, float)) or self.poll_interval <= 0:
            errors.append("poll_interval must be a positive number")

        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(_LOG_LEVELS)}")

        if errors:
            raise ConfigurationError(
                f"Client configuration validation failed: {'; '.join(errors)}",
                details={"errors": errors}
            )

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration from environment variables."""
        try:
            config = cls(
                host=os.getenv("CHAT_CORE_HOST", cls.host),
                port=int(os.getenv("CHAT_CORE_PORT", str(cls.port))),
                username=os.getenv("CHAT_CORE_USERNAME", cls.username),
                connect_timeout=float(
                    os.getenv("CHAT_CORE_CONNECT_TIMEOUT", str(cls.connect_timeout))
                ),
                buffer_size=int(
                    os.getenv("CHAT_CORE_BUFFER_SIZE", str(cls.buffer_size))
                ),
                max_frame_size=int(
                    os.getenv("CHAT_CORE_MAX_FRAME_SIZE", str(cls.max_frame_size))
                ),
                poll_interval=float(
                    os.getenv("CHAT_CORE_POLL_INTERVAL", str(cls.poll_interval))
                ),
                enable_keepalive=os.getenv("CHAT_CORE_KEEPALIVE", "true").lower() == "true",
                log_level=os.getenv("CHAT_CORE_LOG_LEVEL", cls.log_level),
            )
            config.validate()
            return config
        except ValueError as e:
            raise ConfigurationError(f"Failed to load client configuration from environment: {e}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientConfig":
        """Create configuration from dictionary."""
        try:
            # Filter only known fields
            field_names = {f.name for f in fields(cls)}
            filtered_data = {k: v for k, v in data.items() if k in field_names}
            config = cls(**filtered_data)
            config.validate()
            return config
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Failed to create client configuration from dictionary: {e}")

    def to_connection_config(self):
        """Build the network-layer configuration for a Connection."""
        from chat_core.client.network.connection import ConnectionConfig

        return ConnectionConfig(
            host=self.host,
            port=self.port,
            timeout=float(self.connect_timeout),
            buffer_size=self.buffer_size,
            max_frame_size=self.max_frame_size,
            poll_interval=float(self.poll_interval),
            enable_keepalive=self.enable_keepalive,
        )


class ConfigurationLoader:
    """Configuration loader with support for multiple sources."""

    DEFAULT_CONFIG_PATHS = [
        "chat_core.json",
        ".chat_core.json",
        "chat_core.yaml",
        ".chat_core.yaml",
        "chat_core.yml",
        ".chat_core.yml"
    ]

    @staticmethod
    def load_from_file(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
        """
        Load configuration from a JSON or YAML file.

        Args:
            config_path: Path to configuration file. If None, looks for default locations.

        Returns:
            Dictionary containing configuration values.

        Raises:
            ConfigurationError: If file cannot be loaded or parsed.
        """
        if config_path is None:
            for path in ConfigurationLoader.DEFAULT_CONFIG_PATHS:
                if os.path.exists(path):
                    config_path = path
                    break

        if config_path is None:
            return {}

        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        if config_path.suffix not in ('.json', '.yml', '.yaml'):
            raise ConfigurationError(f"Unsupported configuration file format: {config_path.suffix}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if config_path.suffix == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file {config_path}: {e}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {config_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to load configuration from {config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")
        return data

    @staticmethod
    def load_client_config(
        config_path: Optional[Union[str, Path]] = None,
        use_env: bool = True
    ) -> ClientConfig:
        """
        Load client configuration from file and/or environment.

        Args:
            config_path: Path to configuration file.
            use_env: Whether to load from environment variables.

        Returns:
            ClientConfig instance.
        """
        config_data: Dict[str, Any] = {}

        if config_path or any(os.path.exists(p) for p in ConfigurationLoader.DEFAULT_CONFIG_PATHS):
            file_config = ConfigurationLoader.load_from_file(config_path)
            config_data.update(file_config.get('client', {}))

        if config_data:
            config = ClientConfig.from_dict(config_data)
        else:
            config = ClientConfig()

        if use_env:
            env_config = ClientConfig.from_env()
            # Only override non-default values from environment
            default_config = ClientConfig()
            for field in fields(ClientConfig):
                env_value = getattr(env_config, field.name)
                default_value = getattr(default_config, field.name)
                if env_value != default_value:
                    setattr(config, field.name, env_value)

        config.validate()
        return config
