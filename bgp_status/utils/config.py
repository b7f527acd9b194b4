#!/usr/bin/env python3
"""
Configuration Management for BGP Node Status

Provides centralized configuration handling with:
- Environment variable support
- Configuration file support
- Default values and validation
"""

import os
import json
import threading
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Optional, List
import logging


@dataclass
class BirdConfig:
    """BIRD control socket configuration"""

    socket_dir: str = "/var/run/calico"
    fallback_socket_dir: str = "/var/run/bird"
    command: str = "show protocols"

    def __post_init__(self):
        """Load from environment variables if not set"""
        if os.getenv("BGP_STATUS_BIRD_SOCKET_DIR"):
            self.socket_dir = os.getenv("BGP_STATUS_BIRD_SOCKET_DIR")
        if os.getenv("BGP_STATUS_BIRD_FALLBACK_SOCKET_DIR"):
            self.fallback_socket_dir = os.getenv("BGP_STATUS_BIRD_FALLBACK_SOCKET_DIR")

    def socket_paths(self, suffix: str = "") -> List[str]:
        """Primary and fallback socket paths for bird{suffix}.ctl"""
        name = f"bird{suffix}.ctl"
        return [
            str(Path(self.socket_dir) / name),
            str(Path(self.fallback_socket_dir) / name),
        ]


@dataclass
class GoBGPConfig:
    """GoBGP CLI/API configuration"""

    binary: str = "gobgp"
    host: Optional[str] = None
    port: Optional[int] = None

    def __post_init__(self):
        """Load from environment variables if not set"""
        if os.getenv("BGP_STATUS_GOBGP_BINARY"):
            self.binary = os.getenv("BGP_STATUS_GOBGP_BINARY")
        if self.host is None:
            self.host = os.getenv("BGP_STATUS_GOBGP_HOST")
        if self.port is None and os.getenv("BGP_STATUS_GOBGP_PORT"):
            try:
                self.port = int(os.getenv("BGP_STATUS_GOBGP_PORT"))
            except ValueError:
                pass


@dataclass
class WebConfig:
    """HTTP status endpoint configuration"""

    host: str = "0.0.0.0"
    port: int = 8080

    def __post_init__(self):
        """Load from environment variables if not set"""
        if os.getenv("BGP_STATUS_WEB_HOST"):
            self.host = os.getenv("BGP_STATUS_WEB_HOST")
        if os.getenv("BGP_STATUS_WEB_PORT"):
            try:
                self.port = int(os.getenv("BGP_STATUS_WEB_PORT"))
            except ValueError:
                pass


@dataclass
class LoggingConfig:
    """Logging configuration"""

    level: str = "INFO"
    log_to_file: bool = False
    log_file: Optional[str] = None

    def __post_init__(self):
        """Load from environment variables if not set"""
        if os.getenv("BGP_STATUS_LOG_LEVEL"):
            self.level = os.getenv("BGP_STATUS_LOG_LEVEL").upper()
        if os.getenv("BGP_STATUS_LOG_FILE"):
            self.log_file = os.getenv("BGP_STATUS_LOG_FILE")
            self.log_to_file = True


@dataclass
class StatusConfig:
    """Main configuration container"""

    bird: BirdConfig = field(default_factory=BirdConfig)
    gobgp: GoBGPConfig = field(default_factory=GoBGPConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigManager:
    """Configuration management for BGP Node Status"""

    DEFAULT_CONFIG_PATHS = [
        Path.home() / ".config/bgp-node-status/config.json",
        Path("/etc/bgp-node-status/config.json"),
        Path("./config.json"),
    ]

    SECTIONS = {
        "bird": BirdConfig,
        "gobgp": GoBGPConfig,
        "web": WebConfig,
        "logging": LoggingConfig,
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager

        Args:
            config_path: Optional path to configuration file
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = Path(config_path) if config_path else None
        self.config = StatusConfig()

        self._load_config()

    def _load_config(self):
        """Load configuration from file and environment"""
        config_file = self._find_config_file()
        if config_file:
            try:
                self._load_from_file(config_file)
                self.logger.info(f"Loaded configuration from {config_file}")
            except (OSError, ValueError, TypeError) as e:
                self.logger.warning(f"Failed to load config file {config_file}: {e}")

        # Environment variables are loaded in __post_init__ methods
        self.logger.debug("Configuration loaded with environment variable overrides")

    def _find_config_file(self) -> Optional[Path]:
        """Find configuration file in default locations"""
        if self.config_path and self.config_path.exists():
            return self.config_path

        for path in self.DEFAULT_CONFIG_PATHS:
            if path.exists():
                return path

        return None

    def _load_from_file(self, config_path: Path):
        """Load configuration from JSON file"""
        with open(config_path, "r") as f:
            data = json.load(f)
        self._load_from_dict(data)

    def _load_from_dict(self, data: dict):
        """Load configuration from dictionary"""
        for name, section_cls in self.SECTIONS.items():
            if name in data:
                setattr(self.config, name, section_cls(**data[name]))

    def get_config(self) -> StatusConfig:
        """Get current configuration"""
        return self.config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary for display"""
        return asdict(self.config)

    def validate_config(self) -> List[str]:
        """
        Validate configuration and return list of issues

        Returns:
            List of validation error messages
        """
        issues = []

        bird = self.config.bird
        if not bird.command.strip():
            issues.append("BIRD command is empty")
        for directory in (bird.socket_dir, bird.fallback_socket_dir):
            if not Path(directory).is_absolute():
                issues.append(f"BIRD socket directory must be absolute: {directory}")

        gobgp = self.config.gobgp
        if gobgp.port is not None and not (1 <= gobgp.port <= 65535):
            issues.append(f"GoBGP port must be between 1-65535, got {gobgp.port}")

        web = self.config.web
        if not (1 <= web.port <= 65535):
            issues.append(f"Web port must be between 1-65535, got {web.port}")

        level = self.config.logging.level.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            issues.append(f"Unknown log level: {self.config.logging.level}")

        if self.config.logging.log_to_file and not self.config.logging.log_file:
            issues.append("File logging enabled but log_file not configured")

        return issues


_config_manager: Optional[ConfigManager] = None
_config_manager_lock = threading.RLock()


def get_config_manager(config_path: Optional[Path] = None) -> ConfigManager:
    """
    Get global configuration manager instance using double-checked locking.

    The config_path is only honored by the call that creates the instance.
    """
    global _config_manager

    if _config_manager is not None:
        return _config_manager

    with _config_manager_lock:
        if _config_manager is None:
            _config_manager = ConfigManager(config_path)

        return _config_manager


def reset_config_manager():
    """Drop the global configuration manager (used by tests and --config)"""
    global _config_manager
    with _config_manager_lock:
        _config_manager = None


def get_config() -> StatusConfig:
    """Get current configuration"""
    return get_config_manager().get_config()
