"""
Centralized timeout configuration for BGP Node Status

This module provides configurable timeout values for the blocking operations
of a status query: connecting to a BIRD socket, waiting for each line of its
response, and running the GoBGP CLI.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class TimeoutType(Enum):
    """Types of operations that can timeout"""

    BIRD_CONNECT = "bird_connect"
    BIRD_READ = "bird_read"
    GOBGP_COMMAND = "gobgp_command"


@dataclass(frozen=True)
class TimeoutConfig:
    """Configuration for a specific timeout type"""

    default: float
    min_value: float
    max_value: float
    env_var: str
    description: str

    def get_value(self) -> float:
        """Get the configured timeout value from environment or default"""
        try:
            value = float(os.environ.get(self.env_var, self.default))
            if value < self.min_value:
                logging.warning(
                    f"Timeout {self.env_var}={value} below minimum "
                    f"{self.min_value}, using minimum"
                )
                return self.min_value
            if value > self.max_value:
                logging.warning(
                    f"Timeout {self.env_var}={value} above maximum "
                    f"{self.max_value}, using maximum"
                )
                return self.max_value
            return value
        except (ValueError, TypeError):
            logging.warning(
                f"Invalid timeout value for {self.env_var}, using "
                f"default {self.default}"
            )
            return self.default


class TimeoutManager:
    """Centralized timeout management for BGP Node Status"""

    _TIMEOUT_CONFIGS = {
        TimeoutType.BIRD_CONNECT: TimeoutConfig(
            default=2.0,
            min_value=0.1,
            max_value=30.0,
            env_var="BGP_STATUS_BIRD_CONNECT_TIMEOUT",
            description="Timeout for connecting to a BIRD control socket",
        ),
        TimeoutType.BIRD_READ: TimeoutConfig(
            default=2.0,
            min_value=0.1,
            max_value=60.0,
            env_var="BGP_STATUS_BIRD_READ_TIMEOUT",
            description="Maximum silence between two lines of BIRD output",
        ),
        TimeoutType.GOBGP_COMMAND: TimeoutConfig(
            default=10.0,
            min_value=1.0,
            max_value=120.0,
            env_var="BGP_STATUS_GOBGP_TIMEOUT",
            description="Timeout for the gobgp neighbor command",
        ),
    }

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def get_timeout(self, timeout_type: TimeoutType) -> float:
        """
        Get timeout value for specified operation type

        Values are read from the environment on every call so that a
        long-running HTTP server picks up changes without a restart.
        """
        config = self._TIMEOUT_CONFIGS.get(timeout_type)
        if not config:
            self.logger.warning(f"Unknown timeout type {timeout_type}, using default 2s")
            return 2.0

        timeout_val = config.get_value()
        self.logger.debug(f"Loaded timeout {timeout_type.value}: {timeout_val}s")
        return timeout_val

    def validate_environment(self) -> Dict[str, Any]:
        """
        Validate all timeout environment variables

        Returns:
            Dictionary with validation results
        """
        results = {"valid": True, "warnings": [], "errors": [], "timeouts": {}}

        for timeout_type, config in self._TIMEOUT_CONFIGS.items():
            env_value = os.environ.get(config.env_var)

            results["timeouts"][timeout_type.value] = {
                "env_var": config.env_var,
                "env_value": env_value,
                "actual_value": self.get_timeout(timeout_type),
                "default": config.default,
                "description": config.description,
            }

            if env_value:
                try:
                    parsed_value = float(env_value)
                    if not config.min_value <= parsed_value <= config.max_value:
                        results["warnings"].append(
                            f"{config.env_var}={env_value} outside "
                            f"recommended range "
                            f"[{config.min_value}, {config.max_value}]"
                        )
                except (ValueError, TypeError):
                    results["errors"].append(f"Invalid value for {config.env_var}: {env_value}")
                    results["valid"] = False

        return results


# Global timeout manager instance
timeout_manager = TimeoutManager()


def get_timeout(timeout_type: TimeoutType) -> float:
    """Get timeout value for operation type"""
    return timeout_manager.get_timeout(timeout_type)


def validate_timeouts() -> Dict[str, Any]:
    """Validate all timeout configurations"""
    return timeout_manager.validate_environment()
