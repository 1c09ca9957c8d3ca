"""Configuration management for modulemd command-line tools."""

import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Config:
    """Command-line configuration.

    The library itself never reads the environment; only the CLI builds a
    Config and passes explicit values down.
    """

    strict: bool = False
    log_level: str = "WARNING"
    default_priority: int = 0

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        config = cls()

        if strict := os.environ.get("MODULEMD_STRICT"):
            config.strict = strict.strip().lower() in _TRUE_VALUES

        if level := os.environ.get("MODULEMD_LOG_LEVEL"):
            config.log_level = level.upper()

        if priority := os.environ.get("MODULEMD_DEFAULT_PRIORITY"):
            config.default_priority = int(priority)

        return config
