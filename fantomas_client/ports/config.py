"""Configuration provider port.

Defines the interface for loading and accessing client configuration.
"""

from pathlib import Path
from typing import Protocol

from fantomas_client.domain.config import ClientConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self, folder: Path | None = None) -> ClientConfig:
        """Load configuration, optionally with a project folder override.

        Args:
            folder: Project folder that may contain .fantomas-client.toml

        Returns:
            ClientConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if config files are missing or invalid.
        """
        ...
