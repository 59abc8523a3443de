"""TOML-based configuration provider.

Loads configuration from the global config file with a per-project override.

Config loading priority (highest to lowest):
1. Local: <folder>/.fantomas-client.toml (project-specific)
2. Global: ~/.config/fantomas-client/config.toml (user defaults)
3. Built-in defaults
"""

import logging
from pathlib import Path

from fantomas_client.domain.config import ClientConfig
from fantomas_client.shared.config_io import (
    get_global_config_path,
    get_local_config_path,
    load_config_data,
)

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Implements config cascade:
    1. Load global config if present
    2. Load local config from the project folder if present
    3. Local values override global values (key-level merge per section)
    4. Missing values fall back to built-in defaults

    Gracefully handles missing or invalid configs with warnings.
    """

    def load(self, folder: Path | None = None) -> ClientConfig:
        """Load configuration with global fallback.

        Args:
            folder: Project folder that may hold .fantomas-client.toml

        Returns:
            ClientConfig instance with merged global/local values or defaults
        """
        config = ClientConfig.default()
        config = self._apply(config, get_global_config_path(), "global")
        if folder is not None:
            config = self._apply(config, get_local_config_path(folder), "local")
        return config

    def _apply(self, config: ClientConfig, path: Path, label: str) -> ClientConfig:
        if not path.exists():
            return config
        try:
            data = load_config_data(path)
            merged = ClientConfig.from_partial(config, data)
        except (FileNotFoundError, ValueError, TypeError) as e:
            logger.warning(
                "Failed to parse %s config at %s: %s. Ignoring it.",
                label,
                path,
                e,
            )
            return config
        logger.debug("Loaded %s config from %s", label, path)
        return merged
