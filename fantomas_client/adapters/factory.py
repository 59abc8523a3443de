"""Factory classes for service and adapter instantiation.

This module centralizes the creation of the formatting service and its
dependencies, keeping the CLI layer free from direct adapter imports.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fantomas_client.core.formatting.service import FormattingService
    from fantomas_client.core.registry import DaemonRegistry
    from fantomas_client.domain.config import ClientConfig
    from fantomas_client.ports.config import ConfigProvider


class ConfigFactory:
    """Factory for creating configuration providers."""

    def create_config_provider(self) -> ConfigProvider:
        """Create the TOML config provider (global + per-project files)."""
        from fantomas_client.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider()


class ServiceFactory:
    """Factory wiring probes, resolver, registry and service together.

    Args:
        config: ClientConfig with tool, daemon and format settings.
    """

    def __init__(self, config: ClientConfig) -> None:
        """Initialize factory with configuration.

        Args:
            config: Configuration for discovery, daemons and requests.
        """
        self._config = config

    def create_registry(self) -> DaemonRegistry:
        """Create a registry that resolves with dotnet probes and launches DaemonProcess."""
        from fantomas_client.adapters.daemon.client import DaemonProcess
        from fantomas_client.adapters.dotnet.probe import VersionProbe
        from fantomas_client.adapters.dotnet.resolver import DotnetToolResolver
        from fantomas_client.core.registry import DaemonRegistry

        tool = self._config.tool
        daemon = self._config.daemon

        probe = VersionProbe(dotnet=tool.dotnet, timeout=tool.probe_timeout)
        launch = functools.partial(
            DaemonProcess.launch,
            dotnet=tool.dotnet,
            startup_timeout=daemon.startup_timeout,
            shutdown_timeout=daemon.shutdown_timeout,
        )
        return DaemonRegistry(resolver=DotnetToolResolver(probe), daemon_factory=launch)

    def create_formatting_service(self) -> FormattingService:
        """Create a FormattingService backed by a fresh registry."""
        from fantomas_client.core.formatting.service import FormattingService
        from fantomas_client.domain.messages import LineEnding

        return FormattingService(
            registry=self.create_registry(),
            request_timeout=self._config.daemon.request_timeout,
            end_of_line=LineEnding(self._config.format.end_of_line),
        )
