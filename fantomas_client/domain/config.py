"""Config domain models for the Fantomas client.

Configuration is read from a global config.toml and an optional
.fantomas-client.toml in the project folder. These frozen dataclasses hold
validated configuration state.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Literal

EndOfLine = Literal["lf", "crlf", "cr", "platform"]


@dataclass(frozen=True)
class ToolConfig:
    """Configuration for tool discovery.

    Attributes:
        dotnet_cli_path: dotnet executable used for discovery and for
            launching a local tool (default: "dotnet" from PATH).
        probe_timeout: Seconds a discovery command may run (default: 120).

    Raises:
        ValueError: If probe_timeout is not positive or dotnet_cli_path is empty.
    """

    dotnet_cli_path: str | None = None
    probe_timeout: float = 120.0

    def __post_init__(self) -> None:
        """Validate tool config after initialization."""
        if self.probe_timeout <= 0:
            raise ValueError(f"probe_timeout must be positive, got {self.probe_timeout}")
        if self.dotnet_cli_path is not None and not self.dotnet_cli_path.strip():
            raise ValueError("dotnet_cli_path cannot be empty")

    @property
    def dotnet(self) -> str:
        return self.dotnet_cli_path or "dotnet"


@dataclass(frozen=True)
class DaemonConfig:
    """Configuration for daemon processes.

    Attributes:
        startup_timeout: Seconds to wait for the version handshake.
        request_timeout: Seconds to wait for any single request.
        shutdown_timeout: Seconds to wait for the process to exit after terminate.

    Raises:
        ValueError: If any timeout is not positive.
    """

    startup_timeout: float = 60.0
    request_timeout: float = 60.0
    shutdown_timeout: float = 5.0

    def __post_init__(self) -> None:
        """Validate daemon config after initialization."""
        for name in ("startup_timeout", "request_timeout", "shutdown_timeout"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class FormatConfig:
    """Configuration sent along with format requests.

    Attributes:
        end_of_line: Line-ending convention ("lf", "crlf", "cr" or "platform").
    """

    end_of_line: EndOfLine = "lf"

    def __post_init__(self) -> None:
        if self.end_of_line not in ("lf", "crlf", "cr", "platform"):
            raise ValueError(
                f"end_of_line must be one of lf, crlf, cr, platform; "
                f"got {self.end_of_line!r}"
            )


@dataclass(frozen=True)
class ClientConfig:
    """Complete client configuration.

    Attributes:
        tool: Tool discovery configuration
        daemon: Daemon process configuration
        format: Format request configuration
    """

    tool: ToolConfig = field(default_factory=ToolConfig)
    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    format: FormatConfig = field(default_factory=FormatConfig)

    @staticmethod
    def default() -> "ClientConfig":
        """Create a config with all default values."""
        return ClientConfig(tool=ToolConfig(), daemon=DaemonConfig(), format=FormatConfig())

    @staticmethod
    def from_partial(base: "ClientConfig", data: dict[str, Any]) -> "ClientConfig":
        """Overlay raw TOML data on an existing config.

        Only keys present in data are replaced; each section is re-validated.
        Unknown sections and keys are ignored.

        Args:
            base: Config to start from.
            data: Parsed TOML data.

        Returns:
            New ClientConfig with overrides applied.

        Raises:
            ValueError: If an overridden value fails validation.
        """
        sections = {}
        for name in ("tool", "daemon", "format"):
            section = getattr(base, name)
            overrides = data.get(name)
            if not isinstance(overrides, dict):
                sections[name] = section
                continue
            known = {f.name for f in fields(section)}
            sections[name] = replace(
                section, **{k: v for k, v in overrides.items() if k in known}
            )
        return ClientConfig(**sections)
