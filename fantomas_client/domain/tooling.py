"""Domain value objects describing a discovered Fantomas tool.

A folder is resolved to a tool version plus the method that launches it.
These objects are immutable; the registry caches and replaces them wholesale.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import semver

# Package ids that `dotnet tool list` may report for Fantomas
TOOL_PACKAGE_IDS: frozenset[str] = frozenset({"fantomas", "fantomas-tool"})


@dataclass(frozen=True)
class Folder:
    """Absolute directory used as a cache key and discovery working directory.

    Attributes:
        path: Absolute directory path.

    Raises:
        ValueError: If path is not absolute.
    """

    path: Path

    def __post_init__(self) -> None:
        """Validate the folder is absolute."""
        if not self.path.is_absolute():
            raise ValueError(f"Folder must be an absolute path, got {self.path}")

    @classmethod
    def for_file(cls, file_path: Path) -> "Folder":
        """Derive the owning folder of a file by stripping the file name."""
        return cls(file_path.parent)

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class ToolVersion:
    """Semantic version of a Fantomas install.

    Equality and hashing use the parsed semantic version only, so
    "5.0.0" and "v5.0.0" compare equal while their raw text differs.

    Attributes:
        value: Parsed semantic version.
        raw: Version text as reported by the tool.
    """

    value: semver.Version
    raw: str = field(compare=False)

    @classmethod
    def parse(cls, text: str) -> "ToolVersion":
        """Parse version text reported by dotnet or fantomas.

        Args:
            text: Version string, optionally prefixed with "v".

        Returns:
            ToolVersion wrapping the parsed value.

        Raises:
            ValueError: If text is not a valid semantic version.
        """
        raw = text.strip()
        candidate = raw[1:] if raw[:1] in ("v", "V") else raw
        return cls(value=semver.Version.parse(candidate), raw=raw)

    def is_compatible(self) -> bool:
        """Check the version is at or above the minimum supported version."""
        return self.value >= MINIMUM_VERSION.value

    def __str__(self) -> str:
        return str(self.value)


# Oldest Fantomas release that ships the --daemon mode
MINIMUM_VERSION = ToolVersion.parse("4.6.0-alpha-004")


class ProbeKind(str, Enum):
    """Discovery mechanisms, listed in resolution order."""

    LOCAL = "local"
    GLOBAL = "global"
    PATH = "path"


@dataclass(frozen=True)
class LocalTool:
    """Fantomas installed through a local tool manifest (dotnet-tools.json).

    Launched as `dotnet fantomas` from the working directory.
    """

    working_directory: Folder


@dataclass(frozen=True)
class GlobalTool:
    """Fantomas installed with `dotnet tool install -g`."""

    @staticmethod
    def executable() -> Path:
        """Path of the global tool shim under the per-user tools directory."""
        name = "fantomas.exe" if sys.platform == "win32" else "fantomas"
        return Path.home() / ".dotnet" / "tools" / name


@dataclass(frozen=True)
class ToolOnPath:
    """Fantomas executable found on the search path."""

    executable_path: Path


StartMethod = LocalTool | GlobalTool | ToolOnPath


@dataclass(frozen=True)
class ResolvedTool:
    """A compatible tool version and the method used to launch it.

    Attributes:
        version: Discovered tool version.
        start_method: How every future daemon for this version is started.
    """

    version: ToolVersion
    start_method: StartMethod
