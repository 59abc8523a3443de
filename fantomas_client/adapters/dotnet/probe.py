"""Version probes for Fantomas installs using subprocess dotnet commands.

Each probe runs one external command, forces an English CLI locale so the
output table is stable, and extracts a version string from stdout. Every
failure (missing executable, timeout, no matching row) is reported as a
ProbeError so the resolver can move on to the next probe.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from fantomas_client.adapters.daemon.timeouts import DaemonTimeouts
from fantomas_client.domain.tooling import TOOL_PACKAGE_IDS, Folder, ProbeKind

logger = logging.getLogger(__name__)

# `dotnet tool list` prints a header row and a dashed separator before data rows
TOOL_LIST_HEADER_LINES = 2

# Forces dotnet to print English column headers and messages
PROBE_ENV_OVERRIDES: dict[str, str] = {"DOTNET_CLI_UI_LANGUAGE": "en-us"}


class ProbeError(Exception):
    """A single probe did not yield a version."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class ProbeHit:
    """Version text found by a probe.

    Attributes:
        version: Raw version string from the command output.
        executable: Resolved executable path (path probe only).
    """

    version: str
    executable: Path | None = None


def parse_tool_list(output: str) -> str | None:
    """Extract the Fantomas version from `dotnet tool list` output.

    Expected format (columns separated by runs of spaces):

        Package Id      Version      Commands      Manifest
        -------------------------------------------------------
        fantomas        5.0.0        fantomas      /repo/.config/dotnet-tools.json

    Args:
        output: Full stdout of the list command.

    Returns:
        Version column of the first fantomas/fantomas-tool row, or None.
    """
    for line in output.splitlines()[TOOL_LIST_HEADER_LINES:]:
        parts = line.split()
        if len(parts) >= 2 and parts[0] in TOOL_PACKAGE_IDS:
            return parts[1]
    return None


def parse_version_output(output: str) -> str | None:
    """Extract the version from `fantomas --version` output.

    Fantomas prints e.g. "Fantomas v5.0.0"; older builds print the bare version.

    Args:
        output: Full stdout of the version command.

    Returns:
        Last token of the first non-empty line, or None if output is empty.
    """
    for line in output.splitlines():
        parts = line.split()
        if parts:
            return parts[-1]
    return None


class VersionProbe:
    """Runs discovery commands and parses version strings from their output."""

    def __init__(
        self,
        dotnet: str = "dotnet",
        timeout: float = DaemonTimeouts.PROBE_COMMAND,
        executable_name: str = "fantomas",
    ) -> None:
        """Initialize the probe.

        Args:
            dotnet: dotnet CLI executable (name on PATH or absolute path).
            timeout: Seconds each discovery command may run.
            executable_name: Name looked up on PATH by the path probe.
        """
        self.dotnet = dotnet
        self.timeout = timeout
        self.executable_name = executable_name

    def run(self, kind: ProbeKind, folder: Folder) -> ProbeHit:
        """Run one probe.

        Args:
            kind: Which discovery mechanism to use.
            folder: Folder being resolved (working directory of the local probe).

        Returns:
            ProbeHit with the raw version string.

        Raises:
            ProbeError: If the command could not run or printed no usable version.
        """
        if kind is ProbeKind.PATH:
            return self._probe_path()

        args = [self.dotnet, "tool", "list"]
        if kind is ProbeKind.GLOBAL:
            args.append("-g")
        cwd = folder.path if kind is ProbeKind.LOCAL else None

        output = self._run_command(args, cwd=cwd)
        version = parse_tool_list(output)
        if version is None:
            raise ProbeError(
                f"Could not find any install of fantomas or fantomas-tool "
                f"in {kind.value} list."
            )
        return ProbeHit(version=version)

    def _probe_path(self) -> ProbeHit:
        """Locate the fantomas executable on PATH and ask for its version."""
        found = shutil.which(self.executable_name)
        if found is None:
            raise ProbeError(f"{self.executable_name} was not found on PATH.")

        executable = Path(found).resolve()
        output = self._run_command([str(executable), "--version"], cwd=None)
        version = parse_version_output(output)
        if version is None:
            raise ProbeError(f"{executable} --version printed no version.")
        return ProbeHit(version=version, executable=executable)

    def _run_command(self, args: list[str], cwd: Path | None) -> str:
        """Run a discovery command to completion and return its stdout.

        A non-zero exit code is logged but not fatal: dotnet may print
        warnings to stderr while still emitting a usable table.

        Args:
            args: Command and arguments.
            cwd: Working directory, or None to inherit.

        Returns:
            Decoded stdout.

        Raises:
            ProbeError: If the command could not start or timed out.
        """
        command = " ".join(args)
        env = os.environ.copy()
        env.update(PROBE_ENV_OVERRIDES)

        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                env=env,
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeError(f"'{command}' timed out after {self.timeout}s") from e
        except OSError as e:
            raise ProbeError(f"Failed to run '{command}': {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            logger.error(
                f"'{command}' exited with code {result.returncode}"
                + (f": {stderr}" if stderr else " (no error output)")
            )

        output = result.stdout.decode("utf-8", errors="replace")
        logger.info(f"Running {command} returned:\n{output}")
        return output
