"""Command lines for starting a Fantomas daemon from a StartMethod."""

from pathlib import Path

from fantomas_client.domain.tooling import GlobalTool, LocalTool, StartMethod, ToolOnPath

DAEMON_FLAG = "--daemon"


def build_daemon_command(
    start_method: StartMethod,
    dotnet: str = "dotnet",
) -> tuple[list[str], Path | None]:
    """Build the argv and working directory for a daemon.

    Args:
        start_method: How the tool was found during resolution.
        dotnet: dotnet CLI used to dispatch a local tool.

    Returns:
        Tuple of (argv, cwd). cwd is None when the working directory does
        not matter.

    Raises:
        TypeError: If start_method is not a known variant.
    """
    if isinstance(start_method, LocalTool):
        # Local tools only resolve from inside the folder owning the manifest
        return [dotnet, "fantomas", DAEMON_FLAG], start_method.working_directory.path
    if isinstance(start_method, GlobalTool):
        return [str(GlobalTool.executable()), DAEMON_FLAG], None
    if isinstance(start_method, ToolOnPath):
        return [str(start_method.executable_path), DAEMON_FLAG], None
    raise TypeError(f"Unknown start method: {start_method!r}")
