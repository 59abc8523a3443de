"""Centralized timeout configuration for discovery and daemon operations.

All timeout defaults are defined here to:
1. Provide a single source of truth for tuning
2. Document the purpose of each timeout value
3. Keep adapter defaults equal to the ClientConfig defaults
"""


class DaemonTimeouts:
    """Centralized timeout defaults.

    All values are in seconds.

    Groups:
        PROBE_*: Discovery commands (dotnet tool list, fantomas --version)
        HANDSHAKE: Initial version request after spawn
        REQUEST: Any later request to a running daemon
        TERMINATE_* / KILL_*: Process teardown
    """

    # =========================================================================
    # Discovery
    # =========================================================================

    PROBE_COMMAND: float = 120.0
    """Maximum run time for one discovery command.

    `dotnet tool list` may restore manifests or hit the network on a cold
    machine, so this is generous. A probe that times out counts as a failed
    probe and resolution moves on to the next one.
    """

    # =========================================================================
    # Daemon requests
    # =========================================================================

    HANDSHAKE: float = 60.0
    """Time allowed for the version request sent right after spawn.

    Covers .NET runtime start-up and JIT of the Fantomas assembly. If the
    daemon does not answer in time it is killed and the launch fails.
    """

    REQUEST: float = 60.0
    """Time allowed for a single request to a running daemon.

    Formatting large files can take several seconds; a timeout is reported
    as a transport error and the daemon is left running.
    """

    # =========================================================================
    # Teardown
    # =========================================================================

    TERMINATE_WAIT: float = 5.0
    """Time to wait for the process to exit after terminate().

    The daemon exits as soon as its stdin closes, so this is normally instant.
    If it is still alive afterwards, kill() is used.
    """

    KILL_WAIT: float = 2.5
    """Time to wait after kill() for the OS to reap the process."""

    READER_JOIN: float = 1.0
    """Time to wait for the stdout/stderr reader threads to finish on close."""
