"""Domain exceptions for the Fantomas client.

Adapters raise these; the registry lets them propagate; the formatting
service catches them at its boundary and converts each one into a
FormattingResponse. They never reach a host caller.
"""


class FantomasClientError(Exception):
    """Base exception for all client errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class NoCompatibleVersionFound(FantomasClientError):
    """Raised when no probe found a Fantomas version at or above the minimum.

    Per-probe diagnostics are logged, not carried here.
    """

    def __init__(self, folder: str) -> None:
        super().__init__(
            f"No compatible Fantomas install found for {folder}",
            hint="Install it with 'dotnet tool install fantomas' "
            "(or 'dotnet tool install -g fantomas')",
        )
        self.folder = folder


class DaemonLaunchError(FantomasClientError):
    """Raised when the daemon process cannot be started or fails its handshake.

    Attributes:
        reason: Underlying diagnostic text (spawn error, stderr, timeout).
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Fantomas daemon could not be started: {reason}")
        self.reason = reason


class DaemonTransportError(FantomasClientError):
    """Raised when the channel to a daemon is closed or unreadable.

    The daemon that raised it is dead and must be evicted.
    """

    pass


class DaemonRequestError(FantomasClientError):
    """Raised when the daemon answers a request with a JSON-RPC error.

    Attributes:
        code: JSON-RPC error code, if the daemon sent one.
    """

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code
