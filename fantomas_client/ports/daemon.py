"""Port interface for a running formatting daemon.

Defines the protocol the registry and service use to talk to one daemon.
"""

from concurrent.futures import Future
from typing import Any, Protocol

from fantomas_client.domain.messages import FormatDocumentRequest, FormatSelectionRequest
from fantomas_client.domain.tooling import StartMethod


class FormattingDaemon(Protocol):
    """Protocol for a long-lived Fantomas daemon.

    Each request method sends one correlated request and returns a future
    that resolves with the raw result, or fails with DaemonTransportError
    when the channel closes and DaemonRequestError on a JSON-RPC error.
    """

    @property
    def start_method(self) -> StartMethod:
        """How this daemon was launched."""
        ...

    @property
    def is_alive(self) -> bool:
        """True while the process runs and the channel is open."""
        ...

    def version(self) -> "Future[str]":
        """Request the daemon's version string."""
        ...

    def format_document(self, request: FormatDocumentRequest) -> "Future[Any]":
        """Request a document format; resolves with the raw tagged result."""
        ...

    def format_selection(self, request: FormatSelectionRequest) -> "Future[Any]":
        """Request a selection format; resolves with the raw tagged result."""
        ...

    def configuration(self) -> "Future[str]":
        """Request the daemon's configuration description."""
        ...

    def close(self) -> None:
        """Close the channel, fail pending requests and terminate the process."""
        ...
