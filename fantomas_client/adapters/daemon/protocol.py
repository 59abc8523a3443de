"""JSON-RPC protocol for daemon communication.

JSON-RPC 2.0 messages framed with Content-Length headers (the LSP base
protocol) over the daemon's stdin/stdout.
"""

import json
import logging
from typing import IO, Any

logger = logging.getLogger(__name__)

CONTENT_LENGTH = "content-length"

# Fantomas exposes its daemon methods under this JSON-RPC segment
METHOD_PREFIX = "fantomas/"


class ProtocolError(Exception):
    """Base exception for protocol errors."""

    pass


class Request:
    """JSON-RPC request message."""

    def __init__(self, method: str, params: dict[str, Any] | None = None, request_id: int = 1):
        """Create a request.

        Args:
            method: Method name (e.g., "fantomas/formatDocument")
            params: Single-object parameters, or None for parameterless methods
            request_id: Request ID for matching responses
        """
        self.method = method
        self.params = params
        self.id = request_id

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"jsonrpc": "2.0", "id": self.id, "method": self.method}
        if self.params is not None:
            data["params"] = self.params
        return data

    def encode(self) -> bytes:
        """Serialize to a framed message ready to write to the daemon."""
        return encode_message(self.to_dict())


class Response:
    """JSON-RPC response message."""

    def __init__(
        self,
        result: Any = None,
        error: dict[str, Any] | None = None,
        request_id: int | None = None,
    ):
        """Create a response.

        Args:
            result: Result value (if success)
            error: Error dict with 'code' and 'message' (if failure)
            request_id: Request ID for matching requests
        """
        self.result = result
        self.error = error
        self.id = request_id

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Response":
        """Build a response from a decoded message.

        Raises:
            ProtocolError: If the message has no usable id or a malformed error.
        """
        request_id = data.get("id")
        if not isinstance(request_id, int) or isinstance(request_id, bool):
            raise ProtocolError(f"Response has invalid id: {request_id!r}")
        error = data.get("error")
        if error is not None and not isinstance(error, dict):
            raise ProtocolError("Response 'error' must be an object")
        return cls(result=data.get("result"), error=error, request_id=request_id)

    def is_error(self) -> bool:
        """Check if this response is an error."""
        return self.error is not None

    @property
    def error_message(self) -> str:
        if not self.error:
            return ""
        return str(self.error.get("message", "Unknown error"))


def is_response(message: dict[str, Any]) -> bool:
    """True for replies to our requests; False for daemon-initiated messages."""
    return "id" in message and "method" not in message


def encode_message(payload: dict[str, Any]) -> bytes:
    """Frame a JSON payload with a Content-Length header."""
    body = json.dumps(payload).encode("utf-8")
    header = f"Content-Length: {len(body)}\r\n\r\n".encode("ascii")
    return header + body


def read_message(stream: IO[bytes]) -> dict[str, Any] | None:
    """Read one framed message from a stream.

    Blocks until a complete message is available. Lines without a colon
    (banners, restore output) are skipped, and so is any header block that
    carries no Content-Length.

    Args:
        stream: Binary stream (the daemon's stdout)

    Returns:
        Decoded JSON object, or None on clean EOF between messages

    Raises:
        ProtocolError: If the length or body is malformed, or the stream
            ends mid-message
    """
    while True:
        headers = _read_headers(stream)
        if headers is None:
            return None
        if CONTENT_LENGTH in headers:
            break
        if headers:
            logger.debug(f"Discarding header block without Content-Length: {headers}")

    try:
        length = int(headers[CONTENT_LENGTH])
    except ValueError as e:
        raise ProtocolError(f"Invalid Content-Length header: {headers}") from e
    if length < 0:
        raise ProtocolError(f"Negative Content-Length: {length}")

    body = stream.read(length)
    if len(body) < length:
        raise ProtocolError("Connection closed while reading message body")

    try:
        message = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError(f"Invalid JSON: {e}") from e

    if not isinstance(message, dict):
        raise ProtocolError("Message must be a JSON object")
    return message


def _read_headers(stream: IO[bytes]) -> dict[str, str] | None:
    """Read header lines up to the blank line ending the block.

    Returns None on EOF before any header.
    """
    headers: dict[str, str] = {}
    while True:
        line = stream.readline()
        if not line:
            if headers:
                raise ProtocolError("Connection closed while reading headers")
            return None
        text = line.decode("ascii", errors="replace").strip()
        if not text:
            return headers
        if ":" not in text:
            logger.debug(f"Skipping non-header output: {text!r}")
            continue
        key, value = text.split(":", 1)
        headers[key.strip().lower()] = value.strip()
