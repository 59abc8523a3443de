"""Closed response taxonomy returned by the formatting service.

Every service call resolves to exactly one FormattingResponse. Hosts switch
on `code` and read `content` for the codes that carry text.
"""

from dataclasses import dataclass
from enum import Enum


class ResponseCode(str, Enum):
    """Outcome of a formatting service call."""

    FORMATTED = "formatted"
    UNCHANGED = "unchanged"
    ERROR = "error"
    IGNORED = "ignored"
    VERSION = "version"
    CONFIGURATION = "configuration"
    TOOL_NOT_FOUND = "tool_not_found"
    FILE_NOT_FOUND = "file_not_found"
    PATH_NOT_ABSOLUTE = "path_not_absolute"
    DAEMON_LAUNCH_FAILED = "daemon_launch_failed"
    PROTOCOL_DECODE_ERROR = "protocol_decode_error"
    TRANSPORT_ERROR = "transport_error"


# Codes that represent an answer from the daemon rather than a failure
_SUCCESS_CODES = frozenset({
    ResponseCode.FORMATTED,
    ResponseCode.UNCHANGED,
    ResponseCode.IGNORED,
    ResponseCode.VERSION,
    ResponseCode.CONFIGURATION,
})


@dataclass(frozen=True)
class FormattingResponse:
    """Result of one service call.

    Attributes:
        code: Outcome category.
        file_path: Path the request was made for.
        content: Formatted text, error message, version, configuration,
            or launch/transport reason, depending on code. None otherwise.
    """

    code: ResponseCode
    file_path: str
    content: str | None = None

    @property
    def success(self) -> bool:
        """True when the daemon produced an answer (including Unchanged/Ignored)."""
        return self.code in _SUCCESS_CODES

    @classmethod
    def formatted(cls, file_path: str, text: str) -> "FormattingResponse":
        return cls(ResponseCode.FORMATTED, file_path, text)

    @classmethod
    def unchanged(cls, file_path: str) -> "FormattingResponse":
        return cls(ResponseCode.UNCHANGED, file_path)

    @classmethod
    def formatting_error(cls, file_path: str, message: str) -> "FormattingResponse":
        return cls(ResponseCode.ERROR, file_path, message)

    @classmethod
    def ignored(cls, file_path: str) -> "FormattingResponse":
        return cls(ResponseCode.IGNORED, file_path)

    @classmethod
    def version_report(cls, file_path: str, version: str) -> "FormattingResponse":
        return cls(ResponseCode.VERSION, file_path, version)

    @classmethod
    def configuration(cls, file_path: str, text: str) -> "FormattingResponse":
        return cls(ResponseCode.CONFIGURATION, file_path, text)

    @classmethod
    def tool_not_found(cls, file_path: str) -> "FormattingResponse":
        return cls(ResponseCode.TOOL_NOT_FOUND, file_path)

    @classmethod
    def file_not_found(cls, file_path: str) -> "FormattingResponse":
        return cls(ResponseCode.FILE_NOT_FOUND, file_path)

    @classmethod
    def path_not_absolute(cls, file_path: str) -> "FormattingResponse":
        return cls(ResponseCode.PATH_NOT_ABSOLUTE, file_path)

    @classmethod
    def daemon_launch_failed(cls, file_path: str, reason: str) -> "FormattingResponse":
        return cls(ResponseCode.DAEMON_LAUNCH_FAILED, file_path, reason)

    @classmethod
    def protocol_decode_error(cls, file_path: str) -> "FormattingResponse":
        return cls(ResponseCode.PROTOCOL_DECODE_ERROR, file_path)

    @classmethod
    def transport_error(cls, file_path: str, reason: str) -> "FormattingResponse":
        return cls(ResponseCode.TRANSPORT_ERROR, file_path, reason)
