"""CLI error handling with actionable hints.

Provides consistent error formatting and the mapping from failed
FormattingResponse codes to CLI errors.
"""

from typing import NoReturn

import click

from fantomas_client.domain.responses import FormattingResponse, ResponseCode


class FantomasCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise FantomasCliError(
            "No compatible Fantomas install found",
            hint="Run 'dotnet tool install fantomas' in your project",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        """Initialize the error with message and optional hint.

        Args:
            message: The primary error message.
            hint: Optional actionable suggestion for the user.
        """
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present.

        Returns:
            Formatted error message, with hint on a new line if provided.
        """
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


# code -> (message template, hint)
_FAILURE_MESSAGES: dict[ResponseCode, tuple[str, str | None]] = {
    ResponseCode.ERROR: (
        "{path} could not be formatted:\n{content}",
        None,
    ),
    ResponseCode.TOOL_NOT_FOUND: (
        "No compatible Fantomas install found for {path}",
        "Run 'dotnet tool install fantomas' in your project, "
        "or 'dotnet tool install -g fantomas'",
    ),
    ResponseCode.FILE_NOT_FOUND: (
        "File not found: {path}",
        None,
    ),
    ResponseCode.PATH_NOT_ABSOLUTE: (
        "Path is not absolute: {path}",
        None,
    ),
    ResponseCode.DAEMON_LAUNCH_FAILED: (
        "Fantomas daemon could not be started: {content}",
        "Check that 'fantomas --daemon' runs in the file's folder",
    ),
    ResponseCode.PROTOCOL_DECODE_ERROR: (
        "Fantomas daemon sent a response that could not be decoded",
        "Your Fantomas version may be newer than this client supports",
    ),
    ResponseCode.TRANSPORT_ERROR: (
        "Lost connection to the Fantomas daemon: {content}",
        "Run the command again to start a fresh daemon",
    ),
}


def response_error(response: FormattingResponse) -> NoReturn:
    """Raise the CLI error matching a failed response.

    Args:
        response: A response whose code is a failure.

    Raises:
        FantomasCliError: Always.
    """
    template, hint = _FAILURE_MESSAGES.get(
        response.code, ("Unexpected response: {code}", None)
    )
    raise FantomasCliError(
        template.format(
            path=response.file_path,
            content=response.content or "",
            code=response.code.value,
        ),
        hint=hint,
    )
