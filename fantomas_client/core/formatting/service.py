"""Formatting service: the public entry point for hosts.

Given a file path and source text, finds the daemon for the file's folder,
sends the request and maps the outcome into a FormattingResponse.

Error handling contract:
    Every public method returns a FormattingResponse. Validation, resolution,
    launch, transport and decode failures are all mapped to response codes;
    none of them is raised to the caller.
"""

import logging
from collections.abc import Callable
from concurrent.futures import Future
from pathlib import Path
from typing import Any

from fantomas_client.adapters.daemon.timeouts import DaemonTimeouts
from fantomas_client.core.registry import DaemonRegistry
from fantomas_client.domain.exceptions import (
    DaemonLaunchError,
    DaemonRequestError,
    DaemonTransportError,
    NoCompatibleVersionFound,
)
from fantomas_client.domain.messages import (
    FormatDocumentRequest,
    FormatError,
    Formatted,
    FormatSelectionRange,
    FormatSelectionRequest,
    IgnoredFile,
    LineEnding,
    Unchanged,
    parse_format_document_result,
    parse_format_selection_result,
)
from fantomas_client.domain.responses import FormattingResponse
from fantomas_client.domain.tooling import Folder
from fantomas_client.ports.daemon import FormattingDaemon

logger = logging.getLogger(__name__)

RequestSender = Callable[[FormattingDaemon], Future]
ResultMapper = Callable[[str, Any], FormattingResponse]


def _check_file_path(file_path: str) -> FormattingResponse | None:
    """Validate a path before touching any cache or process.

    Returns:
        A FILE_NOT_FOUND / PATH_NOT_ABSOLUTE response, or None if valid.
    """
    path = Path(file_path)
    try:
        exists = path.exists()
    except OSError as e:
        # Overlong names, unsearchable parents and the like
        logger.debug(f"Cannot stat {file_path}: {e}")
        exists = False
    if not exists:
        return FormattingResponse.file_not_found(file_path)
    if not path.is_absolute():
        return FormattingResponse.path_not_absolute(file_path)
    return None


def _map_text(factory: Callable[[str, str], FormattingResponse]) -> ResultMapper:
    def mapper(file_path: str, raw: Any) -> FormattingResponse:
        if not isinstance(raw, str):
            logger.warning(f"Expected a string from the daemon, got {raw!r}")
            return FormattingResponse.protocol_decode_error(file_path)
        return factory(file_path, raw)

    return mapper


def _map_document_result(file_path: str, raw: Any) -> FormattingResponse:
    result = parse_format_document_result(raw)
    if isinstance(result, Formatted):
        return FormattingResponse.formatted(file_path, result.formatted_content)
    if isinstance(result, Unchanged):
        logger.info(f"{file_path} is unchanged")
        return FormattingResponse.unchanged(file_path)
    if isinstance(result, FormatError):
        logger.warning(f"{file_path} could not be formatted: {result.formatting_error}")
        return FormattingResponse.formatting_error(file_path, result.formatting_error)
    if isinstance(result, IgnoredFile):
        return FormattingResponse.ignored(file_path)
    logger.warning(f"Unexpected formatDocument result for {file_path}: {raw!r}")
    return FormattingResponse.protocol_decode_error(file_path)


def _map_selection_result(file_path: str, raw: Any) -> FormattingResponse:
    result = parse_format_selection_result(raw)
    if isinstance(result, Formatted):
        return FormattingResponse.formatted(file_path, result.formatted_content)
    if isinstance(result, FormatError):
        logger.warning(f"Selection in {file_path} could not be formatted: {result.formatting_error}")
        return FormattingResponse.formatting_error(file_path, result.formatting_error)
    logger.warning(f"Unexpected formatSelection result for {file_path}: {raw!r}")
    return FormattingResponse.protocol_decode_error(file_path)


_map_version = _map_text(FormattingResponse.version_report)
_map_configuration = _map_text(FormattingResponse.configuration)


class FormattingService:
    """Formats files through cached Fantomas daemons.

    Thread-safe: callers may format files from several threads at once.
    Each call blocks until the daemon answers or the request timeout passes.
    """

    def __init__(
        self,
        registry: DaemonRegistry,
        request_timeout: float = DaemonTimeouts.REQUEST,
        end_of_line: LineEnding = LineEnding.LF,
    ) -> None:
        """Initialize the service.

        Args:
            registry: Cache of resolved tools and running daemons.
            request_timeout: Seconds to wait for any single daemon answer.
            end_of_line: Default line ending for format_document.
        """
        self._registry = registry
        self._request_timeout = request_timeout
        self._end_of_line = end_of_line

    def __enter__(self) -> "FormattingService":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_version(self, file_path: str) -> FormattingResponse:
        """Report the Fantomas version serving a file's folder."""
        return self._call(file_path, lambda daemon: daemon.version(), _map_version)

    def get_configuration(self, file_path: str) -> FormattingResponse:
        """Report the configuration the daemon describes for a file's folder."""
        return self._call(file_path, lambda daemon: daemon.configuration(), _map_configuration)

    def format_document(
        self,
        file_path: str,
        source_text: str,
        end_of_line: LineEnding | None = None,
    ) -> FormattingResponse:
        """Format a whole document.

        Args:
            file_path: Absolute path of an existing file.
            source_text: Current text of the document (may differ from disk).
            end_of_line: Line ending override; defaults to the service setting.

        Returns:
            FORMATTED with the new text, UNCHANGED, ERROR with the formatter's
            message, IGNORED, or one of the failure codes.
        """
        request = FormatDocumentRequest(
            source_code=source_text,
            file_path=file_path,
            end_of_line=end_of_line or self._end_of_line,
        )
        return self._call(
            file_path, lambda daemon: daemon.format_document(request), _map_document_result
        )

    def format_selection(
        self,
        file_path: str,
        source_text: str,
        selection: FormatSelectionRange,
    ) -> FormattingResponse:
        """Format a range of a document.

        Returns:
            FORMATTED with the formatted selection text, ERROR, or a failure code.
        """
        request = FormatSelectionRequest(
            source_code=source_text, file_path=file_path, range=selection
        )
        return self._call(
            file_path, lambda daemon: daemon.format_selection(request), _map_selection_result
        )

    def clear_cache(self) -> None:
        """Stop every daemon and forget every resolution. Idempotent."""
        self._registry.clear_all()

    def close(self) -> None:
        """Release all daemons; hosts call this when they shut down."""
        self.clear_cache()

    # ------------------------------------------------------------------

    def _call(
        self,
        file_path: str,
        send: RequestSender,
        map_result: ResultMapper,
    ) -> FormattingResponse:
        rejected = _check_file_path(file_path)
        if rejected is not None:
            return rejected

        folder = Folder.for_file(Path(file_path))
        try:
            daemon = self._registry.get_or_create_daemon(folder)
        except NoCompatibleVersionFound:
            return FormattingResponse.tool_not_found(file_path)
        except DaemonLaunchError as e:
            logger.error(e.message)
            return FormattingResponse.daemon_launch_failed(file_path, e.reason)

        future = send(daemon)
        try:
            raw = future.result(timeout=self._request_timeout)
        except TimeoutError:
            future.cancel()
            reason = f"Fantomas daemon did not answer within {self._request_timeout}s"
            logger.warning(f"{reason} for {file_path}")
            return FormattingResponse.transport_error(file_path, reason)
        except DaemonRequestError as e:
            logger.warning(f"Fantomas daemon rejected request for {file_path}: {e.message}")
            return FormattingResponse.transport_error(file_path, e.message)
        except DaemonTransportError as e:
            logger.warning(f"Fantomas daemon channel failed for {file_path}: {e.message}")
            self._registry.evict(daemon)
            return FormattingResponse.transport_error(file_path, e.message)

        return map_result(file_path, raw)
