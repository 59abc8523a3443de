"""Request and result shapes exchanged with the Fantomas daemon.

Results come back as F# discriminated unions serialized as
{"Case": <tag>, "Fields": [...]}. Tag and field count are validated
together; any other combination is a decode failure (the parsers return None).
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any


class LineEnding(str, Enum):
    """Line-ending normalization passed to the daemon."""

    LF = "lf"
    CRLF = "crlf"
    CR = "cr"
    PLATFORM = "platform"

    def wire_value(self) -> str:
        """Resolve PLATFORM to the current OS convention."""
        if self is LineEnding.PLATFORM:
            return "crlf" if os.linesep == "\r\n" else "lf"
        return self.value


@dataclass(frozen=True)
class FormatDocumentRequest:
    """Format a whole document.

    Attributes:
        source_code: Current text of the document.
        file_path: Absolute path of the document.
        end_of_line: Line-ending convention for the formatted text.
    """

    source_code: str
    file_path: str
    end_of_line: LineEnding = LineEnding.LF

    def to_params(self) -> dict[str, Any]:
        return {
            "sourceCode": self.source_code,
            "filePath": self.file_path,
            "config": {
                "Case": "Some",
                "Fields": [{"end_of_line": self.end_of_line.wire_value()}],
            },
        }


@dataclass(frozen=True)
class FormatSelectionRange:
    """Selection bounds (1-based lines, 0-based columns as Fantomas expects)."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def __post_init__(self) -> None:
        if self.start_line < 1 or self.end_line < 1:
            raise ValueError("Selection lines start at 1")
        if self.start_column < 0 or self.end_column < 0:
            raise ValueError("Selection columns cannot be negative")
        if (self.end_line, self.end_column) < (self.start_line, self.start_column):
            raise ValueError("Selection end is before its start")

    def to_params(self) -> dict[str, int]:
        return {
            "startLine": self.start_line,
            "startColumn": self.start_column,
            "endLine": self.end_line,
            "endColumn": self.end_column,
        }


@dataclass(frozen=True)
class FormatSelectionRequest:
    """Format a range inside a document."""

    source_code: str
    file_path: str
    range: FormatSelectionRange

    def to_params(self) -> dict[str, Any]:
        return {
            "sourceCode": self.source_code,
            "filePath": self.file_path,
            "range": self.range.to_params(),
        }


# ============================================================================
# Tagged results
# ============================================================================


@dataclass(frozen=True)
class Formatted:
    file_name: str
    formatted_content: str


@dataclass(frozen=True)
class Unchanged:
    file_name: str


@dataclass(frozen=True)
class FormatError:
    file_name: str
    formatting_error: str


@dataclass(frozen=True)
class IgnoredFile:
    file_name: str


FormatDocumentResult = Formatted | Unchanged | FormatError | IgnoredFile
FormatSelectionResult = Formatted | FormatError

# (tag, field count) -> result type
_DOCUMENT_CASES: dict[tuple[str, int], type] = {
    ("Formatted", 2): Formatted,
    ("Unchanged", 1): Unchanged,
    ("Error", 2): FormatError,
    ("IgnoredFile", 1): IgnoredFile,
}

_SELECTION_CASES: dict[tuple[str, int], type] = {
    ("Formatted", 2): Formatted,
    ("Error", 2): FormatError,
}


def _parse_union(raw: Any, cases: dict[tuple[str, int], type]) -> Any:
    """Match a raw {"Case", "Fields"} value against the allowed cases.

    Args:
        raw: Decoded JSON value from the daemon.
        cases: Mapping of (tag, arity) to result type.

    Returns:
        Constructed result, or None if tag/arity/field types do not match.
    """
    if not isinstance(raw, dict):
        return None
    case = raw.get("Case")
    fields = raw.get("Fields", [])
    if not isinstance(case, str) or not isinstance(fields, list):
        return None
    if not all(isinstance(f, str) for f in fields):
        return None
    result_type = cases.get((case, len(fields)))
    if result_type is None:
        return None
    return result_type(*fields)


def parse_format_document_result(raw: Any) -> FormatDocumentResult | None:
    """Parse a formatDocument result; None on any unexpected shape."""
    return _parse_union(raw, _DOCUMENT_CASES)


def parse_format_selection_result(raw: Any) -> FormatSelectionResult | None:
    """Parse a formatSelection result; None on any unexpected shape."""
    return _parse_union(raw, _SELECTION_CASES)
