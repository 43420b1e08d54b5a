"""Error types shared by the parser, serializer and configuration layer."""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    YAML_PARSE_ERROR = "YAML_PARSE_ERROR"
    SERIALIZE_ERROR = "SERIALIZE_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"
    FILE_OPERATION_ERROR = "FILE_OPERATION_ERROR"
    THEME_NOT_FOUND = "THEME_NOT_FOUND"


class ParseErrorKind(Enum):
    """Sub-code distinguishing structural parse failures."""

    INDENTATION = "indentation"
    MISSING_COLON = "missing_colon"
    EMPTY_KEY = "empty_key"
    ARRAY_CONTEXT = "array_context"
    DUPLICATE_KEY = "duplicate_key"
    INVALID_INPUT = "invalid_input"
    UNEXPECTED = "unexpected"


class PlumarError(Exception):
    """Base error carrying a code and user-facing suggestions."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        suggestions: list[str] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.suggestions = list(suggestions or [])
        self.original_error = original_error

    def user_friendly_message(self) -> str:
        """Message followed by numbered suggestions, for terminal output."""
        lines = [f"error: {self}"]
        if self.suggestions:
            lines.append("")
            lines.append("suggestions:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"  {i}. {suggestion}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, object]:
        original = None
        if self.original_error is not None:
            original = {
                "name": type(self.original_error).__name__,
                "message": str(self.original_error),
            }
        return {
            "name": type(self).__name__,
            "message": self.message,
            "code": self.code.value,
            "suggestions": list(self.suggestions),
            "original_error": original,
        }


class ParseError(PlumarError):
    """A structural failure in a document, decorated with its location.

    The same parser serves several file types, so the caller supplies
    ``file_identity`` (usually a path) and ``context_label`` (e.g. ``config``
    or ``theme``) and both end up in the message.
    """

    def __init__(
        self,
        cause: str,
        kind: ParseErrorKind,
        file_identity: str = "<string>",
        line: int | None = None,
        context_label: str = "document",
    ) -> None:
        if not cause:
            raise ValueError("ParseError requires a cause")
        message = f"{context_label} parse failed: {cause}"
        if line is not None:
            message += f" (line {line})"
        super().__init__(
            message,
            ErrorCode.YAML_PARSE_ERROR,
            [
                f'check the syntax of "{file_identity}"',
                "indent with spaces, two per level",
                "check the use of quotes, colons and dashes",
            ],
        )
        self.cause = cause
        self.kind = kind
        self.file_identity = file_identity
        self.line = line
        self.context_label = context_label

    def __str__(self) -> str:
        return f"{self.file_identity}: {self.message}"

    def to_dict(self) -> dict[str, object]:
        data = super().to_dict()
        data.update(
            kind=self.kind.value,
            file_identity=self.file_identity,
            line=self.line,
            context_label=self.context_label,
        )
        return data


class SerializeError(PlumarError, ValueError):
    """An in-memory value that the text format cannot express."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCode.SERIALIZE_ERROR)


class ConfigError(PlumarError):
    """A configuration file that cannot be read or used."""

    def __init__(
        self,
        message: str,
        config_path: str,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            f"configuration error: {message}",
            ErrorCode.CONFIG_INVALID,
            [
                f'check the syntax of "{config_path}"',
                "delete the file to regenerate the default configuration",
            ],
            original_error,
        )
        self.config_path = config_path
