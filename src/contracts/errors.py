from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """
    User-facing failure categories.

    Codes and exit codes are stable: automation branches on them.
    """

    BAD_ENCODING = "UMAF_BAD_ENCODING"
    UNSUPPORTED_MEDIA_TYPE = "UMAF_UNSUPPORTED_MEDIA_TYPE"
    SCHEMA_MISMATCH = "UMAF_SCHEMA_MISMATCH"
    INVALID_JSON = "UMAF_INVALID_JSON"
    INVALID_MARKDOWN = "UMAF_INVALID_MARKDOWN"
    IO_ERROR = "UMAF_IO_ERROR"
    INTERNAL_ERROR = "UMAF_INTERNAL_ERROR"

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self]

    @property
    def user_message(self) -> str:
        return _USER_MESSAGES[self]


_EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.BAD_ENCODING: 10,
    ErrorKind.UNSUPPORTED_MEDIA_TYPE: 11,
    ErrorKind.SCHEMA_MISMATCH: 12,
    ErrorKind.INVALID_JSON: 13,
    ErrorKind.INVALID_MARKDOWN: 14,
    ErrorKind.IO_ERROR: 15,
    ErrorKind.INTERNAL_ERROR: 20,
}

_USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.BAD_ENCODING: "Input isn't valid UTF-8. Convert the file to UTF-8 and retry.",
    ErrorKind.UNSUPPORTED_MEDIA_TYPE: "This file type isn't supported yet. Try .txt, .md or .json.",
    ErrorKind.SCHEMA_MISMATCH: (
        "Output failed schema validation. Please file a bug with the failing file."
    ),
    ErrorKind.INVALID_JSON: "Couldn't parse JSON. Check for trailing commas or mismatched braces.",
    ErrorKind.INVALID_MARKDOWN: "Markdown parse failed. Check code fences and table formatting.",
    ErrorKind.IO_ERROR: "Couldn't read or write the file. Check the path and permissions.",
    ErrorKind.INTERNAL_ERROR: "Something went wrong. Try again or report this with the repro file.",
}


class UmafError(Exception):
    """
    Typed pipeline failure.

    `message` is the internal diagnostic; `user_message` is the short,
    actionable text shown to people. No partial output accompanies an error.
    """

    def __init__(self, kind: ErrorKind, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def exit_code(self) -> int:
        return self.kind.exit_code

    @property
    def user_message(self) -> str:
        return self.kind.user_message

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }

    def __repr__(self) -> str:
        return f"UmafError({self.kind.name}, {self.message!r})"


def bad_encoding(message: str, detail: dict[str, Any] | None = None) -> UmafError:
    return UmafError(ErrorKind.BAD_ENCODING, message, detail)


def unsupported_media_type(media_type: str) -> UmafError:
    return UmafError(
        ErrorKind.UNSUPPORTED_MEDIA_TYPE,
        f"Unsupported media type: {media_type}",
        {"media_type": media_type},
    )


def invalid_json(message: str, detail: dict[str, Any] | None = None) -> UmafError:
    return UmafError(ErrorKind.INVALID_JSON, f"Invalid JSON: {message}", detail)


def schema_mismatch(message: str, detail: dict[str, Any] | None = None) -> UmafError:
    return UmafError(
        ErrorKind.SCHEMA_MISMATCH, f"Envelope didn't match the UMAF Mini schema: {message}", detail
    )


def io_error(message: str, detail: dict[str, Any] | None = None) -> UmafError:
    return UmafError(ErrorKind.IO_ERROR, f"I/O error: {message}", detail)


def internal_error(message: str, detail: dict[str, Any] | None = None) -> UmafError:
    return UmafError(ErrorKind.INTERNAL_ERROR, f"Unexpected internal error: {message}", detail)
