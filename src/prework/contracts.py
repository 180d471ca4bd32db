from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MediaKind(str, Enum):
    """
    Logical content types the core parses directly.

    Anything else reaches the core only as text already extracted by an
    external engine, and is then parsed as one of these kinds.
    """

    PLAIN = "text/plain"
    MARKDOWN = "text/markdown"
    JSON = "application/json"


HTML_MEDIA_TYPE = "text/html"
PDF_MEDIA_TYPE = "application/pdf"
RTF_MEDIA_TYPE = "application/rtf"
MSWORD_MEDIA_TYPE = "application/msword"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# Declared media type -> kind the extracted text is parsed as.
EXTRACTED_MEDIA_KINDS: dict[str, MediaKind] = {
    PDF_MEDIA_TYPE: MediaKind.MARKDOWN,
    RTF_MEDIA_TYPE: MediaKind.PLAIN,
    MSWORD_MEDIA_TYPE: MediaKind.PLAIN,
    DOCX_MEDIA_TYPE: MediaKind.PLAIN,
}

MEDIA_TYPES_BY_EXTENSION: dict[str, str] = {
    ".md": MediaKind.MARKDOWN.value,
    ".markdown": MediaKind.MARKDOWN.value,
    ".json": MediaKind.JSON.value,
    ".txt": MediaKind.PLAIN.value,
    ".html": HTML_MEDIA_TYPE,
    ".htm": HTML_MEDIA_TYPE,
    ".pdf": PDF_MEDIA_TYPE,
    ".rtf": RTF_MEDIA_TYPE,
    ".doc": MSWORD_MEDIA_TYPE,
    ".docx": DOCX_MEDIA_TYPE,
}


@dataclass(frozen=True, slots=True)
class PreparedPayload:
    media_type: str  # as declared by the caller
    semantic_kind: MediaKind  # drives the structure parser and emitter
    normalized: str


class ExtractionError(Exception):
    """Failure reported by an external text-extraction engine."""

    def __init__(self, code: str, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail
