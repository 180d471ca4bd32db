"""
Stage 0 - Text preprocessing (raw bytes -> normalized UTF-8 text).

This package is intentionally limited to format normalization:
- It canonicalizes line endings and re-serializes JSON deterministically.
- It turns HTML into Markdown-ish text (best effort, tag stripping).
- It delegates binary formats (PDF, RTF, DOC, DOCX) to an injected engine.
- It performs NO structural parsing.
"""

from .contracts import (
    DOCX_MEDIA_TYPE,
    HTML_MEDIA_TYPE,
    MSWORD_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    RTF_MEDIA_TYPE,
    ExtractionError,
    MediaKind,
    PreparedPayload,
)
from .data_access import guess_media_type, read_input_bytes, write_output_bytes
from .module import (
    canonicalize_json,
    decode_utf8,
    html_to_markdownish,
    normalize_line_endings,
    prepare_payload,
)

__all__ = [
    "DOCX_MEDIA_TYPE",
    "HTML_MEDIA_TYPE",
    "MSWORD_MEDIA_TYPE",
    "PDF_MEDIA_TYPE",
    "RTF_MEDIA_TYPE",
    "ExtractionError",
    "MediaKind",
    "PreparedPayload",
    "canonicalize_json",
    "decode_utf8",
    "guess_media_type",
    "html_to_markdownish",
    "normalize_line_endings",
    "prepare_payload",
    "read_input_bytes",
    "write_output_bytes",
]
