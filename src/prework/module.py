from __future__ import annotations

import json
import re
from typing import Any

import structlog

from contracts.errors import bad_encoding, invalid_json, io_error, unsupported_media_type

from .contracts import (
    EXTRACTED_MEDIA_KINDS,
    HTML_MEDIA_TYPE,
    ExtractionError,
    MediaKind,
    PreparedPayload,
)
from .engines.base import TextExtractionEngine

LOGGER = structlog.get_logger("umaf_mini.prework")

_BR_TAG = re.compile(r"<br\s*/?\s*>", re.IGNORECASE)
_H1_PAIR = re.compile(r"<h1(?:\s[^>]*)?>(.*?)</h1\s*>", re.IGNORECASE | re.DOTALL)
_H2_PAIR = re.compile(r"<h2(?:\s[^>]*)?>(.*?)</h2\s*>", re.IGNORECASE | re.DOTALL)
_LI_PAIR = re.compile(r"<li(?:\s[^>]*)?>(.*?)</li\s*>", re.IGNORECASE | re.DOTALL)
_ANY_TAG = re.compile(r"<[^>]+>")
_MANY_NEWLINES = re.compile(r"\n{3,}")


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def html_to_markdownish(html: str) -> str:
    """
    Best-effort HTML -> Markdown-ish text.

    Only <br>, <h1>, <h2> and <li> carry structure over; every other tag is
    dropped and its text kept. Entities are left untouched.
    """

    text = normalize_line_endings(html)
    text = _BR_TAG.sub("\n", text)
    text = _H1_PAIR.sub(lambda m: f"\n# {m.group(1)}\n\n", text)
    text = _H2_PAIR.sub(lambda m: f"\n## {m.group(1)}\n\n", text)
    text = _LI_PAIR.sub(lambda m: f"\n- {m.group(1)}\n", text)
    text = _ANY_TAG.sub("", text)
    text = _MANY_NEWLINES.sub("\n\n", text)
    return text.strip()


def decode_utf8(data: bytes) -> str:
    """
    Strict UTF-8 decode. A leading byte-order mark is dropped so that
    front-matter and heading detection see the first real character.
    """

    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise bad_encoding(
            "The input contains bytes that are not valid UTF-8.",
            {"offset": e.start, "reason": e.reason},
        ) from e


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name!r}")


def canonicalize_json(data: bytes) -> str:
    """
    Parse JSON bytes and re-serialize deterministically (sorted keys, 2-space indent).

    Encoding detection follows the JSON standard (UTF-8/16/32), so JSON input
    is validated by parsing rather than by the UTF-8 check.
    """

    try:
        obj = json.loads(data, parse_constant=_reject_constant)
    except RecursionError as e:
        raise invalid_json("nesting too deep") from e
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
        raise invalid_json(str(e)) from e

    return json.dumps(obj, ensure_ascii=False, sort_keys=True, indent=2)


def _extract(
    *, data: bytes, media_type: str, extractor: TextExtractionEngine | None, timeout_s: float
) -> str:
    if extractor is None or not extractor.supports(media_type):
        raise unsupported_media_type(media_type)

    try:
        text = extractor.extract_text(data=data, media_type=media_type, timeout_s=timeout_s)
    except ExtractionError as e:
        raise io_error(
            e.message,
            {"extraction_code": e.code, "backend": extractor.backend_id(), **(e.detail or {})},
        ) from e

    LOGGER.debug(
        "text extracted",
        media_type=media_type,
        backend=extractor.backend_id(),
        chars=len(text),
    )
    return normalize_line_endings(text)


def prepare_payload(
    *,
    data: bytes,
    media_type: str,
    extractor: TextExtractionEngine | None = None,
    timeout_s: float = 120.0,
) -> PreparedPayload:
    """
    Raw bytes + declared media type -> normalized text + the kind it is parsed as.

    Text kinds are decoded here; binary office/PDF kinds go through the
    injected extraction engine. Unknown media types fail immediately.
    """

    if media_type == MediaKind.JSON.value:
        return PreparedPayload(
            media_type=media_type,
            semantic_kind=MediaKind.JSON,
            normalized=canonicalize_json(data),
        )

    if media_type in (MediaKind.MARKDOWN.value, MediaKind.PLAIN.value):
        return PreparedPayload(
            media_type=media_type,
            semantic_kind=MediaKind(media_type),
            normalized=normalize_line_endings(decode_utf8(data)),
        )

    if media_type == HTML_MEDIA_TYPE:
        return PreparedPayload(
            media_type=media_type,
            semantic_kind=MediaKind.MARKDOWN,
            normalized=html_to_markdownish(decode_utf8(data)),
        )

    kind = EXTRACTED_MEDIA_KINDS.get(media_type)
    if kind is None:
        raise unsupported_media_type(media_type)

    text = _extract(data=data, media_type=media_type, extractor=extractor, timeout_s=timeout_s)
    return PreparedPayload(media_type=media_type, semantic_kind=kind, normalized=text)
