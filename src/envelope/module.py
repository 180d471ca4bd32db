from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from pathlib import PurePath

from contracts.envelope import ENVELOPE_ENCODING, ENVELOPE_VERSION, Envelope
from contracts.semantic import SemanticModel
from prework.contracts import MediaKind

DOC_ID_HEX_CHARS = 12


def compute_source_hash(raw_bytes: bytes) -> str:
    """Lowercase SHA-256 hex of the original bytes (not the normalized text)."""
    return hashlib.sha256(raw_bytes).hexdigest()


def compute_doc_id(source_hash: str) -> str:
    """
    Deterministic doc_id: the first 12 hex characters of the source hash.

    Stable for identical input bytes, independent of source path and time.
    """

    return source_hash[:DOC_ID_HEX_CHARS]


def first_markdown_heading_title(text: str) -> str | None:
    """
    Text of the first line (after trimming) that starts with one or more `#`
    and has a non-empty remainder. Depth is not limited here.
    """

    for raw in text.split("\n"):
        trimmed = raw.strip()
        if not trimmed.startswith("#"):
            continue
        rest = trimmed.lstrip("#")
        if rest.startswith(" "):
            rest = rest[1:]
        title = rest.strip()
        if title:
            return title
    return None


def title_from_source_path(source_path: str) -> str:
    # PurePath handles both "/a/b.md" and bare names; stem drops one extension.
    name = PurePath(source_path.replace("\\", "/")).name
    return PurePath(name).stem if name else source_path


def count_lines(normalized: str) -> int:
    """Segments of `normalized.split("\\n")`; a trailing newline adds an empty one."""
    return normalized.count("\n") + 1


def iso8601_utc(now: datetime | None = None) -> str:
    moment = now if now is not None else datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc).replace(microsecond=0)
    return moment.isoformat().replace("+00:00", "Z")


def build_envelope(
    *,
    raw_bytes: bytes,
    normalized: str,
    media_type: str,
    source_path: str,
    model: SemanticModel,
    semantic_kind: MediaKind | str,
    version: str = ENVELOPE_VERSION,
    now: datetime | None = None,
) -> Envelope:
    """
    Assemble the envelope for one document.

    Identity (`source_hash`, `doc_id`) and `size_bytes` come from the raw
    bytes so that normalization never changes them. The title is the first
    heading only when the text was parsed as Markdown, else the file stem.
    `created_at` is the only non-deterministic field.
    """

    source_hash = compute_source_hash(raw_bytes)
    doc_title = None
    if semantic_kind == MediaKind.MARKDOWN:
        doc_title = first_markdown_heading_title(normalized)
    if doc_title is None:
        doc_title = title_from_source_path(source_path)

    return Envelope(
        version=version,
        doc_title=doc_title,
        doc_id=compute_doc_id(source_hash),
        created_at=iso8601_utc(now),
        source_hash=source_hash,
        source_path=source_path,
        media_type=media_type,
        encoding=ENVELOPE_ENCODING,
        size_bytes=len(raw_bytes),
        line_count=count_lines(normalized),
        normalized=normalized,
        sections=list(model.sections),
        bullets=list(model.bullets),
        front_matter=list(model.front_matter),
        tables=list(model.tables),
        code_blocks=list(model.code_blocks),
    )
