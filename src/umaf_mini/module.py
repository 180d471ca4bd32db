from __future__ import annotations

from datetime import datetime
from pathlib import Path

import structlog

from contracts.envelope import Envelope
from contracts.errors import UmafError, internal_error
from envelope.artifacts import serialize_envelope, validate_envelope
from envelope.module import build_envelope
from markdown_emit.module import build_markdown
from prework.data_access import guess_media_type, read_input_bytes
from prework.engines.base import TextExtractionEngine
from prework.module import prepare_payload
from structure.module import parse_semantic_structure

from .config import OutputFormat, TransformConfig
from .errors import as_umaf_error

LOGGER = structlog.get_logger("umaf_mini.pipeline")


def _declared_media_type(config: TransformConfig, source_path: str) -> str:
    if config.media_type is not None:
        return config.media_type
    return guess_media_type(source_path)


def normalize_to_markdown(
    *,
    data: bytes,
    media_type: str,
    extractor: TextExtractionEngine | None = None,
    timeout_s: float = 120.0,
) -> str:
    """Raw bytes -> canonical Markdown (no trailing newline)."""
    payload = prepare_payload(
        data=data, media_type=media_type, extractor=extractor, timeout_s=timeout_s
    )
    model = parse_semantic_structure(payload.normalized, payload.semantic_kind)
    return build_markdown(payload.normalized, payload.semantic_kind, model)


def make_envelope(
    *,
    data: bytes,
    media_type: str,
    source_path: str,
    extractor: TextExtractionEngine | None = None,
    timeout_s: float = 120.0,
    version: str | None = None,
    now: datetime | None = None,
) -> Envelope:
    """Raw bytes -> Envelope. `media_type` is recorded as declared."""
    payload = prepare_payload(
        data=data, media_type=media_type, extractor=extractor, timeout_s=timeout_s
    )
    model = parse_semantic_structure(payload.normalized, payload.semantic_kind)
    kwargs = {} if version is None else {"version": version}
    return build_envelope(
        raw_bytes=data,
        normalized=payload.normalized,
        media_type=media_type,
        source_path=source_path,
        model=model,
        semantic_kind=payload.semantic_kind,
        now=now,
        **kwargs,
    )


def _encode_utf8(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        # Lone surrogates can survive JSON parsing (\ud800 escapes).
        raise internal_error("output is not encodable as UTF-8", {"offset": e.start}) from e


def _run(
    *,
    data: bytes,
    source_path: str,
    media_type: str,
    config: TransformConfig,
    extractor: TextExtractionEngine | None,
    now: datetime | None,
) -> bytes:
    if config.output_format is OutputFormat.MARKDOWN:
        markdown = normalize_to_markdown(
            data=data,
            media_type=media_type,
            extractor=extractor,
            timeout_s=config.extraction_timeout_s,
        )
        return _encode_utf8(markdown)

    env = make_envelope(
        data=data,
        media_type=media_type,
        source_path=source_path,
        extractor=extractor,
        timeout_s=config.extraction_timeout_s,
        version=config.envelope_version,
        now=now,
    )
    if config.validate_schema:
        validate_envelope(env)
    return _encode_utf8(serialize_envelope(env))


def transform_bytes(
    *,
    data: bytes,
    source_path: str,
    config: TransformConfig,
    extractor: TextExtractionEngine | None = None,
    now: datetime | None = None,
) -> bytes:
    """
    Transform one in-memory document into JSON envelope or Markdown bytes.

    All-or-nothing: on failure a UmafError is raised and nothing is returned.
    Without a declared media type, the type is guessed from `source_path`.
    """

    media_type = _declared_media_type(config, source_path)
    log = LOGGER.bind(
        source_path=source_path,
        media_type=media_type,
        output_format=config.output_format.value,
    )
    log.debug("transform started", size_bytes=len(data))

    try:
        out = _run(
            data=data,
            source_path=source_path,
            media_type=media_type,
            config=config,
            extractor=extractor,
            now=now,
        )
    except UmafError as e:
        log.info("transform failed", code=e.code, error=e.message)
        raise
    except Exception as e:
        err = as_umaf_error(e)
        log.error("transform crashed", code=err.code, error=err.message, exc_info=True)
        raise err from e

    log.info("transform finished", out_bytes=len(out))
    return out


def transform_file(
    *,
    path: Path,
    config: TransformConfig,
    extractor: TextExtractionEngine | None = None,
    now: datetime | None = None,
) -> bytes:
    data = read_input_bytes(path)
    return transform_bytes(
        data=data,
        source_path=str(path),
        config=config,
        extractor=extractor,
        now=now,
    )
