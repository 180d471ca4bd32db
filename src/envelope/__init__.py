"""
Stage 2b - JSON envelope construction.

Raw bytes + normalized text + SemanticModel -> Envelope, plus deterministic
serialization and validation against the published JSON Schema.
"""

from .artifacts import (
    load_envelope_schema,
    serialize_envelope,
    validate_envelope,
    validate_envelope_payload,
    write_envelope_json,
)
from .module import (
    build_envelope,
    compute_doc_id,
    compute_source_hash,
    count_lines,
    first_markdown_heading_title,
)

__all__ = [
    "build_envelope",
    "compute_doc_id",
    "compute_source_hash",
    "count_lines",
    "first_markdown_heading_title",
    "load_envelope_schema",
    "serialize_envelope",
    "validate_envelope",
    "validate_envelope_payload",
    "write_envelope_json",
]
