"""
Canonical, authoritative document contracts.

These models are the schema boundary between stages:
- `structure` produces a SemanticModel
- `markdown_emit` and `envelope` consume it (exactly one consumer per run)
- `envelope` wraps it into the published Envelope shape

Stage code should consume/produce these contract objects (not ad-hoc dicts).
"""

from .envelope import ENVELOPE_ENCODING, ENVELOPE_VERSION, Envelope
from .errors import ErrorKind, UmafError
from .semantic import (
    SYNTHETIC_SECTION_HEADING,
    Bullet,
    CodeBlock,
    FrontMatterEntry,
    SemanticModel,
    Section,
    Table,
)

__all__ = [
    "ENVELOPE_ENCODING",
    "ENVELOPE_VERSION",
    "SYNTHETIC_SECTION_HEADING",
    "Bullet",
    "CodeBlock",
    "Envelope",
    "ErrorKind",
    "FrontMatterEntry",
    "SemanticModel",
    "Section",
    "Table",
    "UmafError",
]
