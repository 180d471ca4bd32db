"""
Stage 2a - Canonical Markdown emission.

SemanticModel -> Markdown text, finished by a whitespace/blank-line pass that
is idempotent and leaves fenced code byte-for-byte intact.
"""

from .canonicalize import canonicalize_markdown, canonicalize_markdown_lines, is_list_item
from .module import build_markdown, heading_line

__all__ = [
    "build_markdown",
    "canonicalize_markdown",
    "canonicalize_markdown_lines",
    "heading_line",
    "is_list_item",
]
