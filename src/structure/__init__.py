"""
Stage 1 - Deterministic structural extraction.

Normalized text -> SemanticModel (sections, bullets, front matter, tables,
code blocks). Single pass over the lines plus an independent table pass.

No I/O, no logging, no cross-call state.
"""

from .module import (
    flush_current_section,
    parse_front_matter,
    parse_heading,
    parse_semantic_structure,
)
from .reflow import leading_indent_width, reflow_paragraphs
from .tables import detect_tables, split_pipe_cells

__all__ = [
    "detect_tables",
    "flush_current_section",
    "leading_indent_width",
    "parse_front_matter",
    "parse_heading",
    "parse_semantic_structure",
    "reflow_paragraphs",
    "split_pipe_cells",
]
