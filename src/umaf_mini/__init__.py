"""
UMAF Mini - deterministic document normalization.

Pipeline: raw bytes -> prework (normalized text) -> structure (SemanticModel)
-> markdown_emit (canonical Markdown) or envelope (JSON envelope).

The transform is all-or-nothing: every failure surfaces as a typed
`UmafError` with a stable code and exit code.
"""

from contracts.errors import ErrorKind, UmafError

from .config import OutputFormat, TransformConfig
from .errors import as_umaf_error
from .logging_config import configure_logging
from .module import make_envelope, normalize_to_markdown, transform_bytes, transform_file

__all__ = [
    "ErrorKind",
    "OutputFormat",
    "TransformConfig",
    "UmafError",
    "as_umaf_error",
    "configure_logging",
    "make_envelope",
    "normalize_to_markdown",
    "transform_bytes",
    "transform_file",
]
