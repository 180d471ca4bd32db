"""
External text-extraction engines.

The core never calls these directly; callers inject an engine into
`prework.prepare_payload`, so tests can substitute a stub.
"""

from .base import TextExtractionEngine
from .composite import CompositeExtractionEngine
from .pypdfium2_engine import Pypdfium2TextEngine
from .textutil_cli import TextutilCliEngine


def default_extraction_engine() -> CompositeExtractionEngine:
    return CompositeExtractionEngine([Pypdfium2TextEngine(), TextutilCliEngine()])


__all__ = [
    "CompositeExtractionEngine",
    "Pypdfium2TextEngine",
    "TextExtractionEngine",
    "TextutilCliEngine",
    "default_extraction_engine",
]
