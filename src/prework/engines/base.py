from __future__ import annotations

from abc import ABC, abstractmethod


class TextExtractionEngine(ABC):
    """
    External text-extraction collaborator (binary document -> UTF-8 text).

    Engines must:
    - Return the extracted text only; line endings may be left as-is
    - Be deterministic for a given input
    - Raise ExtractionError on failure (never return partial text)
    - Perform NO structural parsing or Markdown canonicalization
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    def backend_version(self) -> str | None:
        return None

    @abstractmethod
    def supports(self, media_type: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def extract_text(self, *, data: bytes, media_type: str, timeout_s: float) -> str:
        raise NotImplementedError
