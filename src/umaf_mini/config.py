from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from contracts.envelope import ENVELOPE_VERSION


class OutputFormat(str, Enum):
    JSON = "json"
    MARKDOWN = "markdown"


@dataclass(frozen=True, slots=True)
class TransformConfig:
    """
    One transform's settings.

    - Passed explicitly by the caller; no environment variable reads.
    - `media_type=None` means "guess from the path" (file transforms only).
    """

    output_format: OutputFormat = OutputFormat.JSON
    media_type: str | None = None
    envelope_version: str = ENVELOPE_VERSION
    validate_schema: bool = True
    extraction_timeout_s: float = 120.0

    def __post_init__(self) -> None:
        if not isinstance(self.output_format, OutputFormat):
            raise TypeError("output_format must be an OutputFormat")
        if self.media_type is not None and not self.media_type.strip():
            raise ValueError("media_type must be non-empty when given")
        if not self.envelope_version:
            raise ValueError("envelope_version must be non-empty")
        if self.extraction_timeout_s <= 0:
            raise ValueError("extraction_timeout_s must be positive")
