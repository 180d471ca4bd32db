from __future__ import annotations

from ..contracts import ExtractionError
from .base import TextExtractionEngine


class CompositeExtractionEngine(TextExtractionEngine):
    """Dispatch to the first engine that supports the declared media type."""

    def __init__(self, engines: list[TextExtractionEngine]) -> None:
        self.engines = list(engines)

    def backend_id(self) -> str:
        return "+".join(e.backend_id() for e in self.engines) or "none"

    def supports(self, media_type: str) -> bool:
        return any(e.supports(media_type) for e in self.engines)

    def extract_text(self, *, data: bytes, media_type: str, timeout_s: float) -> str:
        for engine in self.engines:
            if engine.supports(media_type):
                return engine.extract_text(data=data, media_type=media_type, timeout_s=timeout_s)
        raise ExtractionError(
            code="EXTRACT_UNSUPPORTED_MEDIA_TYPE",
            message=f"No extraction engine for {media_type}",
            detail={"media_type": media_type, "backends": [e.backend_id() for e in self.engines]},
        )
