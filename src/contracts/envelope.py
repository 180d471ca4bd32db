from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .semantic import Bullet, CodeBlock, FrontMatterEntry, SemanticModel, Section, Table

ENVELOPE_VERSION = "umaf-mini-0.4.1"
ENVELOPE_ENCODING = "utf-8"


@dataclass(frozen=True, slots=True)
class Envelope:
    """
    Structured JSON summary of one document, keyed by the hash of its raw bytes.

    Every field except `created_at` is a pure function of
    (raw bytes, declared media type, source path).
    """

    version: str
    doc_title: str
    doc_id: str
    created_at: str  # ISO-8601, wall clock at build time
    source_hash: str  # lowercase SHA-256 hex of the raw input bytes
    source_path: str
    media_type: str  # declared media type, not re-validated
    encoding: str
    size_bytes: int  # length of the raw input bytes
    line_count: int
    normalized: str
    sections: list[Section]
    bullets: list[Bullet]
    front_matter: list[FrontMatterEntry]
    tables: list[Table]
    code_blocks: list[CodeBlock]

    @property
    def model(self) -> SemanticModel:
        return SemanticModel(
            sections=self.sections,
            bullets=self.bullets,
            front_matter=self.front_matter,
            tables=self.tables,
            code_blocks=self.code_blocks,
        )

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Envelope":
        return Envelope(
            version=str(d["version"]),
            doc_title=str(d["docTitle"]),
            doc_id=str(d["docId"]),
            created_at=str(d["createdAt"]),
            source_hash=str(d["sourceHash"]),
            source_path=str(d["sourcePath"]),
            media_type=str(d["mediaType"]),
            encoding=str(d["encoding"]),
            size_bytes=int(d["sizeBytes"]),
            line_count=int(d["lineCount"]),
            normalized=str(d["normalized"]),
            sections=[Section.from_dict(x) for x in d.get("sections", [])],
            bullets=[Bullet.from_dict(x) for x in d.get("bullets", [])],
            front_matter=[FrontMatterEntry.from_dict(x) for x in d.get("frontMatter", [])],
            tables=[Table.from_dict(x) for x in d.get("tables", [])],
            code_blocks=[CodeBlock.from_dict(x) for x in d.get("codeBlocks", [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "docTitle": self.doc_title,
            "docId": self.doc_id,
            "createdAt": self.created_at,
            "sourceHash": self.source_hash,
            "sourcePath": self.source_path,
            "mediaType": self.media_type,
            "encoding": self.encoding,
            "sizeBytes": self.size_bytes,
            "lineCount": self.line_count,
            "normalized": self.normalized,
            **self.model.to_dict(),
        }
