from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

SYNTHETIC_SECTION_HEADING = "Document"


@dataclass(frozen=True, slots=True)
class Section:
    heading: str
    level: int  # heading depth; clamped to 1..6 on emission only
    lines: list[str]  # raw body lines, heading line excluded
    paragraphs: list[str]

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Section":
        return Section(
            heading=str(d["heading"]),
            level=int(d["level"]),
            lines=[str(x) for x in d.get("lines", [])],
            paragraphs=[str(x) for x in d.get("paragraphs", [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "heading": self.heading,
            "level": self.level,
            "lines": list(self.lines),
            "paragraphs": list(self.paragraphs),
        }


@dataclass(frozen=True, slots=True)
class Bullet:
    text: str
    line_index: int  # 0-based index into the normalized text lines
    section_heading: str | None = None
    section_level: int | None = None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Bullet":
        return Bullet(
            text=str(d["text"]),
            line_index=int(d["lineIndex"]),
            section_heading=(None if d.get("sectionHeading") is None else str(d["sectionHeading"])),
            section_level=(None if d.get("sectionLevel") is None else int(d["sectionLevel"])),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"text": self.text, "lineIndex": self.line_index}
        # Absent owners are omitted from the wire shape, never emitted as null.
        if self.section_heading is not None:
            out["sectionHeading"] = self.section_heading
        if self.section_level is not None:
            out["sectionLevel"] = self.section_level
        return out


@dataclass(frozen=True, slots=True)
class FrontMatterEntry:
    key: str
    value: str

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "FrontMatterEntry":
        return FrontMatterEntry(key=str(d["key"]), value=str(d["value"]))

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "value": self.value}


@dataclass(frozen=True, slots=True)
class Table:
    start_line_index: int
    header: list[str]
    rows: list[list[str]]

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Table":
        return Table(
            start_line_index=int(d["startLineIndex"]),
            header=[str(x) for x in d.get("header", [])],
            rows=[[str(c) for c in row] for row in d.get("rows", [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "startLineIndex": self.start_line_index,
            "header": list(self.header),
            "rows": [list(row) for row in self.rows],
        }


@dataclass(frozen=True, slots=True)
class CodeBlock:
    start_line_index: int
    language: str | None
    code: str  # captured lines joined with "\n", byte-for-byte

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "CodeBlock":
        return CodeBlock(
            start_line_index=int(d["startLineIndex"]),
            language=(None if d.get("language") is None else str(d["language"])),
            code=str(d.get("code", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"startLineIndex": self.start_line_index, "code": self.code}
        if self.language is not None:
            out["language"] = self.language
        return out


@dataclass(frozen=True, slots=True)
class SemanticModel:
    """
    Parser output handed to exactly one consumer (Markdown emitter or envelope builder).

    Collections keep source order; nothing here is sorted after parsing.
    """

    sections: list[Section] = field(default_factory=list)
    bullets: list[Bullet] = field(default_factory=list)
    front_matter: list[FrontMatterEntry] = field(default_factory=list)
    tables: list[Table] = field(default_factory=list)
    code_blocks: list[CodeBlock] = field(default_factory=list)

    @staticmethod
    def empty() -> "SemanticModel":
        return SemanticModel()

    def to_dict(self) -> dict[str, Any]:
        return {
            "sections": [s.to_dict() for s in self.sections],
            "bullets": [b.to_dict() for b in self.bullets],
            "frontMatter": [e.to_dict() for e in self.front_matter],
            "tables": [t.to_dict() for t in self.tables],
            "codeBlocks": [c.to_dict() for c in self.code_blocks],
        }
