from __future__ import annotations

from dataclasses import dataclass, field

from contracts.semantic import (
    SYNTHETIC_SECTION_HEADING,
    Bullet,
    CodeBlock,
    FrontMatterEntry,
    SemanticModel,
    Section,
)
from prework.contracts import MediaKind

from .reflow import reflow_paragraphs
from .tables import detect_tables

FENCE = "```"
FRONT_MATTER_DELIMITER = "---"
MAX_HEADING_LEVEL = 6

_MARKDOWN_BULLET_PREFIXES = ("- ", "* ", "• ")
_PLAIN_BULLET_MARKERS = ("-", "*", "•")


@dataclass(slots=True)
class _SectionCursor:
    """
    Open-section state threaded through the line scan.

    Two states: closed (heading is None) and open. Lines are only
    accumulated while open.
    """

    heading: str | None = None
    level: int = 1
    lines: list[str] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return self.heading is not None

    def append(self, line: str) -> None:
        if self.heading is not None:
            self.lines.append(line)


def flush_current_section(cursor: _SectionCursor) -> tuple[Section | None, _SectionCursor]:
    """Finalize the open section (paragraphs reflowed) and return a closed cursor."""
    if cursor.heading is None:
        return None, _SectionCursor()
    section = Section(
        heading=cursor.heading,
        level=cursor.level,
        lines=list(cursor.lines),
        paragraphs=reflow_paragraphs(cursor.lines),
    )
    return section, _SectionCursor()


@dataclass(slots=True)
class _OpenFence:
    start_line_index: int
    language: str | None
    lines: list[str] = field(default_factory=list)

    def finalize(self) -> CodeBlock:
        return CodeBlock(
            start_line_index=self.start_line_index,
            language=self.language,
            code="\n".join(self.lines),
        )


def strip_outer_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_heading(trimmed: str) -> tuple[int, str] | None:
    """
    Heading: a run of 1-6 `#`. No separator is required (`#B` is a heading).

    Returns (level, text) with one optional separating space removed; text is
    otherwise kept as written.
    """

    if not trimmed.startswith("#"):
        return None
    level = len(trimmed) - len(trimmed.lstrip("#"))
    if level > MAX_HEADING_LEVEL:
        return None
    rest = trimmed[level:]
    return level, (rest[1:] if rest.startswith(" ") else rest)


def is_fence_line(trimmed: str) -> bool:
    return trimmed.startswith(FENCE)


def _fence_language(trimmed: str) -> str | None:
    rest = trimmed.lstrip("` ")
    return rest or None


def _markdown_bullet_text(trimmed: str) -> str | None:
    if trimmed.startswith(_MARKDOWN_BULLET_PREFIXES):
        return trimmed[2:].strip()
    return None


def _plain_bullet_text(line: str) -> str | None:
    stripped = line.lstrip(" \t")
    if not stripped.startswith(_PLAIN_BULLET_MARKERS):
        return None
    text = stripped[1:].lstrip(" \t").strip()
    return text or None


def parse_front_matter(lines: list[str]) -> tuple[list[FrontMatterEntry], int]:
    """
    Leading `---` ... `---` block of `key: value` lines.

    Returns the entries and the index of the first body line. Lines without a
    colon or with an empty key are skipped; an unterminated block runs to the
    end of the document.
    """

    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return [], 0

    entries: list[FrontMatterEntry] = []
    i = 1
    while i < len(lines):
        t = lines[i].strip()
        if t == FRONT_MATTER_DELIMITER:
            i += 1
            break
        if t and ":" in t:
            raw_key, raw_value = t.split(":", 1)
            key = raw_key.strip()
            if key:
                entries.append(FrontMatterEntry(key=key, value=strip_outer_quotes(raw_value.strip())))
        i += 1
    return entries, i


def _parse_plain(all_lines: list[str]) -> SemanticModel:
    bullets: list[Bullet] = []
    for idx, line in enumerate(all_lines):
        text = _plain_bullet_text(line)
        if text is not None:
            bullets.append(
                Bullet(
                    text=text,
                    line_index=idx,
                    section_heading=SYNTHETIC_SECTION_HEADING,
                    section_level=1,
                )
            )

    section = Section(
        heading=SYNTHETIC_SECTION_HEADING,
        level=1,
        lines=list(all_lines),
        paragraphs=reflow_paragraphs(all_lines),
    )
    return SemanticModel(sections=[section], bullets=bullets)


def _parse_markdown(all_lines: list[str]) -> SemanticModel:
    front_matter, body_start = parse_front_matter(all_lines)

    sections: list[Section] = []
    bullets: list[Bullet] = []
    code_blocks: list[CodeBlock] = []
    cursor = _SectionCursor()
    fence: _OpenFence | None = None

    for index in range(body_start, len(all_lines)):
        line = all_lines[index]
        trimmed = line.strip()

        if is_fence_line(trimmed):
            if fence is None:
                fence = _OpenFence(start_line_index=index, language=_fence_language(trimmed))
            else:
                code_blocks.append(fence.finalize())
                fence = None
            cursor.append(line)
            continue

        # Fence state wins over headings, bullets and blank handling.
        if fence is not None:
            fence.lines.append(line)
            cursor.append(line)
            continue

        bullet_text = _markdown_bullet_text(trimmed)
        if bullet_text is not None:
            bullets.append(
                Bullet(
                    text=bullet_text,
                    line_index=index,
                    section_heading=cursor.heading,
                    section_level=cursor.level if cursor.is_open else None,
                )
            )

        if trimmed:
            heading = parse_heading(trimmed)
            if heading is not None:
                finished, cursor = flush_current_section(cursor)
                if finished is not None:
                    sections.append(finished)
                level, text = heading
                cursor = _SectionCursor(heading=text, level=level)
                continue

        cursor.append(line)

    # An unterminated fence never becomes a CodeBlock; its lines stay in the section.
    finished, cursor = flush_current_section(cursor)
    if finished is not None:
        sections.append(finished)

    return SemanticModel(
        sections=sections,
        bullets=bullets,
        front_matter=front_matter,
        tables=detect_tables(all_lines, body_start),
        code_blocks=code_blocks,
    )


def _as_media_kind(media_kind: MediaKind | str) -> MediaKind:
    try:
        return MediaKind(media_kind)
    except ValueError:
        return MediaKind.PLAIN


def parse_semantic_structure(text: str, media_kind: MediaKind | str) -> SemanticModel:
    """
    Extract sections, bullets, front matter, tables and code blocks from normalized text.

    - JSON: nothing is extracted (empty model).
    - Markdown: front matter, fenced code, ATX headings, bullets, pipe tables.
      Lines before the first heading belong to no section but are still
      scanned for bullets and tables.
    - Anything else: plain text, one synthetic "Document" section.

    Line indexes refer to `text.split("\\n")`.
    """

    kind = _as_media_kind(media_kind)
    if kind == MediaKind.JSON:
        return SemanticModel.empty()

    all_lines = text.split("\n")
    if kind == MediaKind.MARKDOWN:
        return _parse_markdown(all_lines)
    return _parse_plain(all_lines)
