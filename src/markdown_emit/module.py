from __future__ import annotations

from contracts.semantic import SYNTHETIC_SECTION_HEADING, Bullet, SemanticModel, Section
from prework.contracts import MediaKind
from structure.module import (
    FRONT_MATTER_DELIMITER,
    parse_front_matter,
    parse_semantic_structure,
    strip_outer_quotes,
)
from structure.reflow import leading_indent_width, reflow_paragraphs

from .canonicalize import canonicalize_markdown_lines

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6


def heading_line(section: Section) -> str:
    level = min(max(section.level, MIN_HEADING_LEVEL), MAX_HEADING_LEVEL)
    return f"{'#' * level} {section.heading.strip()}"


def fenced(payload: str, language: str) -> str:
    return "\n".join([f"```{language}", payload, "```"])


def _synthetic_section(lines: list[str]) -> Section:
    return Section(
        heading=SYNTHETIC_SECTION_HEADING,
        level=1,
        lines=lines,
        paragraphs=reflow_paragraphs(lines),
    )


def _front_matter_value(value: str) -> str:
    # Quote whenever the parser's trim/unquote would not hand back `value` as-is.
    if value == value.strip() and strip_outer_quotes(value) == value:
        return value
    quote = "'" if '"' in value else '"'
    return f"{quote}{value}{quote}"


def _front_matter_lines(model: SemanticModel) -> list[str]:
    if not model.front_matter:
        return []
    return [
        FRONT_MATTER_DELIMITER,
        *(f"{e.key}: {_front_matter_value(e.value)}" for e in model.front_matter),
        FRONT_MATTER_DELIMITER,
        "",
    ]


def _has_block_content(model: SemanticModel, first_line: int) -> bool:
    return any(t.start_line_index >= first_line for t in model.tables) or any(
        c.start_line_index >= first_line for c in model.code_blocks
    )


def _emit_markdown(payload: str, model: SemanticModel) -> str:
    payload_lines = payload.split("\n")

    if not model.front_matter and not model.sections:
        canonical = canonicalize_markdown_lines(payload_lines)
        if not canonical or canonical[0].strip() != FRONT_MATTER_DELIMITER:
            return "\n".join(canonical)
        # A leading "---" would be read back as front matter; pin it under a heading.
        wrapped = "\n".join([f"# {SYNTHETIC_SECTION_HEADING}", "", *canonical])
        return _emit_markdown(wrapped, parse_semantic_structure(wrapped, MediaKind.MARKDOWN))

    if model.sections:
        sections = model.sections
        # Every line from the first heading on belongs to exactly one section.
        first_line = len(payload_lines) - sum(1 + len(s.lines) for s in sections)
    else:
        _, first_line = parse_front_matter(payload_lines)
        sections = [_synthetic_section(payload_lines[first_line:])]

    lines = _front_matter_lines(model)
    # Tables and fences only survive verbatim, so their presence in any emitted
    # section switches every section to raw-line output. Lines before the first
    # heading are not emitted and do not count.
    verbatim = _has_block_content(model, first_line)

    for idx, section in enumerate(sections):
        lines.append(heading_line(section))

        if not verbatim and section.paragraphs:
            lines.append("")
            for p_idx, paragraph in enumerate(section.paragraphs):
                lines.extend(paragraph.split("\n"))
                if p_idx != len(section.paragraphs) - 1:
                    lines.append("")
        elif section.lines:
            lines.append("")
            lines.extend(section.lines)

        if idx != len(sections) - 1:
            lines.append("")

    return "\n".join(canonicalize_markdown_lines(lines))


def _document_bullets(model: SemanticModel) -> dict[int, Bullet]:
    by_line: dict[int, Bullet] = {}
    for bullet in model.bullets:
        if bullet.section_heading in (SYNTHETIC_SECTION_HEADING, None):
            by_line.setdefault(bullet.line_index, bullet)
    return by_line


def _emit_plain(payload: str, model: SemanticModel) -> str:
    if not model.sections:
        return fenced(payload, "text")

    doc = model.sections[0]
    lines = [heading_line(doc), ""]

    bullets = _document_bullets(model)
    indents = [
        leading_indent_width(doc.lines[idx]) for idx in bullets if 0 <= idx < len(doc.lines)
    ]
    base_indent = min(indents, default=0)

    i = 0
    while i < len(doc.lines):
        if i in bullets:
            j = i
            while j < len(doc.lines) and j in bullets:
                # Best-effort nesting: two indentation units per level.
                extra = max(leading_indent_width(doc.lines[j]) - base_indent, 0)
                lines.append(f"{'  ' * (extra // 2)}- {bullets[j].text}")
                j += 1
            lines.append("")
            i = j
            continue

        line = doc.lines[i]
        lines.append(line)
        if not line.strip():
            while i + 1 < len(doc.lines) and not doc.lines[i + 1].strip():
                i += 1
        i += 1

    return "\n".join(canonicalize_markdown_lines(lines))


def build_markdown(
    normalized_payload: str, media_kind: MediaKind | str, model: SemanticModel
) -> str:
    """
    Canonical Markdown for a parsed document.

    - JSON: the normalized payload in a ```json fence.
    - Markdown: front matter, then one heading per section followed by either
      reflowed paragraphs or, when the document has tables/code, the raw
      section lines. Without front matter or headings the payload itself is
      canonicalized.
    - Anything else: "# Document" plus the body with bullets rebuilt as a
      nested list; falls back to a ```text fence without a section.

    Output is routed through `canonicalize_markdown_lines` (except the fenced
    fallbacks) and has no trailing newline.
    """

    kind = media_kind.value if isinstance(media_kind, MediaKind) else media_kind
    if kind == MediaKind.JSON.value:
        return fenced(normalized_payload, "json")
    if kind == MediaKind.MARKDOWN.value:
        return _emit_markdown(normalized_payload, model)
    return _emit_plain(normalized_payload, model)
