from __future__ import annotations

# Indentation units per leading whitespace character.
_INDENT_UNITS = {" ": 1, "\t": 2}


def leading_indent_width(line: str) -> int:
    width = 0
    for ch in line:
        units = _INDENT_UNITS.get(ch)
        if units is None:
            break
        width += units
    return width


def _strip_indent(line: str, width: int) -> str:
    consumed = 0
    i = 0
    while i < len(line) and consumed < width:
        units = _INDENT_UNITS.get(line[i])
        if units is None:
            break
        consumed += units
        i += 1
    return line[i:]


def _is_blank(line: str) -> bool:
    return not line.strip()


def _flush_run(run: list[str]) -> str:
    common = min(leading_indent_width(line) for line in run)
    if common > 0:
        run = [_strip_indent(line, common) for line in run]
    return "\n".join(run)


def reflow_paragraphs(lines: list[str]) -> list[str]:
    """
    Split `lines` into blank-separated runs and join each run into one paragraph.

    The smallest leading indentation of a run (space = 1 unit, tab = 2 units)
    is removed from every line in it, character by character, stopping early
    on a line that has less. Runs keep their original order.
    """

    paragraphs: list[str] = []
    run: list[str] = []
    for line in lines:
        if _is_blank(line):
            if run:
                paragraphs.append(_flush_run(run))
                run = []
            continue
        run.append(line)
    if run:
        paragraphs.append(_flush_run(run))
    return paragraphs
