from __future__ import annotations

import re

FENCE = "```"

_BULLET_PREFIXES = ("- ", "* ", "+ ")
_NUMBERED_ITEM = re.compile(r"^\d+\. ")


def is_list_item(line: str) -> bool:
    t = line.strip()
    return t.startswith(_BULLET_PREFIXES) or _NUMBERED_ITEM.match(t) is not None


def _rstrip_ws(line: str) -> str:
    return line.rstrip(" \t")


def _is_blank(line: str) -> bool:
    return not line.strip()


def _next_non_blank_table(lines: list[str]) -> list[str | None]:
    """For each index, the nearest non-blank line strictly after it (fence state ignored)."""
    table: list[str | None] = [None] * len(lines)
    upcoming: str | None = None
    for i in range(len(lines) - 1, -1, -1):
        table[i] = upcoming
        if not _is_blank(lines[i]):
            upcoming = lines[i]
    return table


def canonicalize_markdown_lines(lines: list[str]) -> list[str]:
    """
    Final whitespace pass over emitted Markdown lines.

    - Fence delimiters: trailing whitespace trimmed, fence state toggled.
    - Inside a fence: lines pass through byte-for-byte.
    - Outside: trailing spaces/tabs trimmed; a blank line is dropped when it
      sits between two list items or directly follows another blank.
    - Leading and trailing empty lines are removed.

    Idempotent: canonicalize(canonicalize(x)) == canonicalize(x).
    """

    following = _next_non_blank_table(lines)
    out: list[str] = []
    in_fence = False
    prev_blank = False
    prev_non_blank: str | None = None

    for i, line in enumerate(lines):
        if line.strip().startswith(FENCE):
            fence = _rstrip_ws(line)
            out.append(fence)
            in_fence = not in_fence
            prev_blank = False
            prev_non_blank = fence
            continue

        if in_fence:
            out.append(line)
            prev_blank = False
            if not _is_blank(line):
                prev_non_blank = line
            continue

        right = _rstrip_ws(line)
        if not _is_blank(right):
            out.append(right)
            prev_blank = False
            prev_non_blank = right
            continue

        nxt = following[i]
        if prev_non_blank is not None and nxt is not None:
            if is_list_item(prev_non_blank) and is_list_item(nxt):
                continue
        if prev_blank:
            continue
        out.append("")
        prev_blank = True

    start = 0
    while start < len(out) and out[start] == "":
        start += 1
    end = len(out)
    while end > start and out[end - 1] == "":
        end -= 1
    return out[start:end]


def canonicalize_markdown(text: str) -> str:
    return "\n".join(canonicalize_markdown_lines(text.split("\n")))
