from __future__ import annotations

from contracts.semantic import Table

_SEPARATOR_CHARS = frozenset("-:")


def split_pipe_cells(line: str) -> list[str]:
    """Non-empty, trimmed cells of a `|`-delimited row (outer pipes optional)."""
    return [cell.strip() for cell in line.split("|") if cell.strip()]


def is_separator_row(line: str) -> bool:
    if "|" not in line:
        return False
    cells = split_pipe_cells(line)
    return bool(cells) and all(set(cell) <= _SEPARATOR_CHARS for cell in cells)


def detect_tables(lines: list[str], start_index: int = 0) -> list[Table]:
    """
    GFM-style pipe tables: a `|` header line directly followed by a separator row.

    Rows continue until the first line without `|` or without any non-empty
    cell. Candidates with zero body rows are discarded and scanning resumes on
    the next line. `start_line_index` is the header line's index in `lines`.
    """

    tables: list[Table] = []
    i = start_index
    while i + 1 < len(lines):
        header_line = lines[i].strip()
        sep_line = lines[i + 1].strip()
        if "|" not in header_line or not is_separator_row(sep_line):
            i += 1
            continue

        rows: list[list[str]] = []
        j = i + 2
        while j < len(lines):
            row_line = lines[j].strip()
            if "|" not in row_line:
                break
            cells = split_pipe_cells(row_line)
            if not cells:
                break
            rows.append(cells)
            j += 1

        if rows:
            tables.append(Table(start_line_index=i, header=split_pipe_cells(header_line), rows=rows))
            i = j
        else:
            i += 1

    return tables
