from __future__ import annotations

from pathlib import Path

from contracts.errors import io_error

from .contracts import MEDIA_TYPES_BY_EXTENSION, MediaKind


def guess_media_type(path: Path | str) -> str:
    """
    Media type from the file extension only (no content sniffing).

    Unknown extensions are treated as plain text.
    """

    suffix = Path(path).suffix.lower()
    return MEDIA_TYPES_BY_EXTENSION.get(suffix, MediaKind.PLAIN.value)


def read_input_bytes(path: Path) -> bytes:
    if not path.exists():
        raise io_error(f"No such file: {path}", {"path": str(path)})
    if path.is_dir():
        raise io_error(f"Expected a file, got a directory: {path}", {"path": str(path)})
    try:
        return path.read_bytes()
    except OSError as e:
        raise io_error(str(e), {"path": str(path)}) from e


def write_output_bytes(*, data: bytes, out_file: Path) -> None:
    try:
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_bytes(data)
    except OSError as e:
        raise io_error(str(e), {"path": str(out_file)}) from e
