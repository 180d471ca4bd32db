from __future__ import annotations

import argparse
import sys
from pathlib import Path

import structlog

from contracts.errors import unsupported_media_type
from prework.contracts import HTML_MEDIA_TYPE, MediaKind
from prework.data_access import read_input_bytes, write_output_bytes
from prework.engines import default_extraction_engine

from .config import OutputFormat, TransformConfig
from .errors import as_umaf_error
from .logging_config import configure_logging
from .module import transform_bytes

LOGGER = structlog.get_logger("umaf_mini.cli")

STDIN_MARKER = "-"
STDIN_SOURCE_PATH = "<stdin>"

ASSUMED_MEDIA_TYPES: dict[str, str] = {
    "txt": MediaKind.PLAIN.value,
    "md": MediaKind.MARKDOWN.value,
    "markdown": MediaKind.MARKDOWN.value,
    "json": MediaKind.JSON.value,
    "html": HTML_MEDIA_TYPE,
}


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="umaf-mini",
        description=(
            "Transform plain text, Markdown, JSON or HTML into a UMAF Mini envelope "
            "or normalized Markdown."
        ),
    )
    p.add_argument(
        "-i", "--input", required=True, help="Input file path, or '-' to read from stdin."
    )
    p.add_argument(
        "-o", "--output", type=Path, default=None, help="Output file. Default: stdout."
    )
    fmt = p.add_mutually_exclusive_group()
    fmt.add_argument(
        "--json",
        dest="output_format",
        action="store_const",
        const=OutputFormat.JSON,
        help="Output a UMAF Mini envelope as JSON (default).",
    )
    fmt.add_argument(
        "--markdown",
        dest="output_format",
        action="store_const",
        const=OutputFormat.MARKDOWN,
        help="Output normalized Markdown.",
    )
    p.set_defaults(output_format=OutputFormat.JSON)
    p.add_argument(
        "--assume-type",
        default=None,
        help="Input media type: txt, md, markdown, json or html. Default: guess from extension.",
    )
    p.add_argument(
        "--no-validate",
        dest="validate_schema",
        action="store_false",
        help="Skip JSON Schema validation of the envelope.",
    )
    p.add_argument("--log-level", default="WARNING", help="Console log level (stderr).")
    p.add_argument("--log-file", type=Path, default=None, help="Optional JSON-lines log file.")
    return p


def resolve_assumed_type(raw: str | None) -> str | None:
    if raw is None:
        return None
    media_type = ASSUMED_MEDIA_TYPES.get(raw.strip().lower())
    if media_type is None:
        raise unsupported_media_type(raw)
    return media_type


def _read_input(raw: str) -> tuple[bytes, str]:
    if raw == STDIN_MARKER:
        return sys.stdin.buffer.read(), STDIN_SOURCE_PATH
    path = Path(raw)
    return read_input_bytes(path), str(path)


def _run(args: argparse.Namespace) -> None:
    config = TransformConfig(
        output_format=args.output_format,
        media_type=resolve_assumed_type(args.assume_type),
        validate_schema=args.validate_schema,
    )
    data, source_path = _read_input(args.input)
    LOGGER.info("processing input", source_path=source_path)

    out = transform_bytes(
        data=data,
        source_path=source_path,
        config=config,
        extractor=default_extraction_engine(),
    )

    if args.output is not None:
        write_output_bytes(data=out, out_file=args.output)
        LOGGER.info("wrote output", path=str(args.output), out_bytes=len(out))
    else:
        sys.stdout.buffer.write(out)
        sys.stdout.buffer.flush()


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        _run(args)
    except Exception as e:
        err = as_umaf_error(e)
        LOGGER.error("failed", code=err.code, error=err.message)
        print(f"[umaf-mini] {err.user_message}", file=sys.stderr)
        return err.exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
