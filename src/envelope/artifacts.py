from __future__ import annotations

import copy
import json
from importlib import resources
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from contracts.envelope import Envelope
from contracts.errors import io_error, schema_mismatch

ENVELOPE_SCHEMA_RESOURCE = "umaf-mini-envelope-v0.4.1.schema.json"


def _read_envelope_schema() -> dict[str, Any]:
    text = resources.files("envelope").joinpath("schemas", ENVELOPE_SCHEMA_RESOURCE).read_text(
        encoding="utf-8"
    )
    schema = json.loads(text)
    Draft202012Validator.check_schema(schema)
    return schema


# Static package data: read and checked once at import.
ENVELOPE_SCHEMA: dict[str, Any] = _read_envelope_schema()
_VALIDATOR = Draft202012Validator(ENVELOPE_SCHEMA)


def serialize_envelope(envelope: Envelope) -> str:
    payload: dict[str, Any] = envelope.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def load_envelope_schema() -> dict[str, Any]:
    """The published envelope JSON Schema (a copy; callers may mutate it)."""
    return copy.deepcopy(ENVELOPE_SCHEMA)


def validate_envelope_payload(payload: dict[str, Any]) -> None:
    """
    Validate a wire-shape envelope dict.

    All violations are collected; the first one (by path) becomes the message
    and the full list goes into the error detail.
    """

    errors = sorted(_VALIDATOR.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path])
    if not errors:
        return

    first = errors[0]
    where = "/".join(str(p) for p in first.absolute_path) or "<root>"
    raise schema_mismatch(
        f"{where}: {first.message}",
        {
            "violations": [
                {"path": "/".join(str(p) for p in e.absolute_path), "message": e.message}
                for e in errors
            ]
        },
    )


def validate_envelope(envelope: Envelope) -> None:
    validate_envelope_payload(envelope.to_dict())


def write_envelope_json(*, envelope: Envelope, out_file: Path) -> None:
    try:
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_text(serialize_envelope(envelope), encoding="utf-8")
    except OSError as e:
        raise io_error(str(e), {"path": str(out_file)}) from e
