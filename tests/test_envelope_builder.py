from __future__ import annotations

import json
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from contracts.envelope import ENVELOPE_VERSION, Envelope
from contracts.errors import ErrorKind, UmafError
from contracts.semantic import Bullet, CodeBlock, FrontMatterEntry, Section, Table
from envelope.artifacts import (
    load_envelope_schema,
    serialize_envelope,
    validate_envelope,
    validate_envelope_payload,
    write_envelope_json,
)
from envelope.module import (
    build_envelope,
    compute_doc_id,
    compute_source_hash,
    count_lines,
    first_markdown_heading_title,
)
from prework.contracts import MediaKind
from structure.module import parse_semantic_structure

_FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
_EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def _markdown_envelope(raw: bytes, source_path: str = "/docs/readme.md") -> Envelope:
    text = raw.decode("utf-8")
    return build_envelope(
        raw_bytes=raw,
        normalized=text,
        media_type="text/markdown",
        source_path=source_path,
        model=parse_semantic_structure(text, MediaKind.MARKDOWN),
        semantic_kind=MediaKind.MARKDOWN,
        now=_FIXED_NOW,
    )


class TestEnvelopeBuilder(unittest.TestCase):
    def test_identity_fields_come_from_raw_bytes(self) -> None:
        self.assertEqual(compute_source_hash(b""), _EMPTY_SHA256)
        self.assertEqual(compute_doc_id(_EMPTY_SHA256), "e3b0c44298fc")

        a = _markdown_envelope(b"# Title\n\nHello.\n", source_path="a.md")
        b = _markdown_envelope(b"# Title\n\nHello.\n", source_path="elsewhere/b.md")
        self.assertEqual(a.source_hash, b.source_hash)
        self.assertEqual(a.doc_id, b.doc_id)
        self.assertEqual(a.doc_id, a.source_hash[:12])

    def test_envelope_fields(self) -> None:
        env = _markdown_envelope(b"# Title\n\nHello.\n")

        self.assertEqual(env.version, ENVELOPE_VERSION)
        self.assertEqual(env.doc_title, "Title")
        self.assertEqual(env.created_at, "2024-01-02T03:04:05Z")
        self.assertEqual(env.encoding, "utf-8")
        self.assertEqual(env.size_bytes, 16)
        self.assertEqual(env.line_count, 4)
        self.assertEqual([s.heading for s in env.sections], ["Title"])
        self.assertEqual(env.sections[0].paragraphs, ["Hello."])

    def test_created_at_is_utc_with_z_suffix(self) -> None:
        plus_two = datetime(2024, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))
        env = build_envelope(
            raw_bytes=b"x",
            normalized="x",
            media_type="text/plain",
            source_path="x.txt",
            model=parse_semantic_structure("x", MediaKind.PLAIN),
            semantic_kind=MediaKind.PLAIN,
            now=plus_two,
        )
        self.assertEqual(env.created_at, "2024-01-02T03:04:05Z")

        live = build_envelope(
            raw_bytes=b"x",
            normalized="x",
            media_type="text/plain",
            source_path="x.txt",
            model=parse_semantic_structure("x", MediaKind.PLAIN),
            semantic_kind=MediaKind.PLAIN,
        )
        self.assertTrue(live.created_at.endswith("Z"))

    def test_title_rules(self) -> None:
        self.assertEqual(first_markdown_heading_title("text\n##   Deep  \n# Top"), "Deep")
        self.assertEqual(first_markdown_heading_title("#\n#   \n# Real"), "Real")
        self.assertEqual(first_markdown_heading_title("####### seven"), "seven")
        self.assertIsNone(first_markdown_heading_title("no headings"))

        env = _markdown_envelope(b"no heading", source_path="/tmp/notes.final.md")
        self.assertEqual(env.doc_title, "notes.final")

    def test_title_from_heading_only_for_markdown(self) -> None:
        text = "# Heading\nbody"
        for kind, expected in ((MediaKind.PLAIN, "notes"), (MediaKind.MARKDOWN, "Heading")):
            with self.subTest(kind=kind):
                env = build_envelope(
                    raw_bytes=text.encode("utf-8"),
                    normalized=text,
                    media_type=kind.value,
                    source_path="/x/notes.txt",
                    model=parse_semantic_structure(text, kind),
                    semantic_kind=kind,
                    now=_FIXED_NOW,
                )
                self.assertEqual(env.doc_title, expected)

    def test_line_count(self) -> None:
        self.assertEqual(count_lines(""), 1)
        self.assertEqual(count_lines("a"), 1)
        self.assertEqual(count_lines("a\n"), 2)
        self.assertEqual(count_lines("a\n\nb"), 3)

    def test_serialized_envelope_is_deterministic_and_valid(self) -> None:
        raw = b"---\nauthor: Jo\n---\n\n- loose\n# T\n\n- a\n\n```py\nx = 1\n```\n\n| A | B |\n| - | - |\n| 1 | 2 |\n"
        s1 = serialize_envelope(_markdown_envelope(raw))
        s2 = serialize_envelope(_markdown_envelope(raw))
        self.assertEqual(s1, s2)
        self.assertTrue(s1.endswith("\n"))

        d = json.loads(s1)
        validate_envelope_payload(d)
        self.assertEqual(list(d.keys()), sorted(d.keys()))
        self.assertEqual(d["frontMatter"], [{"key": "author", "value": "Jo"}])
        self.assertEqual(d["bullets"][0], {"text": "loose", "lineIndex": 4})
        self.assertEqual(
            d["bullets"][1], {"text": "a", "lineIndex": 7, "sectionHeading": "T", "sectionLevel": 1}
        )
        self.assertEqual(d["codeBlocks"], [{"startLineIndex": 9, "language": "py", "code": "x = 1"}])
        self.assertEqual(d["tables"], [{"startLineIndex": 13, "header": ["A", "B"], "rows": [["1", "2"]]}])

        self.assertEqual(Envelope.from_dict(d), _markdown_envelope(raw))

    def test_schema_violation_is_schema_mismatch(self) -> None:
        d = _markdown_envelope(b"# T\n").to_dict()
        del d["docId"]
        d["lineCount"] = 0

        with self.assertRaises(UmafError) as ctx:
            validate_envelope_payload(d)

        self.assertEqual(ctx.exception.kind, ErrorKind.SCHEMA_MISMATCH)
        self.assertEqual(ctx.exception.exit_code, 12)
        self.assertEqual(len(ctx.exception.detail["violations"]), 2)

    def test_schema_is_draft_2020_12(self) -> None:
        schema = load_envelope_schema()
        self.assertEqual(schema["$schema"], "https://json-schema.org/draft/2020-12/schema")
        validate_envelope(_markdown_envelope(b"plain body"))

        # The returned schema is a copy; validation keeps using the packaged one.
        schema["required"].append("extraField")
        validate_envelope(_markdown_envelope(b"plain body"))

    def test_contracts_read_wire_shape_with_omitted_optionals(self) -> None:
        self.assertEqual(Bullet.from_dict({"text": "a", "lineIndex": 2}), Bullet(text="a", line_index=2))
        self.assertEqual(
            Bullet.from_dict({"text": "b", "lineIndex": 3, "sectionHeading": "S", "sectionLevel": 2}),
            Bullet(text="b", line_index=3, section_heading="S", section_level=2),
        )
        self.assertEqual(
            CodeBlock.from_dict({"startLineIndex": 0, "code": "x"}),
            CodeBlock(start_line_index=0, language=None, code="x"),
        )
        self.assertEqual(
            Section.from_dict({"heading": "H", "level": 2}),
            Section(heading="H", level=2, lines=[], paragraphs=[]),
        )
        self.assertEqual(
            Table.from_dict({"startLineIndex": 1, "header": ["A"], "rows": [["1"]]}),
            Table(start_line_index=1, header=["A"], rows=[["1"]]),
        )
        self.assertEqual(FrontMatterEntry.from_dict({"key": "k", "value": ""}), FrontMatterEntry(key="k", value=""))

    def test_write_envelope_json(self) -> None:
        env = _markdown_envelope(b"# T\n")
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "nested" / "env.json"
            write_envelope_json(envelope=env, out_file=out)
            self.assertEqual(out.read_text(encoding="utf-8"), serialize_envelope(env))


if __name__ == "__main__":
    unittest.main()
