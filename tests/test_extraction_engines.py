from __future__ import annotations

import subprocess
import unittest
from unittest.mock import patch

from prework.contracts import DOCX_MEDIA_TYPE, PDF_MEDIA_TYPE, RTF_MEDIA_TYPE, ExtractionError
from prework.engines import CompositeExtractionEngine, default_extraction_engine
from prework.engines.base import TextExtractionEngine
from prework.engines.pypdfium2_engine import Pypdfium2TextEngine, pages_to_markdownish
from prework.engines.textutil_cli import TextutilCliEngine


class _FakeEngine(TextExtractionEngine):
    def __init__(self, name: str, media_types: set[str]) -> None:
        self.name = name
        self.media_types = media_types

    def backend_id(self) -> str:
        return self.name

    def supports(self, media_type: str) -> bool:
        return media_type in self.media_types

    def extract_text(self, *, data: bytes, media_type: str, timeout_s: float) -> str:
        return f"{self.name}:{data.decode('ascii')}"


class TestExtractionEngines(unittest.TestCase):
    def test_pages_are_laid_out_as_markdown_sections(self) -> None:
        self.assertEqual(
            pages_to_markdownish(["a\r\nb", "  \n", "c\n"]),
            "# Page 1\n\na\nb\n\n# Page 3\n\nc",
        )
        self.assertEqual(pages_to_markdownish([]), "")

    def test_pdf_engine_reports_unopenable_document(self) -> None:
        engine = Pypdfium2TextEngine()
        self.assertTrue(engine.supports(PDF_MEDIA_TYPE))
        self.assertFalse(engine.supports(DOCX_MEDIA_TYPE))

        with self.assertRaises(ExtractionError) as ctx:
            engine.extract_text(data=b"not a pdf", media_type=PDF_MEDIA_TYPE, timeout_s=1.0)
        self.assertEqual(ctx.exception.code, "EXTRACT_OPEN_FAILED")

    def test_textutil_missing_binary(self) -> None:
        engine = TextutilCliEngine(executable="umaf-textutil-does-not-exist")
        with self.assertRaises(ExtractionError) as ctx:
            engine.extract_text(data=b"{\\rtf1}", media_type=RTF_MEDIA_TYPE, timeout_s=1.0)
        self.assertEqual(ctx.exception.code, "EXTRACT_BACKEND_NOT_INSTALLED")

    def test_textutil_invocation_and_failures(self) -> None:
        engine = TextutilCliEngine()
        ok = subprocess.CompletedProcess(args=[], returncode=0, stdout="héllo\n".encode("utf-8"), stderr=b"")
        with patch("prework.engines.textutil_cli.subprocess.run", return_value=ok) as run:
            text = engine.extract_text(data=b"PK", media_type=DOCX_MEDIA_TYPE, timeout_s=3.0)

        self.assertEqual(text, "héllo\n")
        cmd = run.call_args.args[0]
        self.assertEqual(cmd[:4], ["textutil", "-convert", "txt", "-stdout"])
        self.assertTrue(cmd[4].endswith("input.docx"))
        self.assertEqual(run.call_args.kwargs["timeout"], 3.0)

        bad = subprocess.CompletedProcess(args=[], returncode=1, stdout=b"", stderr=b"corrupt\n")
        with patch("prework.engines.textutil_cli.subprocess.run", return_value=bad):
            with self.assertRaises(ExtractionError) as ctx:
                engine.extract_text(data=b"PK", media_type=DOCX_MEDIA_TYPE, timeout_s=3.0)
        self.assertEqual(ctx.exception.code, "EXTRACT_BACKEND_ERROR")
        self.assertEqual(ctx.exception.detail["returncode"], 1)

        slow = subprocess.TimeoutExpired(cmd="textutil", timeout=3.0)
        with patch("prework.engines.textutil_cli.subprocess.run", side_effect=slow):
            with self.assertRaises(ExtractionError) as ctx:
                engine.extract_text(data=b"PK", media_type=DOCX_MEDIA_TYPE, timeout_s=3.0)
        self.assertEqual(ctx.exception.code, "EXTRACT_TIMEOUT")

        with self.assertRaises(ExtractionError) as ctx:
            engine.extract_text(data=b"%PDF", media_type=PDF_MEDIA_TYPE, timeout_s=3.0)
        self.assertEqual(ctx.exception.code, "EXTRACT_UNSUPPORTED_MEDIA_TYPE")

    def test_composite_dispatches_to_first_supporting_engine(self) -> None:
        composite = CompositeExtractionEngine(
            [_FakeEngine("first", {PDF_MEDIA_TYPE}), _FakeEngine("second", {PDF_MEDIA_TYPE, RTF_MEDIA_TYPE})]
        )
        self.assertEqual(composite.backend_id(), "first+second")
        self.assertEqual(composite.extract_text(data=b"x", media_type=PDF_MEDIA_TYPE, timeout_s=1.0), "first:x")
        self.assertEqual(composite.extract_text(data=b"y", media_type=RTF_MEDIA_TYPE, timeout_s=1.0), "second:y")

        self.assertFalse(composite.supports("text/plain"))
        with self.assertRaises(ExtractionError) as ctx:
            composite.extract_text(data=b"z", media_type="text/plain", timeout_s=1.0)
        self.assertEqual(ctx.exception.code, "EXTRACT_UNSUPPORTED_MEDIA_TYPE")

    def test_default_engine_covers_pdf_and_office_types(self) -> None:
        engine = default_extraction_engine()
        for media_type in (PDF_MEDIA_TYPE, RTF_MEDIA_TYPE, DOCX_MEDIA_TYPE):
            self.assertTrue(engine.supports(media_type))
        self.assertFalse(engine.supports("text/html"))


if __name__ == "__main__":
    unittest.main()
