from __future__ import annotations

from ..contracts import PDF_MEDIA_TYPE, ExtractionError
from .base import TextExtractionEngine


def pages_to_markdownish(page_texts: list[str]) -> str:
    """
    Lay out per-page text as Markdown-ish sections.

    Pages with no text after trimming are skipped; page numbers stay 1-indexed
    against the source document, so gaps are visible in the headings.
    """

    lines: list[str] = []
    last = len(page_texts) - 1
    for idx, raw in enumerate(page_texts):
        text = raw.strip()
        if not text:
            continue
        lines.append(f"# Page {idx + 1}")
        lines.append("")
        lines.extend(text.replace("\r\n", "\n").replace("\r", "\n").split("\n"))
        if idx != last:
            lines.append("")
    return "\n".join(lines)


class Pypdfium2TextEngine(TextExtractionEngine):
    def backend_id(self) -> str:
        return "pypdfium2"

    def backend_version(self) -> str | None:
        try:
            import pypdfium2 as pdfium  # type: ignore

            return getattr(pdfium, "__version__", None)
        except Exception:
            return None

    def _require_pdfium(self):
        try:
            import pypdfium2 as pdfium  # type: ignore

            return pdfium
        except ImportError as e:
            raise ExtractionError(
                code="EXTRACT_BACKEND_NOT_INSTALLED",
                message="Missing dependency: pypdfium2 is required for PDF text extraction.",
                detail={"backend": self.backend_id()},
            ) from e

    def supports(self, media_type: str) -> bool:
        return media_type == PDF_MEDIA_TYPE

    def extract_text(self, *, data: bytes, media_type: str, timeout_s: float) -> str:
        # Note: pypdfium2 does not expose a per-call timeout.
        _ = timeout_s

        pdfium = self._require_pdfium()
        try:
            doc = pdfium.PdfDocument(data)
        except Exception as e:
            raise ExtractionError(
                code="EXTRACT_OPEN_FAILED",
                message="Failed to open PDF document.",
                detail={"error": repr(e)},
            ) from e

        try:
            page_texts: list[str] = []
            for page_index in range(len(doc)):
                page = doc[page_index]
                textpage = page.get_textpage()
                try:
                    page_texts.append(textpage.get_text_range())
                finally:
                    textpage.close()
                    page.close()
        except Exception as e:
            raise ExtractionError(
                code="EXTRACT_PAGE_FAILED",
                message="Failed to extract text from PDF page.",
                detail={"error": repr(e)},
            ) from e
        finally:
            doc.close()

        return pages_to_markdownish(page_texts)
