from __future__ import annotations

import subprocess
import tempfile
from pathlib import Path

from ..contracts import DOCX_MEDIA_TYPE, MSWORD_MEDIA_TYPE, RTF_MEDIA_TYPE, ExtractionError
from .base import TextExtractionEngine

_SUFFIXES: dict[str, str] = {
    RTF_MEDIA_TYPE: ".rtf",
    MSWORD_MEDIA_TYPE: ".doc",
    DOCX_MEDIA_TYPE: ".docx",
}


class TextutilCliEngine(TextExtractionEngine):
    """
    Office/RTF text extraction via the `textutil` CLI (macOS).

    textutil sniffs the format from the file extension, so the payload is
    materialized into a temporary file with the suffix matching its media type.
    """

    def __init__(self, executable: str = "textutil") -> None:
        self.executable = executable

    def backend_id(self) -> str:
        return "textutil"

    def supports(self, media_type: str) -> bool:
        return media_type in _SUFFIXES

    def extract_text(self, *, data: bytes, media_type: str, timeout_s: float) -> str:
        suffix = _SUFFIXES.get(media_type)
        if suffix is None:
            raise ExtractionError(
                code="EXTRACT_UNSUPPORTED_MEDIA_TYPE",
                message=f"{self.backend_id()} cannot extract {media_type}",
                detail={"media_type": media_type},
            )

        with tempfile.TemporaryDirectory(prefix="umaf-textutil-") as tmp:
            src = Path(tmp) / f"input{suffix}"
            src.write_bytes(data)

            cmd = [self.executable, "-convert", "txt", "-stdout", str(src)]
            try:
                proc = subprocess.run(
                    cmd,
                    check=False,
                    capture_output=True,
                    timeout=timeout_s,
                )
            except FileNotFoundError as e:
                raise ExtractionError(
                    code="EXTRACT_BACKEND_NOT_INSTALLED",
                    message=f"{self.executable} binary not found on PATH",
                    detail={"expected_command": self.executable},
                ) from e
            except subprocess.TimeoutExpired as e:
                raise ExtractionError(
                    code="EXTRACT_TIMEOUT",
                    message="Text extraction backend timed out",
                    detail={"timeout_s": timeout_s},
                ) from e

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace")
            raise ExtractionError(
                code="EXTRACT_BACKEND_ERROR",
                message=f"textutil failed: {stderr.strip()}",
                detail={
                    "returncode": proc.returncode,
                    "stderr": stderr[-4000:],  # truncate for message stability
                },
            )

        return proc.stdout.decode("utf-8", errors="replace")
