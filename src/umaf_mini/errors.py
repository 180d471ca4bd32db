from __future__ import annotations

from contracts.errors import UmafError, internal_error, io_error
from prework.contracts import ExtractionError


def as_umaf_error(exc: BaseException) -> UmafError:
    """Box any exception into the typed taxonomy; UmafError passes through unchanged."""
    if isinstance(exc, UmafError):
        return exc
    if isinstance(exc, ExtractionError):
        return io_error(exc.message, {"extraction_code": exc.code, **(exc.detail or {})})
    if isinstance(exc, OSError):
        detail = {"errno": exc.errno} if exc.errno is not None else None
        return io_error(str(exc), detail)
    return internal_error(f"{type(exc).__name__}: {exc}")
