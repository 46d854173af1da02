"""Copy the translated code, markers stripped, to the system clipboard."""

from __future__ import annotations

import logging

from marker_parser import flatten_code
from models import CopyResult, ParsedCode

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore

LOGGER = logging.getLogger(__name__)


class PyperclipClipboardService:
    def copy_code(self, segments: ParsedCode) -> CopyResult:
        code = flatten_code(segments)
        if not code.strip():
            return CopyResult(success=False, reason="empty code")
        if pyperclip is None:
            return CopyResult(success=False, reason="clipboard dependency missing")

        try:
            pyperclip.copy(code)
        except Exception as exc:
            LOGGER.warning("Copy to clipboard failed: %s", exc)
            return CopyResult(success=False, reason=str(exc))
        return CopyResult(success=True, reason="ok")
