"""Text stream source using DashScope streaming text generation.

``Generation.call(stream=True, incremental_output=True)`` returns a blocking
iterator of responses, each carrying only the newly generated text. We pull
it from a worker thread one response at a time so the event loop never blocks,
and hand the caller an async iterator of text fragments.

The first response is fetched while opening the stream, so authentication and
quota errors surface as ``StreamOpenFailure`` rather than mid-stream.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, AsyncIterator, Iterator

from config import DEFAULT_MODEL
from errors import (
    AUTH_FAILED,
    BACKEND_MISSING,
    STREAM_FAILED,
    STREAM_OPEN_FAILED,
    StreamFailure,
    StreamOpenFailure,
    classify_error,
)

try:
    import dashscope
except Exception:  # pragma: no cover
    dashscope = None  # type: ignore

LOGGER = logging.getLogger(__name__)

_DONE = object()


class DashscopeStreamSource:
    def __init__(
        self,
        api_key: str = "",
        model: str = DEFAULT_MODEL,
        request_timeout_s: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._request_timeout_s = request_timeout_s

    async def open(self, prompt: str) -> AsyncIterator[str]:
        if dashscope is None:
            raise StreamOpenFailure(BACKEND_MISSING, "dashscope is not installed")

        api_key = self._api_key or os.getenv("DASHSCOPE_API_KEY", "")
        if not api_key:
            raise StreamOpenFailure(AUTH_FAILED, "No API key configured")

        try:
            responses = await asyncio.to_thread(self._call, api_key, prompt)
            iterator = iter(responses)
            first = await asyncio.to_thread(next, iterator, _DONE)
        except Exception as exc:
            code, retryable = classify_error(exc, STREAM_OPEN_FAILED)
            LOGGER.warning("Opening stream failed: %s", exc)
            raise StreamOpenFailure(code, str(exc), retryable) from exc

        if first is not _DONE:
            status, message = self._status(first)
            if status != 200:
                code, retryable = classify_error(Exception(f"{status} {message}"), STREAM_OPEN_FAILED)
                raise StreamOpenFailure(code, f"{status} {message}", retryable)

        LOGGER.debug("Stream opened with model %s", self._model)
        return self._iterate(first, iterator)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _call(self, api_key: str, prompt: str) -> Any:
        return dashscope.Generation.call(
            api_key=api_key,
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            result_format="message",
            stream=True,
            incremental_output=True,
            timeout=self._request_timeout_s,
        )

    async def _iterate(self, first: object, iterator: Iterator[Any]) -> AsyncIterator[str]:
        chunk = first
        while chunk is not _DONE:
            status, message = self._status(chunk)
            if status != 200:
                code, retryable = classify_error(Exception(f"{status} {message}"), STREAM_FAILED)
                raise StreamFailure(code, f"{status} {message}", retryable=retryable)
            text = self._extract_text(chunk)
            if text:
                yield text
            chunk = await asyncio.to_thread(next, iterator, _DONE)

    def _status(self, chunk: object) -> tuple[int, str]:
        if isinstance(chunk, dict):
            status = chunk.get("status_code", 200)
            message = chunk.get("message") or chunk.get("code") or ""
            try:
                return int(status), str(message)
            except (TypeError, ValueError):
                return 200, str(message)
        return 200, ""

    def _extract_text(self, chunk: object) -> str:
        """Pull the incremental text from a DashScope streaming chunk dict."""
        if not isinstance(chunk, dict):
            return ""
        output = chunk.get("output") or {}
        choices = output.get("choices") or []
        if choices:
            message = choices[0].get("message") or {}
            content = message.get("content", "")
            return content if isinstance(content, str) else ""
        text = output.get("text", "")
        return text if isinstance(text, str) else ""
