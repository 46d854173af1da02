"""Accumulate a text stream into one buffer and parse it into segments."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Callable, Optional

from errors import STREAM_FAILED, StreamFailure, classify_error
from marker_parser import DEFAULT_MARKER, parse_marked_code
from models import ParsedCode

LOGGER = logging.getLogger(__name__)

UpdateCallback = Callable[[str, ParsedCode], None]


@dataclass
class StreamResult:
    text: str
    segments: ParsedCode = field(default_factory=list)
    chunk_count: int = 0
    cancelled: bool = False


class StreamAccumulator:
    """Buffers fragments in arrival order.

    The buffer is parsed once when the stream completes. When ``on_update`` is
    given the growing buffer is also parsed after every fragment (with the
    partial-marker rules) and reported for progressive rendering. With
    ``parse=False`` the buffer is collected as plain text and never parsed.

    ``is_cancelled`` is polled after each fragment; once it returns True the
    accumulator stops pulling from the stream and returns what it has without
    parsing it.
    """

    def __init__(
        self,
        marker: str = DEFAULT_MARKER,
        on_update: Optional[UpdateCallback] = None,
        is_cancelled: Optional[Callable[[], bool]] = None,
        parse: bool = True,
    ) -> None:
        self._marker = marker
        self._on_update = on_update
        self._is_cancelled = is_cancelled
        self._parse = parse

    async def consume(self, chunks: AsyncIterator[str]) -> StreamResult:
        parts: list[str] = []
        count = 0
        try:
            async for chunk in chunks:
                if not isinstance(chunk, str) or not chunk:
                    continue
                parts.append(chunk)
                count += 1
                if self._is_cancelled is not None and self._is_cancelled():
                    LOGGER.debug("Stream cancelled after %d chunks", count)
                    await close_stream(chunks)
                    return StreamResult(text="".join(parts), chunk_count=count, cancelled=True)
                if self._on_update is not None:
                    text = "".join(parts)
                    self._on_update(text, parse_marked_code(text, self._marker, partial=True))
        except StreamFailure as exc:
            exc.partial_text = "".join(parts)
            raise
        except Exception as exc:
            code, retryable = classify_error(exc, STREAM_FAILED)
            LOGGER.warning("Stream failed after %d chunks: %s", count, exc)
            raise StreamFailure(code, str(exc), "".join(parts), retryable) from exc

        text = "".join(parts)
        LOGGER.debug("Stream completed: %d chunks, %d chars", count, len(text))
        return StreamResult(
            text=text,
            segments=parse_marked_code(text, self._marker) if self._parse else [],
            chunk_count=count,
        )


async def close_stream(chunks: AsyncIterator[str]) -> None:
    aclose = getattr(chunks, "aclose", None)
    if aclose is not None:
        await aclose()
