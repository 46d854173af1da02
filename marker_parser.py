"""Split marker-annotated code into tagged segments.

The producer wraps every block that belongs to an input section in comment
markers::

    //<MARK:2>
    int led = 13;
    //</MARK:2>

A block is tagged with the section number written in its open marker and is
terminated by the first close marker that repeats the same number. Markers do
not nest. An open marker without a matching close is left in place as plain
text of the surrounding untagged gap.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from models import ParsedCode, Segment

DEFAULT_MARKER = "MARK"

_DIGITS = "0123456789"
_MAX_DIGITS = 9


def open_marker(number: int, marker: str = DEFAULT_MARKER) -> str:
    return f"//<{marker}:{int(number)}>"


def close_marker(number: int, marker: str = DEFAULT_MARKER) -> str:
    return f"//</{marker}:{int(number)}>"


def parse_marked_code(
    text: str,
    marker: str = DEFAULT_MARKER,
    partial: bool = False,
) -> ParsedCode:
    """Parse ``text`` into segments, dropping whitespace-only ones.

    With ``partial=True`` the buffer is treated as a stream that is still
    growing: a trailing open marker whose close has not arrived yet becomes a
    pending tagged segment, and a half-received marker at the very end is held
    back instead of being shown as text.
    """
    return [seg for seg in scan_segments(text, marker, partial) if seg.text.strip()]


def scan_segments(
    text: str,
    marker: str = DEFAULT_MARKER,
    partial: bool = False,
) -> ParsedCode:
    """Single left-to-right pass that keeps every segment, blank ones included."""
    open_prefix = f"//<{marker}:"
    segments: List[Segment] = []
    missing_close: set[str] = set()
    gap_start = 0
    pos = 0

    while True:
        start = text.find(open_prefix, pos)
        if start < 0:
            break
        header = _read_open_marker(text, start, open_prefix)
        if header is None:
            pos = start + 1
            continue
        digits, body_start = header

        # once a close is missing from some offset on, it is missing from every later one
        end = -1
        close = f"//</{marker}:{digits}>"
        if digits not in missing_close:
            end = text.find(close, body_start)
        if end < 0:
            missing_close.add(digits)
            pos = start + 1
            continue

        if start > gap_start:
            segments.append(Segment(tag=None, text=text[gap_start:start]))
        segments.append(Segment(tag=int(digits), text=text[body_start:end]))
        gap_start = pos = end + len(close)

    tail = text[gap_start:]
    if partial:
        segments.extend(_scan_open_tail(tail, marker, open_prefix))
    elif tail:
        segments.append(Segment(tag=None, text=tail))
    return segments


def flatten_code(segments: ParsedCode) -> str:
    """Join segment text back into plain code with the markers stripped."""
    return "".join(seg.text for seg in segments)


def _read_open_marker(text: str, start: int, open_prefix: str) -> Optional[Tuple[str, int]]:
    """Return ``(digits, body_start)`` for a complete open marker at ``start``."""
    digits_start = start + len(open_prefix)
    digits_end = digits_start
    while digits_end < len(text) and text[digits_end] in _DIGITS:
        digits_end += 1
    if digits_end == digits_start or digits_end >= len(text) or text[digits_end] != ">":
        return None
    return text[digits_start:digits_end], digits_end + 1


def _scan_open_tail(tail: str, marker: str, open_prefix: str) -> ParsedCode:
    visible = tail[: len(tail) - _held_back_length(tail, marker)]

    start = visible.rfind(open_prefix)
    header = _read_open_marker(visible, start, open_prefix) if start >= 0 else None
    if header is None:
        return [Segment(tag=None, text=visible)] if visible else []

    digits, body_start = header
    segments: List[Segment] = []
    if start > 0:
        segments.append(Segment(tag=None, text=visible[:start]))
    segments.append(Segment(tag=int(digits), text=visible[body_start:], pending=True))
    return segments


def _held_back_length(tail: str, marker: str) -> int:
    """Length of a trailing, not yet complete marker at the end of ``tail``."""
    templates = (f"//<{marker}:", f"//</{marker}:")
    window = len(templates[1]) + _MAX_DIGITS
    for k in range(max(0, len(tail) - window), len(tail)):
        suffix = tail[k:]
        for template in templates:
            if template.startswith(suffix):
                return len(suffix)
            rest = suffix[len(template):]
            if suffix.startswith(template) and all(ch in _DIGITS for ch in rest):
                return len(suffix)
    return 0
