"""Attempt supersession and state machine for streamed translations."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

from accumulator import StreamAccumulator, close_stream
from errors import (
    ERROR_MESSAGES,
    EXPLAIN_FAILED,
    STREAM_OPEN_FAILED,
    StreamFailure,
    StreamOpenFailure,
    classify_error,
)
from interfaces import TextStreamSource
from marker_parser import DEFAULT_MARKER, flatten_code, parse_marked_code
from models import ParsedCode, PseudoInput, TranslationAttempt, TranslationState
from prompt_builder import build_explanation_prompt, build_translation_prompt
from samples import SAMPLE_INPUT, sample_output

LOGGER = logging.getLogger(__name__)

StateCallback = Callable[[TranslationState, TranslationState], None]
SegmentsCallback = Callable[[ParsedCode], None]
ErrorCallback = Callable[[str, str], None]
TextCallback = Callable[[str], None]


class TranslationController:
    """Owns the single current attempt id and the visible output.

    Every ``submit`` creates a new attempt and makes it current at once. An
    older attempt is not cancelled: anything it produces (partial segments,
    final segments, errors) is dropped on arrival, and its accumulator stops
    pulling at the next fragment. All state is touched from the event loop
    thread only.
    """

    def __init__(
        self,
        source: TextStreamSource,
        marker: str = DEFAULT_MARKER,
        live_render: bool = True,
        on_state_change: Optional[StateCallback] = None,
        on_partial: Optional[SegmentsCallback] = None,
        on_result: Optional[SegmentsCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        on_explanation: Optional[TextCallback] = None,
    ) -> None:
        self._source = source
        self._marker = marker
        self._live_render = live_render
        self._on_state_change = on_state_change
        self._on_partial = on_partial
        self._on_result = on_result
        self._on_error = on_error
        self._on_explanation = on_explanation

        self._state = TranslationState.IDLE
        self._attempt_id = 0
        self._inputs = PseudoInput()
        self._segments: ParsedCode = []
        self._error: Optional[str] = None
        self._retryable = False
        self._explanation = ""
        self._tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> TranslationState:
        return self._state

    @property
    def current_attempt_id(self) -> int:
        return self._attempt_id

    @property
    def inputs(self) -> PseudoInput:
        return self._inputs

    @property
    def segments(self) -> ParsedCode:
        return list(self._segments)

    @property
    def plain_code(self) -> str:
        return flatten_code(self._segments)

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def retryable(self) -> bool:
        """Whether the last failure is worth retrying with the same input."""
        return self._retryable

    @property
    def explanation(self) -> str:
        return self._explanation

    def is_current(self, attempt_id: int) -> bool:
        return attempt_id == self._attempt_id

    def submit(self, inputs: PseudoInput) -> int:
        attempt = self._new_attempt(inputs)
        self._clear_outputs()

        if not inputs.has_content():
            LOGGER.debug("Attempt %d has no input, clearing output", attempt.attempt_id)
            if self._on_result:
                self._on_result([])
            self._transition(TranslationState.IDLE)
            return attempt.attempt_id

        self._transition(TranslationState.STREAMING)
        task = asyncio.get_running_loop().create_task(self.run_attempt(attempt))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return attempt.attempt_id

    async def run_attempt(self, attempt: TranslationAttempt) -> None:
        attempt_id = attempt.attempt_id
        accumulator = StreamAccumulator(
            marker=self._marker,
            on_update=self._partial_handler(attempt_id) if self._live_render else None,
            is_cancelled=lambda: not self.is_current(attempt_id),
        )

        try:
            chunks = await self._source.open(build_translation_prompt(attempt.inputs, self._marker))
            if not self.is_current(attempt_id):
                LOGGER.debug("Attempt %d went stale while opening", attempt_id)
                await close_stream(chunks)
                return
            result = await accumulator.consume(chunks)
        except (StreamOpenFailure, StreamFailure) as exc:
            self._fail(attempt_id, exc.code, exc.message, exc.retryable)
            return
        except Exception as exc:
            code, retryable = classify_error(exc, STREAM_OPEN_FAILED)
            self._fail(attempt_id, code, str(exc), retryable)
            return

        if result.cancelled or not self.is_current(attempt_id):
            LOGGER.debug("Dropping result of stale attempt %d", attempt_id)
            return

        LOGGER.debug(
            "Attempt %d finished in %d ms", attempt_id, now_ms() - attempt.created_at_ms
        )
        self._segments = result.segments
        if self._on_result:
            self._on_result(list(self._segments))
        self._transition(TranslationState.IDLE)

    def load_sample(self) -> ParsedCode:
        """Show the built-in example, superseding anything in flight."""
        self._new_attempt(SAMPLE_INPUT)
        self._clear_outputs()
        self._segments = parse_marked_code(sample_output(self._marker), self._marker)
        if self._on_result:
            self._on_result(list(self._segments))
        self._transition(TranslationState.IDLE)
        return list(self._segments)

    async def explain(self, code: Optional[str] = None) -> Optional[str]:
        plain = self.plain_code if code is None else code
        if not plain.strip():
            return None

        attempt_id = self._attempt_id
        self._explanation = ""
        try:
            chunks = await self._source.open(build_explanation_prompt(plain))
            result = await StreamAccumulator(parse=False).consume(chunks)
        except (StreamOpenFailure, StreamFailure) as exc:
            return self._fail_explanation(attempt_id, exc.message)
        except Exception as exc:
            return self._fail_explanation(attempt_id, str(exc))

        if not self.is_current(attempt_id):
            LOGGER.debug("Dropping explanation for stale output")
            return None
        self._explanation = result.text
        if self._on_explanation:
            self._on_explanation(result.text)
        return result.text

    async def wait_idle(self) -> None:
        """Wait for every background attempt, stale ones included."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Make every in-flight attempt stale."""
        self._attempt_id += 1
        if self._state == TranslationState.STREAMING:
            self._transition(TranslationState.IDLE)

    def _new_attempt(self, inputs: PseudoInput) -> TranslationAttempt:
        self._attempt_id += 1
        self._inputs = inputs
        LOGGER.debug("Attempt %d is now current", self._attempt_id)
        return TranslationAttempt(attempt_id=self._attempt_id, inputs=inputs, created_at_ms=now_ms())

    def _partial_handler(self, attempt_id: int) -> Callable[[str, ParsedCode], None]:
        def handle(text: str, segments: ParsedCode) -> None:
            if not self.is_current(attempt_id):
                return
            self._segments = segments
            if self._on_partial:
                self._on_partial(list(segments))

        return handle

    def _fail(self, attempt_id: int, code: str, message: str, retryable: bool = False) -> None:
        if not self.is_current(attempt_id):
            LOGGER.debug("Dropping failure of stale attempt %d: %s", attempt_id, message)
            return
        LOGGER.warning("Attempt %d failed (%s): %s", attempt_id, code, message)
        message = message or ERROR_MESSAGES.get(code, "An unknown error occurred during translation.")
        self._segments = []
        self._error = f"Translation failed: {message}"
        self._retryable = retryable
        self._transition(TranslationState.ERROR)
        self._emit_error(code, self._error)

    def _fail_explanation(self, attempt_id: int, message: str) -> None:
        if not self.is_current(attempt_id):
            return None
        LOGGER.warning("Explanation failed: %s", message)
        self._emit_error(EXPLAIN_FAILED, f"Failed to get explanation: {message}")
        return None

    def _clear_outputs(self) -> None:
        self._segments = []
        self._error = None
        self._retryable = False
        self._explanation = ""

    def _emit_error(self, code: str, message: str) -> None:
        if self._on_error:
            self._on_error(code, message)

    def _transition(self, to_state: TranslationState) -> None:
        from_state = self._state
        if from_state == to_state:
            return
        self._state = to_state
        if self._on_state_change:
            self._on_state_change(from_state, to_state)


def now_ms() -> int:
    return int(time.time() * 1000)
