"""Wire config, stream source, controller and debounce scheduler together.

A rendering layer owns one ``TranslatorApp``, forwards every edit of an input
section to it and subscribes to the controller callbacks for output. All
methods must be called from the asyncio event loop thread.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from clipboard import PyperclipClipboardService
from config import JsonConfigStore
from debounce import DebounceScheduler
from interfaces import ClipboardService, ConfigStore, TextStreamSource
from models import CopyResult, PseudoInput, Section
from stream_source import DashscopeStreamSource
from translation_controller import (
    ErrorCallback,
    SegmentsCallback,
    StateCallback,
    TextCallback,
    TranslationController,
)

LOGGER = logging.getLogger(__name__)


class TranslatorApp:
    def __init__(
        self,
        config_store: Optional[ConfigStore] = None,
        source: Optional[TextStreamSource] = None,
        clipboard: Optional[ClipboardService] = None,
        on_state_change: Optional[StateCallback] = None,
        on_partial: Optional[SegmentsCallback] = None,
        on_result: Optional[SegmentsCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        on_explanation: Optional[TextCallback] = None,
    ) -> None:
        self.config_store = config_store or JsonConfigStore()
        self.source = source or DashscopeStreamSource(
            api_key=self.config_store.get_api_key(),
            model=self.config_store.get_model(),
        )
        self.clipboard = clipboard or PyperclipClipboardService()
        self.controller = TranslationController(
            source=self.source,
            marker=self.config_store.get_marker_name(),
            live_render=self.config_store.get_live_render(),
            on_state_change=on_state_change,
            on_partial=on_partial,
            on_result=on_result,
            on_error=on_error,
            on_explanation=on_explanation,
        )
        self.debouncer: DebounceScheduler[PseudoInput] = DebounceScheduler(
            self.controller.submit,
            delay_s=self.config_store.get_debounce_ms() / 1000.0,
        )
        self._inputs = PseudoInput()

    @property
    def inputs(self) -> PseudoInput:
        return self._inputs

    def on_input_change(self, inputs: PseudoInput) -> None:
        self._inputs = inputs
        self.debouncer.on_input_change(inputs)

    def update_section(self, section: Section, text: str) -> None:
        self.on_input_change(dataclasses.replace(self._inputs, **{section.field_name: text}))

    def clear_section(self, section: Section) -> None:
        self.update_section(section, "")

    def clear_all(self) -> None:
        self.on_input_change(PseudoInput())

    def retry(self) -> int:
        """Translate the current input again without waiting for the quiet period."""
        self.debouncer.cancel()
        return self.controller.submit(self._inputs)

    def load_sample(self) -> None:
        self.debouncer.cancel()
        self.controller.load_sample()
        self._inputs = self.controller.inputs

    def copy_code(self) -> CopyResult:
        return self.clipboard.copy_code(self.controller.segments)

    async def explain(self) -> Optional[str]:
        return await self.controller.explain()

    def shutdown(self) -> None:
        LOGGER.debug("Shutting down translator")
        self.debouncer.close()
        self.controller.close()
