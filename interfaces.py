"""Protocol interfaces used by TranslationController."""

from __future__ import annotations

from typing import AsyncIterator, Protocol

from models import CopyResult, ParsedCode


class TextStreamSource(Protocol):
    async def open(self, prompt: str) -> AsyncIterator[str]: ...


class ClipboardService(Protocol):
    def copy_code(self, segments: ParsedCode) -> CopyResult: ...


class ConfigStore(Protocol):
    def get_api_key(self) -> str: ...

    def set_api_key(self, key: str) -> None: ...

    def get_model(self) -> str: ...

    def set_model(self, model: str) -> None: ...

    def get_debounce_ms(self) -> int: ...

    def set_debounce_ms(self, value: int) -> None: ...

    def get_marker_name(self) -> str: ...

    def set_marker_name(self, marker: str) -> None: ...

    def get_live_render(self) -> bool: ...

    def set_live_render(self, enabled: bool) -> None: ...
