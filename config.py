"""Simple JSON-based config store."""

from __future__ import annotations

import json
import logging
from pathlib import Path

LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL = "qwen-plus"
DEFAULT_DEBOUNCE_MS = 750
DEFAULT_MARKER_NAME = "MARK"


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "arduino_pseudo" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_api_key(self) -> str:
        data = self._read_all()
        return str(data.get("api_key", ""))

    def set_api_key(self, key: str) -> None:
        self._set("api_key", key)

    def get_model(self) -> str:
        data = self._read_all()
        return str(data.get("model") or DEFAULT_MODEL)

    def set_model(self, model: str) -> None:
        self._set("model", model)

    def get_debounce_ms(self) -> int:
        data = self._read_all()
        value = data.get("debounce_ms", DEFAULT_DEBOUNCE_MS)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return DEFAULT_DEBOUNCE_MS
        return value

    def set_debounce_ms(self, value: int) -> None:
        self._set("debounce_ms", int(value))

    def get_marker_name(self) -> str:
        data = self._read_all()
        return str(data.get("marker_name") or DEFAULT_MARKER_NAME)

    def set_marker_name(self, marker: str) -> None:
        self._set("marker_name", marker)

    def get_live_render(self) -> bool:
        data = self._read_all()
        value = data.get("live_render", True)
        return value if isinstance(value, bool) else True

    def set_live_render(self, enabled: bool) -> None:
        self._set("live_render", bool(enabled))

    def _set(self, key: str, value: object) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            LOGGER.warning("Ignoring unreadable config %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
