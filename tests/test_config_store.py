from __future__ import annotations

import json
from pathlib import Path

from config import JsonConfigStore


def test_config_defaults(tmp_path: Path) -> None:
    store = JsonConfigStore(path=tmp_path / "config.json")

    assert store.get_api_key() == ""
    assert store.get_model() == "qwen-plus"
    assert store.get_debounce_ms() == 750
    assert store.get_marker_name() == "MARK"
    assert store.get_live_render() is True


def test_config_read_write(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    store = JsonConfigStore(path=path)

    store.set_api_key("abc")
    store.set_model("qwen-turbo")
    store.set_debounce_ms(300)
    store.set_marker_name("URUTAN")
    store.set_live_render(False)

    reloaded = JsonConfigStore(path=path)
    assert reloaded.get_api_key() == "abc"
    assert reloaded.get_model() == "qwen-turbo"
    assert reloaded.get_debounce_ms() == 300
    assert reloaded.get_marker_name() == "URUTAN"
    assert reloaded.get_live_render() is False


def test_config_invalid_json_fallback(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{invalid", encoding="utf-8")

    store = JsonConfigStore(path=path)
    assert store.get_api_key() == ""
    assert store.get_debounce_ms() == 750


def test_config_invalid_values_fallback(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"debounce_ms": "fast", "live_render": "yes", "marker_name": ""}),
        encoding="utf-8",
    )

    store = JsonConfigStore(path=path)
    assert store.get_debounce_ms() == 750
    assert store.get_live_render() is True
    assert store.get_marker_name() == "MARK"


def test_config_non_object_json_fallback(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    store = JsonConfigStore(path=path)
    assert store.get_model() == "qwen-plus"
    store.set_api_key("k")
    assert store.get_api_key() == "k"
