from __future__ import annotations

import asyncio
from pathlib import Path

from app import TranslatorApp
from config import JsonConfigStore
from fakes import FakeStreamSource, Script
from models import CopyResult, ParsedCode, PseudoInput, Section, Segment, TranslationState


class FakeClipboard:
    def __init__(self) -> None:
        self.copied: list[ParsedCode] = []

    def copy_code(self, segments: ParsedCode) -> CopyResult:
        self.copied.append(segments)
        return CopyResult(success=True, reason="ok")


def _app(tmp_path: Path, source: FakeStreamSource, debounce_ms: int = 30, **kwargs) -> TranslatorApp:
    store = JsonConfigStore(path=tmp_path / "config.json")
    store.set_debounce_ms(debounce_ms)
    return TranslatorApp(config_store=store, source=source, clipboard=FakeClipboard(), **kwargs)


def test_typing_burst_submits_once_with_last_input(tmp_path: Path) -> None:
    source = FakeStreamSource(scripts=[Script(["//<MARK:4>void loop() {}//</MARK:4>"])])
    app = _app(tmp_path, source)

    async def run() -> None:
        app.update_section(Section.LOOP, "b")
        app.update_section(Section.LOOP, "bl")
        app.update_section(Section.LOOP, "blink")
        await asyncio.sleep(0.1)
        await app.controller.wait_idle()

    asyncio.run(run())

    assert len(source.prompts) == 1
    assert source.prompts[0].rstrip().endswith("(section 4) blink")
    assert app.controller.plain_code == "void loop() {}"


def test_clear_all_clears_output_without_stream(tmp_path: Path) -> None:
    source = FakeStreamSource(scripts=[Script(["code"])])
    results: list[ParsedCode] = []
    app = _app(tmp_path, source, on_result=results.append)

    async def run() -> None:
        app.update_section(Section.SETUP, "set led as output")
        await asyncio.sleep(0.06)
        await app.controller.wait_idle()
        assert app.controller.plain_code == "code"
        app.clear_all()
        await asyncio.sleep(0.06)

    asyncio.run(run())

    assert len(source.prompts) == 1
    assert app.controller.segments == []
    assert results == [[Segment(tag=None, text="code")], []]
    assert app.inputs == PseudoInput()


def test_clear_section_keeps_other_sections(tmp_path: Path) -> None:
    app = _app(tmp_path, FakeStreamSource())

    async def run() -> None:
        app.update_section(Section.SETUP, "set led as output")
        app.update_section(Section.LOOP, "blink")
        app.clear_section(Section.SETUP)
        app.shutdown()

    asyncio.run(run())

    assert app.inputs == PseudoInput(loop="blink")


def test_shutdown_cancels_pending_translation(tmp_path: Path) -> None:
    source = FakeStreamSource(scripts=[Script(["never"])])
    app = _app(tmp_path, source)

    async def run() -> None:
        app.update_section(Section.LOOP, "blink")
        app.shutdown()
        await asyncio.sleep(0.08)

    asyncio.run(run())

    assert source.prompts == []


def test_load_sample_drops_pending_edit(tmp_path: Path) -> None:
    source = FakeStreamSource(scripts=[Script(["never"])])
    app = _app(tmp_path, source)

    async def run() -> None:
        app.update_section(Section.LOOP, "blink")
        app.load_sample()
        await asyncio.sleep(0.08)

    asyncio.run(run())

    assert source.prompts == []
    assert app.inputs.setup == "set mainLed as output"
    assert app.controller.state == TranslationState.IDLE
    assert [s.tag for s in app.controller.segments] == [2, 5, 3, 4]


def test_retry_submits_immediately(tmp_path: Path) -> None:
    source = FakeStreamSource(scripts=[Script(["again"])])
    app = _app(tmp_path, source, debounce_ms=10_000)

    async def run() -> None:
        app.update_section(Section.LOOP, "blink")
        app.retry()
        await app.controller.wait_idle()

    asyncio.run(run())

    assert len(source.prompts) == 1
    assert app.controller.plain_code == "again"
    assert app.debouncer.pending is False


def test_copy_code_uses_current_segments(tmp_path: Path) -> None:
    app = _app(tmp_path, FakeStreamSource())
    app.controller.load_sample()

    result = app.copy_code()

    assert result.success is True
    assert app.clipboard.copied == [app.controller.segments]


def test_marker_name_from_config(tmp_path: Path) -> None:
    source = FakeStreamSource(scripts=[Script(["//<URUTAN:3>setup//</URUTAN:3>"])])
    store = JsonConfigStore(path=tmp_path / "config.json")
    store.set_marker_name("URUTAN")
    app = TranslatorApp(config_store=store, source=source, clipboard=FakeClipboard())

    async def run() -> None:
        app.update_section(Section.SETUP, "set led as output")
        app.retry()
        await app.controller.wait_idle()

    asyncio.run(run())

    assert "//<URUTAN:X>" in source.prompts[0]
    assert [s.tag for s in app.controller.segments] == [3]
