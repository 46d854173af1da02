from __future__ import annotations

from models import PseudoInput
from prompt_builder import build_explanation_prompt, build_pseudo_code, build_translation_prompt


def test_pseudo_code_tags_every_non_empty_line_in_section_order() -> None:
    inputs = PseudoInput(
        functions="function blink()\n\n  turn on led  \nend function",
        setup="set led as output",
        declarations="  pin led = 13\n   \nconstant pause = 1000",
        libraries="Servo.h",
    )

    assert build_pseudo_code(inputs).splitlines() == [
        "(section 1) Servo.h",
        "(section 2) pin led = 13",
        "(section 2) constant pause = 1000",
        "(section 3) set led as output",
        "(section 5) function blink()",
        "(section 5) turn on led",
        "(section 5) end function",
    ]


def test_pseudo_code_of_empty_input_is_empty() -> None:
    assert build_pseudo_code(PseudoInput()) == ""
    assert build_pseudo_code(PseudoInput(loop="  \n \t")) == ""


def test_translation_prompt_documents_marker_format() -> None:
    prompt = build_translation_prompt(PseudoInput(loop="blink led"))

    assert "//<MARK:X>" in prompt
    assert "//</MARK:X>" in prompt
    assert "//<MARK:3>" in prompt
    assert prompt.rstrip().endswith("(section 4) blink led")


def test_translation_prompt_uses_configured_marker() -> None:
    prompt = build_translation_prompt(PseudoInput(loop="blink led"), marker="URUTAN")

    assert "//<URUTAN:4>" in prompt
    assert "MARK" not in prompt


def test_explanation_prompt_embeds_code() -> None:
    prompt = build_explanation_prompt("void loop() {}")

    assert "```cpp\nvoid loop() {}\n```" in prompt
