from __future__ import annotations

from models import PseudoInput, Section


def test_sections_are_in_fixed_order() -> None:
    inputs = PseudoInput(libraries="l", declarations="d", setup="s", loop="o", functions="f")

    assert [(int(section), text) for section, text in inputs.sections()] == [
        (1, "l"),
        (2, "d"),
        (3, "s"),
        (4, "o"),
        (5, "f"),
    ]
    assert Section.DECLARATIONS.field_name == "declarations"


def test_has_content_ignores_whitespace() -> None:
    assert PseudoInput().has_content() is False
    assert PseudoInput(setup="  \n\t").has_content() is False
    assert PseudoInput(functions="x").has_content() is True


def test_from_dict_tolerates_missing_and_bad_values() -> None:
    inputs = PseudoInput.from_dict({"loop": "blink", "setup": None, "functions": 3, "extra": "x"})

    assert inputs == PseudoInput(loop="blink")
    assert PseudoInput.from_dict(inputs.to_dict()) == inputs
