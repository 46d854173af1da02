"""Prompt construction for the text generation backend."""

from __future__ import annotations

from marker_parser import DEFAULT_MARKER, close_marker, open_marker
from models import PseudoInput, Section


def build_pseudo_code(inputs: PseudoInput) -> str:
    """Serialize the input as ``(section N) <line>`` lines, sections in order."""
    lines = []
    for section, text in inputs.sections():
        for line in text.strip().splitlines():
            if line.strip():
                lines.append(f"(section {int(section)}) {line.strip()}")
    return "\n".join(lines)


def build_translation_prompt(inputs: PseudoInput, marker: str = DEFAULT_MARKER) -> str:
    pseudo_code = build_pseudo_code(inputs)
    example = "\n".join(
        [
            open_marker(Section.DECLARATIONS, marker),
            "int LED = 4; // LED pin on 4",
            close_marker(Section.DECLARATIONS, marker),
            open_marker(Section.SETUP, marker),
            "void setup() {",
            "  pinMode(LED, OUTPUT); // make the LED pin an output",
            "}",
            close_marker(Section.SETUP, marker),
            open_marker(Section.LOOP, marker),
            "void loop() {",
            "  digitalWrite(LED, HIGH); // LED on",
            "  delay(500);              // wait 0.5 s",
            "  digitalWrite(LED, LOW);  // LED off",
            "  delay(500);              // wait 0.5 s",
            "}",
            close_marker(Section.LOOP, marker),
        ]
    )
    return f"""You translate a simplified pseudo-language into Arduino C++.

Rules:
1. Every input line is prefixed with its section number: (section 1), (section 2), ...
2. Each section defines one part of the Arduino program:
   - Section 1: libraries to include.
   - Section 2: pin and variable declarations.
   - Section 3: pin initialisation (setup).
   - Section 4: the main program (loop).
   - Section 5: additional functions.
3. The result must be complete Arduino C++ code, ready to compile.
4. Add a comment to every line explaining what it does.
5. IMPORTANT: wrap the code of each section in marker comments. Put `//<{marker}:X>` before the block and `//</{marker}:X>` after it, where X is the section number (1, 2, 3, 4 or 5).
6. Do not add any explanation outside the code. RETURN ONLY THE C++ CODE. Do NOT use markdown blocks.

Example input:
(section 2) pin LED = 4
(section 3) set LED as output
(section 4) blink the lamp

Example output:
{example}

---
NOW TRANSLATE THE FOLLOWING INPUT:

{pseudo_code}
"""


def build_explanation_prompt(code: str) -> str:
    return f"""You are an Arduino expert who is very good at teaching beginners.
Briefly explain in general terms what the following Arduino code does.
Focus on the big picture and its main purpose, AVOID a line by line walkthrough.
Use markdown for code references: single backticks for inline code and
```cpp fenced blocks for code blocks.

Here is the code:
```cpp
{code}
```
"""
