"""Built-in example input and its marker-annotated translation."""

from __future__ import annotations

from marker_parser import DEFAULT_MARKER
from models import PseudoInput

SAMPLE_INPUT = PseudoInput(
    libraries="",
    declarations="pin mainLed = 13\nconstant pause = 1000",
    setup="set mainLed as output",
    loop="blinkLed(mainLed, pause)\nwait 500 ms",
    functions=(
        "function blinkLed(int ledPin, int duration)\n"
        "  turn on ledPin\n"
        "  wait duration ms\n"
        "  turn off ledPin\n"
        "  wait duration ms\n"
        "end function"
    ),
)

_SAMPLE_OUTPUT_TEMPLATE = """//<{m}:2>
// Pin for the main LED on pin 13
int mainLed = 13;
// Pause duration in milliseconds
const int pause = 1000;
//</{m}:2>
//<{m}:5>
// Custom function that blinks an LED
void blinkLed(int ledPin, int duration) {{
  digitalWrite(ledPin, HIGH); // Turn the LED on
  delay(duration);            // Wait for the given duration
  digitalWrite(ledPin, LOW);  // Turn the LED off
  delay(duration);            // Wait again
}}
//</{m}:5>
//<{m}:3>
void setup() {{
  // Make mainLed an output
  pinMode(mainLed, OUTPUT);
}}
//</{m}:3>
//<{m}:4>
void loop() {{
  // Blink the LED with the configured pause
  blinkLed(mainLed, pause);
  // Wait 500 milliseconds before the next loop
  delay(500);
}}
//</{m}:4>"""


def sample_output(marker: str = DEFAULT_MARKER) -> str:
    return _SAMPLE_OUTPUT_TEMPLATE.format(m=marker)
