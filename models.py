"""Core data models for the translator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterator, List, Mapping, Optional, Tuple


class Section(IntEnum):
    LIBRARIES = 1
    DECLARATIONS = 2
    SETUP = 3
    LOOP = 4
    FUNCTIONS = 5

    @property
    def field_name(self) -> str:
        return self.name.lower()


class TranslationState(str, Enum):
    IDLE = "IDLE"
    STREAMING = "STREAMING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class PseudoInput:
    libraries: str = ""
    declarations: str = ""
    setup: str = ""
    loop: str = ""
    functions: str = ""

    def sections(self) -> Iterator[Tuple[Section, str]]:
        for section in Section:
            yield section, getattr(self, section.field_name)

    def has_content(self) -> bool:
        return any(text.strip() for _, text in self.sections())

    def to_dict(self) -> dict:
        return {section.field_name: text for section, text in self.sections()}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "PseudoInput":
        values = {}
        for section in Section:
            value = data.get(section.field_name)
            values[section.field_name] = value if isinstance(value, str) else ""
        return cls(**values)


@dataclass(frozen=True)
class Segment:
    tag: Optional[int]
    text: str
    pending: bool = False


ParsedCode = List[Segment]


@dataclass(frozen=True)
class TranslationAttempt:
    attempt_id: int
    inputs: PseudoInput
    created_at_ms: int = 0


@dataclass
class CopyResult:
    success: bool
    reason: str
