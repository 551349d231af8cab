"""Message segments — frozen dataclasses forming a closed union."""

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class Name:
    real_name: str
    display_name: str

    @classmethod
    def from_text(cls, text: str) -> "Name":
        """A plain sender field carries one string for both names."""
        return cls(real_name=text, display_name=text)


@dataclass(frozen=True)
class AutoTranslate:
    category: int
    id: int


Segment = Union[PlainText, Name, AutoTranslate]


def display_text(segment: Segment) -> str:
    """Return the text a viewer shows for a single segment."""
    if isinstance(segment, PlainText):
        return segment.text
    if isinstance(segment, Name):
        return segment.display_name
    if isinstance(segment, AutoTranslate):
        return f"<AT: {segment.category}, {segment.id}>"
    raise TypeError(f"Unknown segment type: {type(segment).__name__}")


def segment_kind(segment: Segment) -> str:
    if isinstance(segment, PlainText):
        return "plain_text"
    if isinstance(segment, Name):
        return "name"
    if isinstance(segment, AutoTranslate):
        return "auto_translate"
    raise TypeError(f"Unknown segment type: {type(segment).__name__}")


def segment_to_dict(segment: Segment) -> dict[str, Any]:
    """Convert a segment to a JSON-ready dict tagged with its kind."""
    kind = segment_kind(segment)
    if isinstance(segment, PlainText):
        return {"kind": kind, "text": segment.text}
    if isinstance(segment, Name):
        return {
            "kind": kind,
            "real_name": segment.real_name,
            "display_name": segment.display_name,
        }
    return {"kind": kind, "category": segment.category, "id": segment.id}


@dataclass(frozen=True)
class Message:
    """Ordered segments of one message body."""

    parts: tuple[Segment, ...] = field(default_factory=tuple)

    @property
    def display_text(self) -> str:
        return "".join(display_text(part) for part in self.parts)
