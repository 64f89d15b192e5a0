from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import MalformedInputError

FENCE = "```"


class SegmentKind(str, Enum):
    PROSE = "prose"
    CODE = "code"


@dataclass(frozen=True, slots=True)
class Segment:
    kind: SegmentKind
    text: str

    @property
    def is_code(self) -> bool:
        return self.kind is SegmentKind.CODE


def segment(text: str, delimiter: str = FENCE) -> list[Segment]:
    """Split ``text`` on every literal ``delimiter`` into alternating prose and code.

    The first and last segments are always prose; an even number of parts
    means a fence was left open.
    """

    parts = text.split(delimiter)
    if len(parts) % 2 == 0:
        raise MalformedInputError(
            f"expected {delimiter} blocks to be closed ({len(parts) - 1} fences found)"
        )
    return [
        Segment(SegmentKind.CODE if index % 2 else SegmentKind.PROSE, part)
        for index, part in enumerate(parts)
    ]


__all__ = ["FENCE", "Segment", "SegmentKind", "segment"]
