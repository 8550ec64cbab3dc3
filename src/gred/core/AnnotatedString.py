# src/gred/core/AnnotatedString.py
"""gred.core.AnnotatedString
============================
Text with overlapping, typed ranges, flattened into styled segments.

An ``AnnotatedString`` holds one part per grapheme plus a list of
annotations over grapheme ranges. Annotations may overlap. Iterating the
string yields ``AnnotatedSegment`` items that partition the text: at each
position the most recently started annotation wins, and the segment runs
to that annotation's end or to the first start inside it of an annotation
registered after it, whichever comes first. Lexical classes are registered
before search matches, so a match inside a long token still shows while
digits inside a match do not break it up. Where no annotation is active
the segment is plain and runs to the next annotation start.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

import grapheme


class AnnotationType(Enum):
    MATCH = "match"
    SELECTED_MATCH = "selected_match"
    NUMBER = "number"
    KEYWORD = "keyword"
    TYPE = "type"
    KNOWN_VALUE = "known_value"
    CHAR = "char"
    STRING = "string"
    COMMENT = "comment"


@dataclass(frozen=True)
class Annotation:
    """A half-open range of grapheme indices tagged with a type."""

    annotation_type: AnnotationType
    start: int
    end: int


@dataclass(frozen=True)
class AnnotatedSegment:
    text: str
    annotation_type: Optional[AnnotationType] = None


class AnnotatedString:
    """A sequence of graphemes with annotations in registration order.

    Args:
        parts: The text, one string per grapheme.
        annotations: Initial annotations, oldest first.
    """

    def __init__(
        self, parts: Iterable[str] = (), annotations: Iterable[Annotation] = ()
    ) -> None:
        self.parts: list[str] = list(parts)
        self.annotations: list[Annotation] = list(annotations)

    @classmethod
    def from_string(cls, text: str) -> "AnnotatedString":
        return cls(grapheme.graphemes(text))

    def add_annotation(self, annotation_type: AnnotationType, start: int, end: int) -> None:
        self.annotations.append(Annotation(annotation_type, start, end))

    def __len__(self) -> int:
        return len(self.parts)

    def __str__(self) -> str:
        return "".join(self.parts)

    def __repr__(self) -> str:
        return f"AnnotatedString({str(self)!r}, {self.annotations!r})"

    def __iter__(self) -> Iterator[AnnotatedSegment]:
        return self.segments()

    def _active_annotation(self, position: int) -> Optional[int]:
        """Index of the innermost annotation covering `position`, if any."""
        chosen: Optional[int] = None
        for idx, annotation in enumerate(self.annotations):
            if annotation.start <= position < annotation.end:
                # later registrations win ties
                if chosen is None or annotation.start >= self.annotations[chosen].start:
                    chosen = idx
        return chosen

    def segments(self) -> Iterator[AnnotatedSegment]:
        """Yields the segments in order, starting from position zero."""
        length = len(self.parts)
        position = 0
        while position < length:
            chosen = self._active_annotation(position)
            if chosen is not None:
                active = self.annotations[chosen]
                # an annotation registered later takes over where it starts
                end = min(
                    active.end,
                    length,
                    *(
                        a.start
                        for a in self.annotations[chosen + 1:]
                        if position < a.start < active.end
                    ),
                )
                annotation_type: Optional[AnnotationType] = active.annotation_type
            else:
                end = min(
                    (a.start for a in self.annotations if position < a.start < length),
                    default=length,
                )
                annotation_type = None
            yield AnnotatedSegment("".join(self.parts[position:end]), annotation_type)
            position = end
