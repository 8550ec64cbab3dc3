# src/gred/core/Line.py
"""gred.core.Line
============================
A single line of text, segmented into grapheme clusters.

Every coordinate translation the editor performs goes through this module:

- grapheme index -> display column (``width_until``)
- grapheme index -> offset into the raw text (``char_offset``, ``byte_offset``)
- raw text offset -> grapheme index (used by search and lexing)

The raw text is re-segmented in full after every mutation, so the fragment
list always partitions the string with no gaps and no overlaps.
"""

import bisect
import logging
import unicodedata
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional

import grapheme
from wcwidth import wcwidth

from .AnnotatedString import AnnotatedString, Annotation, AnnotationType


logger = logging.getLogger("gred")

# Glyphs drawn instead of graphemes that would otherwise be invisible
# or would break the terminal grid. The text itself is never changed.
TAB_REPLACEMENT = " "
CONTROL_REPLACEMENT = "▯"
ZERO_WIDTH_REPLACEMENT = "·"
WHITESPACE_REPLACEMENT = "␣"
# Drawn in the first column when a wide grapheme straddles the left edge.
CLIPPED_REPLACEMENT = "⋯"


class GraphemeWidth(IntEnum):
    ZERO = 0
    HALF = 1
    FULL = 2


@dataclass(frozen=True)
class TextFragment:
    """One grapheme cluster of a line.

    Attributes:
        grapheme: The cluster as it appears in the raw text.
        width: Number of display columns it occupies.
        replacement: Glyph rendered instead of the cluster, if any.
        start: Code point offset of the cluster in the raw text.
        byte_start: UTF-8 byte offset of the cluster in the raw text.
    """

    grapheme: str
    width: GraphemeWidth
    replacement: Optional[str]
    start: int
    byte_start: int

    @property
    def rendered(self) -> str:
        return self.replacement if self.replacement is not None else self.grapheme


def _table_width(cluster: str) -> int:
    """Display width of a cluster, taken from its first code point.

    wcwidth reports -1 for control characters; those count as zero here.
    """
    width = wcwidth(cluster[0])
    return max(width, 0)


def _replacement_for(cluster: str, table_width: int) -> Optional[str]:
    if cluster == " ":
        return None
    if cluster == "\t":
        return TAB_REPLACEMENT
    first = cluster[0]
    category = unicodedata.category(first)
    if category == "Cc":
        return CONTROL_REPLACEMENT
    if table_width == 0 and category == "Cf":
        return ZERO_WIDTH_REPLACEMENT
    if table_width > 0 and cluster.isspace():
        return WHITESPACE_REPLACEMENT
    return None


def segment(text: str) -> list[TextFragment]:
    """Splits `text` into fragments with widths and replacement glyphs."""
    fragments: list[TextFragment] = []
    offset = 0
    byte_offset = 0
    for cluster in grapheme.graphemes(text):
        table_width = _table_width(cluster)
        replacement = _replacement_for(cluster, table_width)
        if replacement is not None:
            width = GraphemeWidth.HALF
        elif table_width >= 2:
            width = GraphemeWidth.FULL
        else:
            width = GraphemeWidth(table_width)
        fragments.append(TextFragment(cluster, width, replacement, offset, byte_offset))
        offset += len(cluster)
        byte_offset += len(cluster.encode("utf-8", "surrogatepass"))
    return fragments


def display_width(text: str) -> int:
    """Number of terminal columns `text` occupies when drawn."""
    return sum(fragment.width for fragment in segment(text))


## ==================== Line ====================
class Line:
    """A mutable line of text with grapheme-aware coordinates.

    Args:
        string: Raw text of the line. It must not contain a newline.
    """

    def __init__(self, string: str = "") -> None:
        self.string = string
        self.fragments: list[TextFragment] = segment(string)
        self.fragment_starts: list[int] = [fragment.start for fragment in self.fragments]

    @classmethod
    def from_string(cls, line_str: str) -> "Line":
        return cls(line_str)

    def __str__(self) -> str:
        return self.string

    def __repr__(self) -> str:
        return f"Line({self.string!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self.string == other.string

    def __len__(self) -> int:
        return len(self.fragments)

    def raw_text(self) -> str:
        return self.string

    def grapheme_count(self) -> int:
        return len(self.fragments)

    def is_empty(self) -> bool:
        return not self.fragments

    def width(self) -> int:
        return self.width_until(self.grapheme_count())

    def width_until(self, grapheme_idx: int) -> int:
        """Returns the display width of the graphemes before `grapheme_idx`.

        Indices past the end are clamped, so the result never exceeds
        the width of the whole line.
        """
        return sum(fragment.width for fragment in self.fragments[: max(grapheme_idx, 0)])

    # --- offsets ---

    def char_offset(self, grapheme_idx: int) -> int:
        """Code point offset of the boundary before `grapheme_idx`."""
        if grapheme_idx >= self.grapheme_count():
            return len(self.string)
        return self.fragments[max(grapheme_idx, 0)].start

    def byte_offset(self, grapheme_idx: int) -> int:
        """UTF-8 byte offset of the boundary before `grapheme_idx`."""
        if grapheme_idx >= self.grapheme_count():
            return len(self.string.encode("utf-8", "surrogatepass"))
        return self.fragments[max(grapheme_idx, 0)].byte_start

    def grapheme_idx_at_offset(self, offset: int) -> int:
        """Index of the grapheme containing code point `offset`.

        Offsets at or past the end map to ``grapheme_count()``.
        """
        if offset >= len(self.string):
            return self.grapheme_count()
        return max(bisect.bisect_right(self.fragment_starts, offset) - 1, 0)

    def _boundaries(self) -> dict[int, int]:
        boundaries = {fragment.start: idx for idx, fragment in enumerate(self.fragments)}
        boundaries[len(self.string)] = self.grapheme_count()
        return boundaries

    # --- rendering ---

    def visible_substring(
        self,
        column_range: range,
        query: Optional[str] = None,
        selected_match: Optional[int] = None,
        annotations: Iterable[Annotation] = (),
    ) -> AnnotatedString:
        """Builds the annotated text shown in the columns of `column_range`.

        A fragment is shown whole if its first column lies inside the range
        and dropped otherwise. When a wide fragment starts left of the range
        but covers its first column, a clipping glyph keeps the remaining
        text aligned with the grid.

        Args:
            column_range: Half-open range of display columns.
            query: Optional search term; every occurrence is annotated as a
                match.
            selected_match: Grapheme index of the selected occurrence of
                `query`, annotated on top of the plain matches.
            annotations: Lexical annotations over the whole line, registered
                before the match annotations.

        Returns:
            An `AnnotatedString` whose annotation ranges are relative to the
            visible text.
        """
        left, right = column_range.start, column_range.stop
        parts: list[str] = []
        # grapheme index of each part; None for the clipping glyph
        sources: list[Optional[int]] = []
        if left >= right:
            return AnnotatedString()

        column = 0
        for idx, fragment in enumerate(self.fragments):
            fragment_start = column
            column += fragment.width
            if fragment_start >= right:
                break
            if fragment_start < left:
                if column > left:
                    parts.append(CLIPPED_REPLACEMENT)
                    sources.append(None)
                continue
            parts.append(fragment.rendered)
            sources.append(idx)

        result = AnnotatedString(parts)
        registered = list(annotations)
        registered.extend(self.match_annotations(query, selected_match))
        for annotation in registered:
            rebased = _rebase(annotation, sources)
            if rebased is not None:
                result.add_annotation(*rebased)
        return result

    def match_annotations(
        self, query: Optional[str], selected_match: Optional[int] = None
    ) -> list[Annotation]:
        """Annotations for every occurrence of `query`, then the selected one."""
        if not query:
            return []
        matches = self.find_all(query)
        annotations = [
            Annotation(AnnotationType.MATCH, start, end) for start, end in matches
        ]
        if selected_match is not None:
            for start, end in matches:
                if start == selected_match:
                    annotations.append(Annotation(AnnotationType.SELECTED_MATCH, start, end))
                    break
        return annotations

    # --- mutation ---

    def insert_char(self, character: str, grapheme_idx: int) -> None:
        """Inserts `character` before grapheme `grapheme_idx` (or at the end)."""
        offset = self.char_offset(grapheme_idx)
        self._set(self.string[:offset] + character + self.string[offset:])

    def append_char(self, character: str) -> None:
        self.insert_char(character, self.grapheme_count())

    def delete(self, grapheme_idx: int) -> None:
        """Removes the grapheme at `grapheme_idx`; out of range is a no-op."""
        if not 0 <= grapheme_idx < self.grapheme_count():
            return
        fragment = self.fragments[grapheme_idx]
        end = fragment.start + len(fragment.grapheme)
        self._set(self.string[: fragment.start] + self.string[end:])

    def delete_last(self) -> None:
        self.delete(self.grapheme_count() - 1)

    def append(self, other: "Line") -> None:
        self._set(self.string + other.string)

    def split(self, grapheme_idx: int) -> tuple["Line", "Line"]:
        """Splits the line before `grapheme_idx` into a head and a tail."""
        offset = self.char_offset(grapheme_idx)
        return Line(self.string[:offset]), Line(self.string[offset:])

    def _set(self, string: str) -> None:
        self.string = string
        self.fragments = segment(string)
        self.fragment_starts = [fragment.start for fragment in self.fragments]

    # --- search ---

    def find_all(
        self, needle: str, char_range: Optional[range] = None
    ) -> list[tuple[int, int]]:
        """Finds the non-overlapping occurrences of `needle`.

        Matching is case-sensitive and leftmost-first. Only occurrences that
        lie fully inside `char_range` and begin and end on grapheme boundaries
        are reported. The range holds code point offsets as returned by
        `char_offset`, not UTF-8 byte offsets; by default it is the whole
        line.

        Returns:
            A list of ``(start_grapheme, end_grapheme)`` pairs in ascending
            order.
        """
        if not needle:
            return []
        if char_range is None:
            char_range = range(0, len(self.string))
        start = max(char_range.start, 0)
        stop = min(char_range.stop, len(self.string))
        if start >= stop:
            return []

        boundaries = self._boundaries()
        matches: list[tuple[int, int]] = []
        position = start
        while True:
            found = self.string.find(needle, position, stop)
            if found == -1:
                break
            end = found + len(needle)
            if found in boundaries and end in boundaries:
                matches.append((boundaries[found], boundaries[end]))
                position = end
            else:
                position = found + 1
        return matches

    def search_forward(self, query: str, from_grapheme_idx: int) -> Optional[int]:
        """First occurrence of `query` starting at or after `from_grapheme_idx`."""
        if from_grapheme_idx > self.grapheme_count():
            return None
        start = self.char_offset(from_grapheme_idx)
        matches = self.find_all(query, range(start, len(self.string)))
        return matches[0][0] if matches else None

    def search_backward(self, query: str, to_grapheme_idx: int) -> Optional[int]:
        """Last occurrence of `query` that ends at or before `to_grapheme_idx`."""
        to_grapheme_idx = min(to_grapheme_idx, self.grapheme_count())
        if to_grapheme_idx <= 0:
            return None
        matches = self.find_all(query, range(0, self.char_offset(to_grapheme_idx)))
        return matches[-1][0] if matches else None


def _rebase(annotation: Annotation, sources: list[Optional[int]]) -> Optional[tuple]:
    """Maps a line-wide annotation onto the parts of a visible substring.

    Returns the ``(type, start, end)`` arguments for ``add_annotation``,
    or None when no visible part is covered.
    """
    covered = [
        part_idx
        for part_idx, source in enumerate(sources)
        if source is not None and annotation.start <= source < annotation.end
    ]
    if not covered:
        return None
    return annotation.annotation_type, covered[0], covered[-1] + 1
