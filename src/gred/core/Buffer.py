# src/gred/core/Buffer.py
"""gred.core.Buffer
============================
The document: an ordered, never-empty list of lines plus its file.

Edits are addressed by ``Location`` (line index, grapheme index). A
location one past the last line is accepted by the insert operations and
appends a new line. Every successful edit marks the buffer dirty; saving
clears the flag.

File I/O errors are not handled here. They propagate as ``OSError`` to
the caller, which keeps its previous state.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from .geometry import Location
from .Line import Line


logger = logging.getLogger("gred")

PathLike = Union[str, Path]


def detect_file_type(path: Optional[Path]) -> str:
    """Human readable file type for `path`, guessed from its name."""
    if path is None:
        return "Text"
    try:
        return get_lexer_for_filename(path.name).name
    except ClassNotFound:
        return "Text"


class FileInfo:
    """Path and type of the file behind a buffer."""

    def __init__(self, path: Optional[PathLike] = None) -> None:
        self.path: Optional[Path] = Path(path) if path is not None else None
        self.file_type: str = detect_file_type(self.path)

    def has_path(self) -> bool:
        return self.path is not None

    def name(self) -> Optional[str]:
        return self.path.name if self.path is not None else None

    def __str__(self) -> str:
        return self.path.name if self.path is not None else "[No Name]"


def split_lines(contents: str) -> list[Line]:
    """Splits file contents into lines.

    A trailing ``\\r`` is stripped from each line and the empty piece after
    a final newline is dropped. At least one line is always returned.
    """
    pieces = contents.split("\n")
    if len(pieces) > 1 and pieces[-1] == "":
        pieces.pop()
    return [Line(piece[:-1] if piece.endswith("\r") else piece) for piece in pieces]


## ==================== Buffer ====================
class Buffer:
    def __init__(
        self, lines: Optional[list[Line]] = None, file_info: Optional[FileInfo] = None
    ) -> None:
        self.lines: list[Line] = lines or [Line()]
        self.file_info: FileInfo = file_info or FileInfo()
        self.dirty: bool = False

    @classmethod
    def from_text(cls, text: str) -> "Buffer":
        return cls(split_lines(text))

    @classmethod
    def load(cls, path: PathLike) -> "Buffer":
        """Reads a UTF-8 file into a new buffer.

        Undecodable bytes are replaced rather than rejected.

        Raises:
            OSError: The file could not be opened or read.
        """
        with open(path, encoding="utf-8", errors="replace", newline="") as handle:
            contents = handle.read()
        buffer = cls(split_lines(contents), FileInfo(path))
        logger.info(f"Loaded '{path}' ({buffer.height()} lines, {buffer.file_info.file_type})")
        return buffer

    def to_text(self) -> str:
        if self.is_empty():
            return ""
        return "\n".join(line.raw_text() for line in self.lines) + "\n"

    def _write(self, path: Path) -> None:
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(self.to_text())
        logger.info(f"Wrote {self.height()} lines to '{path}'")

    def save(self) -> None:
        """Writes the buffer to its file and clears the dirty flag.

        Raises:
            FileNotFoundError: The buffer has no file name yet.
            OSError: Writing failed; the dirty flag is left unchanged.
        """
        if self.file_info.path is None:
            raise FileNotFoundError("No file name set for this buffer")
        self._write(self.file_info.path)
        self.dirty = False

    def save_as(self, path: PathLike) -> None:
        """Writes the buffer to `path` and makes it the buffer's file."""
        file_info = FileInfo(path)
        self._write(file_info.path)
        self.file_info = file_info
        self.dirty = False

    def is_file_loaded(self) -> bool:
        return self.file_info.has_path()

    def is_empty(self) -> bool:
        return len(self.lines) == 1 and self.lines[0].is_empty()

    def height(self) -> int:
        return len(self.lines)

    def grapheme_count(self, line_idx: int) -> int:
        if 0 <= line_idx < len(self.lines):
            return self.lines[line_idx].grapheme_count()
        return 0

    def width_until(self, line_idx: int, grapheme_idx: int) -> int:
        if 0 <= line_idx < len(self.lines):
            return self.lines[line_idx].width_until(grapheme_idx)
        return 0

    # --- edits ---

    def insert_char(self, character: str, at: Location) -> None:
        if at.line_idx == self.height():
            self.lines.append(Line(character))
        elif 0 <= at.line_idx < self.height():
            self.lines[at.line_idx].insert_char(character, at.grapheme_idx)
        else:
            return
        self.dirty = True

    def insert_newline(self, at: Location) -> None:
        if at.line_idx == self.height():
            self.lines.append(Line())
        elif 0 <= at.line_idx < self.height():
            head, tail = self.lines[at.line_idx].split(at.grapheme_idx)
            self.lines[at.line_idx : at.line_idx + 1] = [head, tail]
        else:
            return
        self.dirty = True

    def delete(self, at: Location) -> None:
        """Deletes the grapheme at `at`.

        At the end of a line the next line is joined onto it instead.
        """
        if not 0 <= at.line_idx < self.height():
            return
        line = self.lines[at.line_idx]
        if at.grapheme_idx >= line.grapheme_count():
            if at.line_idx + 1 < self.height():
                line.append(self.lines.pop(at.line_idx + 1))
                self.dirty = True
        else:
            line.delete(at.grapheme_idx)
            self.dirty = True

    # --- search ---

    def search_forward(self, query: str, start: Location) -> Optional[Location]:
        """Searches from `start` to the end, wrapping around once.

        The start line is visited twice: from `start` to its end first, and
        from its beginning again after the wrap.
        """
        if not query:
            return None
        height = self.height()
        for step in range(height + 1):
            line_idx = (start.line_idx + step) % height
            from_idx = start.grapheme_idx if step == 0 else 0
            found = self.lines[line_idx].search_forward(query, from_idx)
            if found is not None:
                return Location(line_idx, found)
        return None

    def search_backward(self, query: str, start: Location) -> Optional[Location]:
        """Searches from `start` towards the beginning, wrapping around once.

        Only occurrences that end at or before `start` qualify on the first
        visit of the start line.
        """
        if not query:
            return None
        height = self.height()
        for step in range(height + 1):
            line_idx = (start.line_idx - step) % height
            line = self.lines[line_idx]
            to_idx = start.grapheme_idx if step == 0 else line.grapheme_count()
            found = line.search_backward(query, to_idx)
            if found is not None:
                return Location(line_idx, found)
        return None
