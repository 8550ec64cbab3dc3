# src/gred/core/Commands.py
"""The closed set of commands the editor understands.

Key decoding produces these; the editor and the view consume them.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from .geometry import Size


class Move(Enum):
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    START_OF_LINE = auto()
    END_OF_LINE = auto()
    UP = auto()
    LEFT = auto()
    RIGHT = auto()
    DOWN = auto()


class EditKind(Enum):
    INSERT = auto()
    INSERT_NEWLINE = auto()
    DELETE = auto()
    DELETE_BACKWARD = auto()


@dataclass(frozen=True)
class Edit:
    kind: EditKind
    character: Optional[str] = None

    @classmethod
    def insert(cls, character: str) -> "Edit":
        return cls(EditKind.INSERT, character)

    @classmethod
    def insert_newline(cls) -> "Edit":
        return cls(EditKind.INSERT_NEWLINE)

    @classmethod
    def delete(cls) -> "Edit":
        return cls(EditKind.DELETE)

    @classmethod
    def delete_backward(cls) -> "Edit":
        return cls(EditKind.DELETE_BACKWARD)


class SystemKind(Enum):
    SAVE = auto()
    RESIZE = auto()
    QUIT = auto()
    SEARCH = auto()
    DISMISS = auto()


@dataclass(frozen=True)
class System:
    kind: SystemKind
    size: Optional[Size] = None

    @classmethod
    def resize(cls, size: Size) -> "System":
        return cls(SystemKind.RESIZE, size)


Command = Union[Move, Edit, System]
