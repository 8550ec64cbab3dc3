# src/gred/core/__init__.py
"""Public facade for gred.core: re-export main classes from CamelCase modules.

Keeps Java-like file names (Line.py, View.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .AnnotatedString import AnnotatedSegment, AnnotatedString, Annotation, AnnotationType  # noqa: F401
from .Buffer import Buffer, FileInfo  # noqa: F401
from .Commands import Command, Edit, EditKind, Move, System, SystemKind  # noqa: F401
from .geometry import Location, Position, Size  # noqa: F401
from .Highlighter import Highlighter  # noqa: F401
from .Line import GraphemeWidth, Line, TextFragment  # noqa: F401
from .View import DocumentStatus, SearchDirection, SearchSession, View  # noqa: F401
from .Editor import Editor  # noqa: F401


__all__ = [
    "AnnotatedSegment",
    "AnnotatedString",
    "Annotation",
    "AnnotationType",
    "Buffer",
    "FileInfo",
    "Command",
    "Edit",
    "EditKind",
    "Move",
    "System",
    "SystemKind",
    "Location",
    "Position",
    "Size",
    "Highlighter",
    "GraphemeWidth",
    "Line",
    "TextFragment",
    "DocumentStatus",
    "SearchDirection",
    "SearchSession",
    "View",
    "Editor",
]
