# src/gred/core/Highlighter.py
"""gred.core.Highlighter
============================
Per-line annotation of the visible document.

Annotations are registered in a fixed order so that later ones win where
they overlap:

1. lexical classes (numbers, keywords, strings, ...),
2. every occurrence of the search query,
3. the selected occurrence on the cursor line.

Lexical classification is a small fixed set of token classes computed one
line at a time. When pygments knows a lexer for the file name it is used,
otherwise only ASCII digits are marked.
"""

import logging
from typing import Optional, Protocol

from pygments import lex
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_for_filename
from pygments.lexers.special import TextLexer
from pygments.token import Token
from pygments.util import ClassNotFound

from .AnnotatedString import Annotation, AnnotationType
from .geometry import Location
from .Line import Line


logger = logging.getLogger("gred")

# Most specific token types first; lookups walk up the token hierarchy.
TOKEN_ANNOTATIONS = {
    Token.Keyword.Type: AnnotationType.TYPE,
    Token.Keyword.Constant: AnnotationType.KNOWN_VALUE,
    Token.Name.Builtin.Pseudo: AnnotationType.KNOWN_VALUE,
    Token.Keyword: AnnotationType.KEYWORD,
    Token.Literal.Number: AnnotationType.NUMBER,
    Token.Literal.String.Char: AnnotationType.CHAR,
    Token.Literal.String: AnnotationType.STRING,
    Token.Comment: AnnotationType.COMMENT,
}


def annotation_type_for_token(token_type) -> Optional[AnnotationType]:
    """Maps a pygments token type to an annotation type, or None."""
    current_type = token_type
    while current_type:
        if current_type in TOKEN_ANNOTATIONS:
            return TOKEN_ANNOTATIONS[current_type]
        current_type = current_type.parent
    return None


class LexicalClassifier(Protocol):
    def classify(self, line: Line) -> list[Annotation]: ...


class DigitClassifier:
    """Marks every ASCII digit as a number."""

    def classify(self, line: Line) -> list[Annotation]:
        return [
            Annotation(AnnotationType.NUMBER, idx, idx + 1)
            for idx, fragment in enumerate(line.fragments)
            if fragment.grapheme.isascii() and fragment.grapheme.isdigit()
        ]


class PygmentsClassifier:
    """Classifies a single line with a pygments lexer.

    Each line is lexed on its own, so constructs spanning several lines
    (block comments, multi-line strings) are not recognised.

    Args:
        lexer: The pygments lexer to run over each line.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer

    def classify(self, line: Line) -> list[Annotation]:
        annotations: list[Annotation] = []
        if line.is_empty():
            return annotations
        text = line.raw_text()
        offset = 0
        for token_type, value in lex(text, self.lexer):
            start, offset = offset, offset + len(value)
            if start >= len(text):
                break
            annotation_type = annotation_type_for_token(token_type)
            if annotation_type is None or not value:
                continue
            start_idx = line.grapheme_idx_at_offset(start)
            end_idx = line.grapheme_idx_at_offset(min(offset, len(text)) - 1) + 1
            annotations.append(Annotation(annotation_type, start_idx, end_idx))
        return annotations


def classifier_for(file_name: Optional[str]) -> LexicalClassifier:
    """Picks a classifier for `file_name`: pygments when it has a lexer."""
    if not file_name:
        return DigitClassifier()
    try:
        lexer = get_lexer_for_filename(file_name, stripnl=False, ensurenl=False)
    except ClassNotFound:
        logger.debug(f"No lexer for '{file_name}', highlighting digits only")
        return DigitClassifier()
    if isinstance(lexer, TextLexer):
        return DigitClassifier()
    logger.debug(f"Using pygments lexer '{lexer.name}' for '{file_name}'")
    return PygmentsClassifier(lexer)


## ==================== Highlighter ====================
class Highlighter:
    """Collects the annotations of the lines drawn in one frame.

    Args:
        matched_word: Current search query, if any.
        selected_match: Location of the selected occurrence, if any.
        classifier: Lexical classifier; digits only by default.
    """

    def __init__(
        self,
        matched_word: Optional[str] = None,
        selected_match: Optional[Location] = None,
        classifier: Optional[LexicalClassifier] = None,
    ) -> None:
        self.matched_word = matched_word
        self.selected_match = selected_match
        self.classifier: LexicalClassifier = classifier or DigitClassifier()
        self.highlights: dict[int, list[Annotation]] = {}

    def highlight(self, line_idx: int, line: Line) -> None:
        """Computes and stores the annotations of line `line_idx`."""
        annotations = self.classifier.classify(line)
        selected = None
        if self.selected_match is not None and self.selected_match.line_idx == line_idx:
            selected = self.selected_match.grapheme_idx
        annotations.extend(line.match_annotations(self.matched_word, selected))
        self.highlights[line_idx] = annotations

    def get_annotations(self, line_idx: int) -> list[Annotation]:
        return self.highlights.get(line_idx, [])
