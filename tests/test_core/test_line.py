# tests/test_core/test_line.py
"""Unit tests for `gred.core.Line`.

Covers grapheme segmentation, the width table and replacement glyphs,
coordinate translation, visible substrings and in-line search.
"""

import pytest

from gred.core.AnnotatedString import Annotation, AnnotationType
from gred.core.Line import GraphemeWidth, Line, display_width

SAMPLES = [
    "",
    "hello",
    "a中b",
    "e\u0301x",
    "tab\there",
    "mixed 中文 and e\u0301 \u3000 end",
    "\ufeffbom",
    "emoji 👍 ok",
]


# --- segmentation and widths ---

def test_combining_sequence_is_one_grapheme() -> None:
    line = Line("e\u0301x")
    assert line.grapheme_count() == 2
    assert line.fragments[0].grapheme == "e\u0301"
    assert line.width_until(2) == 2


def test_wide_characters_take_two_columns() -> None:
    line = Line("a中b")
    assert [line.width_until(g) for g in range(4)] == [0, 1, 3, 4]
    assert line.fragments[1].width is GraphemeWidth.FULL


@pytest.mark.parametrize("text", SAMPLES)
def test_width_until_is_monotonic_and_sums_fragments(text: str) -> None:
    line = Line(text)
    widths = [line.width_until(g) for g in range(line.grapheme_count() + 1)]
    assert widths == sorted(widths)
    assert widths[-1] == sum(f.width for f in line.fragments)


def test_width_until_clamps_past_the_end() -> None:
    line = Line("abc")
    assert line.width_until(100) == 3


@pytest.mark.parametrize("text", SAMPLES)
def test_raw_text_round_trips(text: str) -> None:
    assert Line.from_string(text).raw_text() == text
    assert str(Line(text)) == text


@pytest.mark.parametrize("text", SAMPLES)
def test_segmentation_is_idempotent(text: str) -> None:
    assert Line(text).fragments == Line(text).fragments


@pytest.mark.parametrize(
    "text, replacement",
    [
        ("\t", " "),
        ("\x07", "▯"),
        ("\ufeff", "·"),
        ("\u3000", "␣"),
        ("\u00a0", "␣"),
    ],
)
def test_replacement_glyphs_render_in_one_column(text: str, replacement: str) -> None:
    fragment = Line(text).fragments[0]
    assert fragment.replacement == replacement
    assert fragment.width is GraphemeWidth.HALF
    assert fragment.grapheme == text


def test_plain_space_has_no_replacement() -> None:
    fragment = Line(" ").fragments[0]
    assert fragment.replacement is None
    assert fragment.width is GraphemeWidth.HALF


def test_lone_combining_mark_has_zero_width() -> None:
    assert Line("\u0301").width() == 0


def test_display_width_counts_columns() -> None:
    assert display_width("a中") == 3
    assert display_width("") == 0


# --- offsets ---

def test_char_and_byte_offsets() -> None:
    line = Line("aéb")
    assert line.char_offset(2) == 2
    assert line.byte_offset(2) == 3
    assert line.char_offset(99) == 3
    assert line.byte_offset(99) == 4


def test_grapheme_idx_at_offset_maps_inside_clusters() -> None:
    line = Line("e\u0301x")
    assert line.grapheme_idx_at_offset(0) == 0
    assert line.grapheme_idx_at_offset(1) == 0
    assert line.grapheme_idx_at_offset(2) == 1
    assert line.grapheme_idx_at_offset(3) == 2


def test_grapheme_idx_at_offset_follows_edits() -> None:
    line = Line("ab")
    line.insert_char("\u4e2d", 0)
    assert line.fragment_starts == [0, 1, 2]
    assert line.grapheme_idx_at_offset(2) == 2
    line.delete(0)
    assert line.fragment_starts == [0, 1]
    assert line.grapheme_idx_at_offset(1) == 1


# --- visible substring ---

def test_visible_substring_keeps_whole_fragments() -> None:
    line = Line("a中b")
    assert str(line.visible_substring(range(0, 2))) == "a中"
    assert str(line.visible_substring(range(1, 2))) == "中"
    assert str(line.visible_substring(range(0, 1))) == "a"


def test_visible_substring_marks_wide_fragment_cut_on_the_left() -> None:
    line = Line("a中b")
    assert str(line.visible_substring(range(2, 4))) == "⋯b"


def test_visible_substring_substitutes_replacements() -> None:
    assert str(Line("a\tb\x01").visible_substring(range(0, 10))) == "a b▯"


def test_visible_substring_of_empty_range() -> None:
    assert str(Line("abc").visible_substring(range(2, 2))) == ""


def test_visible_substring_rebases_annotations() -> None:
    line = Line("x 42 y")
    visible = line.visible_substring(
        range(2, 6), annotations=[Annotation(AnnotationType.NUMBER, 2, 4)]
    )
    assert str(visible) == "42 y"
    segments = [(s.text, s.annotation_type) for s in visible]
    assert segments == [("42", AnnotationType.NUMBER), (" y", None)]


def test_visible_substring_clips_annotations_to_the_window() -> None:
    line = Line("abcdef")
    visible = line.visible_substring(
        range(2, 4), annotations=[Annotation(AnnotationType.KEYWORD, 0, 6)]
    )
    assert visible.annotations == [Annotation(AnnotationType.KEYWORD, 0, 2)]


def test_visible_substring_annotates_matches_and_selection() -> None:
    visible = Line("abcabc").visible_substring(range(0, 10), query="bc", selected_match=4)
    segments = [(s.text, s.annotation_type) for s in visible]
    assert segments == [
        ("a", None),
        ("bc", AnnotationType.MATCH),
        ("a", None),
        ("bc", AnnotationType.SELECTED_MATCH),
    ]


def test_selected_match_requires_an_occurrence_there() -> None:
    annotations = Line("abcabc").match_annotations("bc", selected_match=2)
    assert all(a.annotation_type is AnnotationType.MATCH for a in annotations)


# --- mutation ---

def test_insert_wide_character_into_empty_line() -> None:
    line = Line()
    line.insert_char("中", 0)
    assert line.width_until(1) == 2


@pytest.mark.parametrize("text", ["", "abc", "a中b", "e\u0301x"])
def test_insert_then_delete_restores_text(text: str) -> None:
    for g in range(Line(text).grapheme_count() + 1):
        line = Line(text)
        line.insert_char("x", g)
        line.delete(g)
        assert line.raw_text() == text


def test_delete_out_of_range_is_noop() -> None:
    line = Line("ab")
    line.delete(2)
    line.delete(-1)
    assert line.raw_text() == "ab"


def test_delete_removes_whole_cluster() -> None:
    line = Line("e\u0301x")
    line.delete(0)
    assert line.raw_text() == "x"


def test_split_and_append() -> None:
    head, tail = Line("hello world").split(5)
    assert (head.raw_text(), tail.raw_text()) == ("hello", " world")
    head.append(tail)
    assert head.raw_text() == "hello world"


def test_delete_last() -> None:
    line = Line("ab")
    line.delete_last()
    assert line.raw_text() == "a"
    Line().delete_last()


# --- search ---

def test_find_all_is_non_overlapping() -> None:
    assert Line("aaaa").find_all("aa") == [(0, 2), (2, 4)]
    assert Line("aaaa").find_all("aa", range(1, 4)) == [(1, 3)]


def test_find_all_range_is_in_code_points() -> None:
    line = Line("\u4e2dab\u4e2dab")
    assert line.find_all("ab", char_range=range(3, 6)) == [(4, 6)]
    assert line.find_all("ab", char_range=range(line.char_offset(1), 3)) == [(1, 3)]


def test_find_all_only_reports_grapheme_aligned_matches() -> None:
    assert Line("e\u0301e").find_all("e") == [(1, 2)]


def test_find_all_with_empty_needle() -> None:
    assert Line("abc").find_all("") == []


def test_find_all_is_case_sensitive() -> None:
    assert Line("Abc abc").find_all("abc") == [(4, 7)]


def test_search_forward_and_backward() -> None:
    line = Line("ab ab ab")
    assert line.search_forward("ab", 1) == 3
    assert line.search_forward("ab", 7) is None
    assert line.search_forward("ab", 9) is None
    assert line.search_backward("ab", 5) == 3
    assert line.search_backward("ab", 4) == 0
    assert line.search_backward("ab", 0) is None
