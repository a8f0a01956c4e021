"""Tests for the two-line label layout."""

import pytest

from label_text import MARKER, chars_per_line, text_width, tokenize, two_line_layout


def test_tokenize_splits_internal_hyphens():
    assert tokenize("Stress-Erholung") == ["Stress", "-", "Erholung"]


def test_tokenize_keeps_leading_hyphen():
    assert tokenize("Lebenssinn & -qualität") == ["Lebenssinn", "&", "-qualität"]


def test_tokenize_blank():
    assert tokenize("   ") == []
    assert tokenize(None) == []


def test_chars_per_line():
    # (90 - 2*4) / (0.6 * 14) = 9.76
    assert chars_per_line(90, 14, padding=4) == 9
    assert chars_per_line(5, 14, padding=4) == 0


def test_ernaehrung_genuss_fits_two_lines():
    res = two_line_layout("Ernährung & Genuss", 90, 14, 8, padding=4)
    assert all(res.lines)
    assert res.fits
    assert 8 <= res.font_size <= 14
    longest = max(len(line) for line in res.lines)
    assert text_width("x" * longest, res.font_size) <= 90 - 2 * 4
    assert "".join(res.lines).replace(" ", "") == "Ernährung&Genuss"


def test_short_label_stays_on_one_line():
    res = two_line_layout("Bewegung", 120, 12, 8)
    assert res.lines == ("Bewegung", "")
    assert res.font_size == 12


def test_empty_label():
    res = two_line_layout("", 90, 14, 8)
    assert res.lines == ("", "")
    assert res.font_size == 14


def test_hyphen_break():
    # budget: (56 - 8) / 6 = 8 chars at 10px
    res = two_line_layout("Stress-Erholung", 56, 10, 10)
    assert res.lines == ("Stress-", "Erholung")
    assert res.fits


def test_long_token_shrinks_to_minimum_then_truncates():
    res = two_line_layout("Donaudampfschifffahrtsgesellschaftskapitän", 90, 14, 10)
    assert res.font_size == pytest.approx(10)
    assert not res.fits
    assert res.lines[0].endswith(MARKER)
    assert res.lines[1].endswith(MARKER)
    assert all(len(line) <= res.chars_per_line for line in res.lines)


def test_overflow_marks_second_line():
    res = two_line_layout("Ernährung & Genuss und noch viel mehr", 56, 10, 10)
    assert not res.fits
    assert res.lines[1].endswith(MARKER)
    assert all(len(line) <= 8 for line in res.lines)


def test_marker_only_second_line_is_folded():
    # one character per line at 10px: (17 - 8) / 6 = 1.5
    res = two_line_layout("ab", 17, 10, 10)
    assert res.lines == (MARKER, "")


def test_start_below_minimum_is_not_grown():
    res = two_line_layout("Bewegung", 200, 6, 8)
    assert res.font_size == 6


def test_zero_width_never_raises():
    res = two_line_layout("Bewegung", 0, 14, 8)
    assert res.lines == ("", "")
    assert 8 <= res.font_size <= 14


@pytest.mark.parametrize("label", [
    "Bewegung", "Ernährung & Genuss", "Lebenssinn & -qualität",
    "Umwelt & Soziales und sehr lange Zusatzangaben", "x" * 80,
])
@pytest.mark.parametrize("width", [40, 67, 90, 134])
def test_font_bounds_and_line_count(label, width):
    res = two_line_layout(label, width, 14, 9)
    assert len(res.lines) == 2
    assert 9 <= res.font_size <= 14
    if not res.lines[0]:
        assert not res.lines[1]
    if res.chars_per_line >= 1:
        assert all(len(line) <= res.chars_per_line for line in res.lines)


@pytest.mark.parametrize("steps", [0, -3, 1])
def test_no_shrink_steps_keeps_start_size(steps):
    res = two_line_layout("Donaudampfschifffahrtsgesellschaftskapitän", 90, 14, 8, max_iterations=steps)
    assert res.font_size == 14
    assert res.chars_per_line == chars_per_line(90, 14)


def test_layout_wraps_on_tokenizer_boundaries():
    label = "Stress-Erholung & Lebenssinn"
    res = two_line_layout(label, 134, 14, 8)
    pieces = "".join(res.lines).replace(" ", "")
    assert pieces == "".join(tokenize(label))
