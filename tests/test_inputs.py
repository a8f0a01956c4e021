"""Tests for query-string and spreadsheet input parsing."""

import pandas as pd
import pytest

from radar_inputs import coerce_magnitude, magnitudes_from_frame, magnitudes_from_sheet, parse_query


@pytest.mark.parametrize("raw,expected", [
    ("7", 7),
    (" 4 ", 4),
    ("3,6", 2),
    ("3.6", 3),
    (4.99, 4),
    ("Infinity", 9),
    ("-Infinity", 0),
    ("", 2),
    ("abc", 2),
    (None, 2),
    (12, 9),
    (-1, 0),
    (float("nan"), 2),
])
def test_coerce_magnitude(raw, expected):
    assert coerce_magnitude(raw, 9, 2) == expected


def test_parse_query_string(categories):
    q = "?koerper_bewegung=7&ernaehrung_genuss=3&stress_erholung=abc&geist_emotion=5"
    assert parse_query(q, categories, 9, 2) == [7, 3, 2, 5, 2, 2]


def test_parse_query_canonical_key_beats_alias(categories):
    q = "geist_emotion=1&geist_emotionen=8"
    assert parse_query(q, categories, 9, 2)[3] == 8


def test_parse_query_mapping(categories):
    params = {"umwelt_soziales": ["6", "1"], "lebenssinn_qualitaet": "15"}
    assert parse_query(params, categories, 9, 2) == [2, 2, 2, 2, 9, 6]


def test_parse_query_empty(categories):
    assert parse_query("", categories, 9, 3) == [3] * 6
    assert parse_query(None, categories, 9, 3) == [3] * 6


def test_sheet_rows(sample_csv, categories):
    rows = magnitudes_from_sheet(str(sample_csv), categories)
    assert rows == [
        ("Anna", [2, 9, 2, 5, 9, 1]),
        ("Ben", [7, 6, 4, 8, 3, 9]),
    ]


def test_frame_without_name_column(categories):
    df = pd.DataFrame([{c.key: 1 for c in categories}])
    rows = magnitudes_from_frame(df, categories, name_col="Name")
    assert rows == [("chart_1", [1] * 6)]


def test_frame_missing_column_raises(categories):
    df = pd.DataFrame([{"Name": "x", "koerper_bewegung": 3}])
    with pytest.raises(ValueError, match="ernaehrung_genuss"):
        magnitudes_from_frame(df, categories)


def test_parse_query_infinite_values_clamp(categories):
    q = "koerper_bewegung=Infinity&ernaehrung_genuss=-Infinity&stress_erholung=NaN"
    assert parse_query(q, categories, 9, 2)[:3] == [9, 0, 2]


def test_parse_query_fraction_fills_whole_rings(categories):
    q = "koerper_bewegung=3.6&ernaehrung_genuss=3,6"
    assert parse_query(q, categories, 9, 2)[:2] == [3, 2]
