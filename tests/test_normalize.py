import pytest

from utils.normalize import (
    coerce_id,
    encode_options,
    is_blank,
    normalize_card_kind,
    normalize_commentary,
    normalize_folder_kind,
    normalize_options,
    normalize_srs_level,
)


@pytest.mark.parametrize(
    "raw",
    [None, "", "null", "{not json", "[1, 2", b"", 0, "5", '"abc"', "true", '{"a": 1}', {"a": 1}],
)
def test_normalize_options_falls_back_to_empty_list(raw):
    assert normalize_options(raw) == []


def test_normalize_options_passes_structured_values_through():
    options = [{"text": "A", "correct": True}, {"text": "B", "correct": False}]
    assert normalize_options(options) is options


def test_normalize_options_parses_json_text():
    assert normalize_options('["a", "b"]') == ["a", "b"]


def test_encode_options_only_keeps_lists():
    assert encode_options(["a", "b"]) == '["a", "b"]'
    assert encode_options(None) == "[]"
    assert encode_options({"a": 1}) == "[]"
    assert encode_options("a,b") == "[]"


def test_scalar_defaults():
    assert normalize_card_kind(None) == "text"
    assert normalize_card_kind("") == "text"
    assert normalize_card_kind("multiple_choice") == "multiple_choice"
    assert normalize_srs_level(None) == 0
    assert normalize_srs_level(0) == 0
    assert normalize_srs_level(3) == 3
    assert normalize_srs_level("4") == 4
    assert normalize_srs_level(-2) == 0
    assert normalize_srs_level("high") == 0
    assert normalize_commentary(None) == ""
    assert normalize_commentary("see chapter 2") == "see chapter 2"


def test_normalize_folder_kind_only_accepts_known_kinds():
    assert normalize_folder_kind("questions") == "questions"
    assert normalize_folder_kind("flashcards") == "flashcards"
    assert normalize_folder_kind("videos") == "flashcards"
    assert normalize_folder_kind(None) == "flashcards"


def test_coerce_id_matches_text_and_numbers():
    assert coerce_id("5") == coerce_id(5) == 5
    assert coerce_id("5.0") == 5
    assert coerce_id(None) is None
    assert coerce_id("abc") is None
    assert coerce_id(True) is None


def test_coerce_id_keeps_large_ids_exact():
    big = 2 ** 53
    assert coerce_id(big + 1) != coerce_id(big)
    assert coerce_id(str(big + 1)) == big + 1
    assert coerce_id(" 7 ") == 7


def test_is_blank():
    assert is_blank(None)
    assert is_blank("   ")
    assert not is_blank("x")
    assert not is_blank(0)
