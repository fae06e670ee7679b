"""Tests for filename sanitizing."""

import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from image_namer.naming.sanitize import MAX_FILENAME_LENGTH, sanitize_filename

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


class TestSanitizeFilename:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("A Red Sports Car!", "a-red-sports-car"),
            ('"sunset-over-lake"', "sunset-over-lake"),
            ("'Quoted Name'", "quoted-name"),
            ("multiple   spaces\there", "multiple-spaces-here"),
            ("--leading and trailing--", "leading-and-trailing"),
            ("double--hyphen", "double-hyphen"),
            ("a - b", "a-b"),
            ("snake_case_name", "snakecasename"),
            ("café-au-lait", "caf-au-lait"),
            ("cat.jpg", "catjpg"),
            ("UPPER", "upper"),
            ("!!!", ""),
            ("", ""),
        ],
    )
    def test_examples(self, raw: str, expected: str) -> None:
        assert sanitize_filename(raw) == expected

    def test_truncates_to_30(self) -> None:
        result = sanitize_filename("a" * 50)
        assert result == "a" * MAX_FILENAME_LENGTH

    def test_no_trailing_hyphen_after_truncation(self) -> None:
        raw = "a" * 29 + " bcd"
        result = sanitize_filename(raw)
        assert result == "a" * 29
        assert sanitize_filename(result) == result

    def test_multiline_model_output(self) -> None:
        assert sanitize_filename("Golden Retriever\nPuppy") == "golden-retriever-puppy"


class TestSanitizeProperties:
    @given(st.text())
    def test_idempotent(self, text: str) -> None:
        once = sanitize_filename(text)
        assert sanitize_filename(once) == once

    @given(st.text())
    def test_output_is_slug_or_empty(self, text: str) -> None:
        result = sanitize_filename(text)
        assert result == "" or SLUG_PATTERN.match(result)
        assert len(result) <= MAX_FILENAME_LENGTH

    @given(st.from_regex(r"[a-z0-9]{1,8}( [a-z0-9]{1,8}){0,2}", fullmatch=True))
    def test_simple_phrases_keep_words(self, text: str) -> None:
        assert sanitize_filename(text) == text.replace(" ", "-")
