"""Tests for tag extraction and validation."""

from git_pr.core.tags import extract_from_many, extract_from_str, is_valid_tag, normalize_tag


def test_extract_from_str_strips_brackets() -> None:
    assert extract_from_str("[TRACK-123]: Add login") == "TRACK-123"


def test_extract_from_str_returns_first_tag() -> None:
    assert extract_from_str("Fix [A-1] and [B-2]") == "A-1"


def test_extract_from_str_requires_brackets() -> None:
    assert extract_from_str("TRACK-123 without brackets") is None


def test_extract_from_str_rejects_leading_hyphen() -> None:
    assert extract_from_str("[-oops] nope") is None


def test_extract_from_str_rejects_empty_brackets() -> None:
    assert extract_from_str("[] empty") is None


def test_extract_from_str_keeps_case() -> None:
    assert extract_from_str("[track-1]: lower") == "track-1"


def test_extract_from_str_accepts_underscores_and_digits() -> None:
    assert extract_from_str("[my_tag2]: x") == "my_tag2"


def test_extract_from_many_returns_first_tagged_text() -> None:
    texts = ["polish", "[T-2]: second", "[T-1]: first"]

    assert extract_from_many(texts) == ("T-2", "[T-2]: second")


def test_extract_from_many_without_tags() -> None:
    assert extract_from_many(["one", "two"]) is None


def test_extract_from_many_empty() -> None:
    assert extract_from_many([]) is None


def test_is_valid_tag_accepts_bare_and_bracketed() -> None:
    assert is_valid_tag("TRACK-1")
    assert is_valid_tag("[TRACK-1]")
    assert is_valid_tag("  TRACK-1  ")


def test_is_valid_tag_rejects_bad_input() -> None:
    assert not is_valid_tag("")
    assert not is_valid_tag("two words")
    assert not is_valid_tag("-leading")
    assert not is_valid_tag("[TRACK-1")
    assert not is_valid_tag("TRACK-1]")


def test_normalize_tag() -> None:
    assert normalize_tag(" [TRACK-1] ") == "TRACK-1"
    assert normalize_tag("TRACK-1") == "TRACK-1"
