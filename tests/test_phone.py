"""Tests for phone number normalization (formatting characters stripped)."""


from roster.domain import normalize_phone


def test_normalize_strips_spaces_hyphens_and_parentheses():
    assert normalize_phone("(555) 010-1") == "5550101"
    assert normalize_phone("555-0101") == "5550101"
    assert normalize_phone("+1 202 555 1234") == "+12025551234"


def test_normalize_keeps_other_characters():
    assert normalize_phone("+39.312.345") == "+39.312.345"
    assert normalize_phone("555x12") == "555x12"


def test_normalize_empty_returns_none():
    assert normalize_phone(None) is None
    assert normalize_phone("") is None
    assert normalize_phone("  - ( ) ") is None


def test_normalize_whitespace_stripped():
    assert normalize_phone("  5550101\t") == "5550101"
