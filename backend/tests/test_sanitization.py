"""
Tests for log and column-name sanitization.
"""
from chartengine.core.sanitization import sanitize_for_logging, validate_column_name


def test_sanitize_for_logging():
    """Test logging sanitization."""
    # Newlines become spaces
    assert sanitize_for_logging("test\nlog") == "test log"
    assert "\r" not in sanitize_for_logging("test\rlog")

    # Control characters removed
    assert sanitize_for_logging("test\x00log") == "testlog"

    # Length limit with ellipsis
    sanitized = sanitize_for_logging("a" * 600)
    assert len(sanitized) == 203
    assert sanitized.endswith("...")

    assert sanitize_for_logging(None) == ""
    assert sanitize_for_logging(42) == "42"


def test_validate_column_name():
    """Test column name validation."""
    # Valid names, including what spreadsheets commonly produce
    assert validate_column_name("valid_column") is True
    assert validate_column_name("Revenue ($)") is True
    assert validate_column_name("Q1\tsales") is True
    assert validate_column_name("Ümsatz 2024") is True

    # Invalid names
    assert validate_column_name("") is False
    assert validate_column_name("   ") is False
    assert validate_column_name("bad\x00name") is False
    assert validate_column_name(12) is False
    assert validate_column_name(None) is False

    # Too long
    assert validate_column_name("a" * 1001) is False
    assert validate_column_name("a" * 1000) is True
