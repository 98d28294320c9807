"""Tests for input validation helpers."""

import pytest

from validation import normalize_content_format, validate_date, validate_email


class TestValidateEmail:

    @pytest.mark.parametrize("address", ["a@example.com", "first.last+tag@sub.example.co.uk"])
    def test_valid(self, address: str) -> None:
        assert validate_email(address) == address

    def test_strips_whitespace(self) -> None:
        assert validate_email("  a@example.com ") == "a@example.com"

    @pytest.mark.parametrize("address", ["", "plain", "a@b", "a b@example.com", "@example.com", "Ann <a@example.com>"])
    def test_invalid(self, address: str) -> None:
        with pytest.raises(ValueError, match="Invalid email address"):
            validate_email(address)


class TestValidateDate:

    def test_valid(self) -> None:
        assert validate_date("2024-02-29") == "2024-02-29"

    @pytest.mark.parametrize("value", ["2024/01/01", "24-01-01", "2024-1-1", "2024-01-01T00:00"])
    def test_wrong_shape(self, value: str) -> None:
        with pytest.raises(ValueError, match="YYYY-MM-DD"):
            validate_date(value)

    @pytest.mark.parametrize("value", ["2023-02-29", "2024-13-01", "2024-00-10"])
    def test_not_a_calendar_date(self, value: str) -> None:
        with pytest.raises(ValueError, match="calendar date"):
            validate_date(value)


class TestNormalizeContentFormat:

    def test_default_is_html(self) -> None:
        assert normalize_content_format(None) == "html"

    @pytest.mark.parametrize("value", ["html", "text"])
    def test_known(self, value: str) -> None:
        assert normalize_content_format(value) == value

    @pytest.mark.parametrize("value", ["xml", "HTML", ""])
    def test_unknown(self, value: str) -> None:
        assert normalize_content_format(value) is None
