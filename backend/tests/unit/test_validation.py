"""Unit tests for participant validation rules."""
import pytest

from codescape.core.exceptions import ValidationError
from codescape.services.validation import (
    clean_participant,
    is_valid_email,
    parse_team_size,
    validate_participant,
)


class TestParseTeamSize:
    """Test parse_team_size function."""

    @pytest.mark.parametrize("value,expected", [
        (3, 3),
        ("7", 7),
        (" 4 ", 4),
        (5.0, 5),
        ("-2", -2),
    ])
    def test_whole_numbers(self, value, expected):
        assert parse_team_size(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "3.5", 2.5, True, [3]])
    def test_not_whole_numbers(self, value):
        assert parse_team_size(value) is None

    def test_huge_digit_string_is_rejected(self):
        """Digit strings past int() conversion limits must not raise."""
        assert parse_team_size("9" * 5000) is None
        assert parse_team_size("1234567890") is None


class TestEmailPattern:
    """Test the server-side email pattern."""

    @pytest.mark.parametrize("email", [
        "ada@x.com",
        "first.last@example.org",
        "dev-team@mail.example.co.uk",
        "a_b@domain.io",
    ])
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", [
        "plainaddress",
        "missing@tld",
        "two@@example.com",
        "trailing.@example.com",
        "user@example.c",
        "user@example.abcd",
        "spaces in@example.com",
        "ada@x.com\n",
    ])
    def test_invalid(self, email):
        assert not is_valid_email(email)


class TestValidateParticipant:
    """Test validate_participant function."""

    def test_valid_input_is_normalized(self):
        """Name is trimmed, email lowercased, team size parsed."""
        cleaned, errors = validate_participant(
            {"name": "  Ada Lovelace ", "email": " ADA@X.COM ", "teamSize": "3"}
        )

        assert errors == []
        assert cleaned == {"name": "Ada Lovelace", "email": "ada@x.com", "team_size": 3}

    def test_reports_every_violation(self):
        """All violated fields are listed, not just the first one."""
        _, errors = validate_participant({"name": " ", "email": "nope", "teamSize": 11})

        assert errors == [
            "Name is required",
            "Please enter a valid email",
            "Team size cannot exceed 10",
        ]

    def test_missing_fields(self):
        _, errors = validate_participant({})

        assert errors == ["Name is required", "Email is required", "Team size is required"]

    def test_name_too_long(self):
        _, errors = validate_participant({"name": "x" * 101, "email": "a@b.com", "teamSize": 1})

        assert errors == ["Name cannot exceed 100 characters"]

    def test_name_at_limit(self):
        _, errors = validate_participant({"name": "x" * 100, "email": "a@b.com", "teamSize": 1})

        assert errors == []

    @pytest.mark.parametrize("team_size,message", [
        (0, "Team size must be at least 1"),
        (-3, "Team size must be at least 1"),
        (11, "Team size cannot exceed 10"),
        ("lots", "Team size must be a whole number"),
        (2.5, "Team size must be a whole number"),
        ("9" * 5000, "Team size must be a whole number"),
    ])
    def test_team_size_rules(self, team_size, message):
        _, errors = validate_participant({"name": "Ada", "email": "a@b.com", "teamSize": team_size})

        assert errors == [message]

    @pytest.mark.parametrize("team_size", [1, 10])
    def test_team_size_bounds_inclusive(self, team_size):
        _, errors = validate_participant({"name": "Ada", "email": "a@b.com", "teamSize": team_size})

        assert errors == []

    def test_accepts_snake_case_team_size(self):
        cleaned, errors = validate_participant({"name": "Ada", "email": "a@b.com", "team_size": 2})

        assert errors == []
        assert cleaned["team_size"] == 2


class TestCleanParticipant:
    """Test clean_participant function."""

    def test_raises_with_all_messages(self):
        with pytest.raises(ValidationError) as exc_info:
            clean_participant({"name": "", "email": "", "teamSize": None})

        error = exc_info.value
        assert error.status_code == 400
        assert error.messages == ["Name is required", "Email is required", "Team size is required"]
        assert error.message == "Name is required, Email is required, Team size is required"
