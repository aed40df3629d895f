"""Tests for the validation engine."""

import pytest

from roster_manager.engine.validation_engine import (
    ValidationEngine,
    ValidationResult,
    ValidationSeverity,
    parse_age,
)
from roster_manager.profiles.base import Profile, ProfileDraft, Role


@pytest.fixture
def engine():
    return ValidationEngine()


class TestParseAge:
    """Tests for parse_age."""

    @pytest.mark.parametrize("value,expected", [(0, 0), (28, 28), ("28", 28), (" 7 ", 7), ("007", 7)])
    def test_valid(self, value, expected):
        assert parse_age(value) == expected

    @pytest.mark.parametrize("value", [-1, "-1", "", "abc", "28.5", "2 8", 28.0, None, True])
    def test_invalid(self, value):
        assert parse_age(value) is None


class TestValidateDraft:
    """Tests for draft validation."""

    def test_valid_draft(self, engine):
        result = engine.validate_draft(ProfileDraft(name="Ana", age=28, roles=["Audio"]))

        assert result.valid
        assert result.issues == []

    def test_role_enum_members_are_accepted(self, engine):
        result = engine.validate_draft(ProfileDraft(name="Ana", age=28, roles=[Role.VIDEO]))

        assert result.valid

    def test_collects_every_problem(self, engine):
        result = engine.validate_draft(ProfileDraft(name="", age="x", roles=["Audio", "Baile"]))

        assert not result.valid
        assert result.error_count == 3
        assert [i.path for i in result.issues] == ["name", "age", "roles[1]"]

    def test_negative_age_message(self, engine):
        result = engine.validate_draft(ProfileDraft(name="Ana", age="-4", roles=["Audio"]))

        assert "negative" in result.issues[0].message

    def test_path_prefix(self, engine):
        result = engine.validate_draft(ProfileDraft(name="Ana", age=1, roles=[]), path="line[3]")

        assert result.issues[0].path == "line[3].roles"


class TestValidateRoster:
    """Tests for roster validation."""

    def test_duplicate_ids_are_errors(self, engine):
        result = engine.validate_roster([
            Profile(id=1, name="Ana", age=28, roles=(Role.AUDIO,)),
            Profile(id=1, name="Luis", age=40, roles=(Role.VIDEO,)),
        ])

        assert not result.valid
        assert result.error_count == 1

    def test_duplicate_names_are_warnings(self, engine):
        result = engine.validate_roster([
            Profile(id=1, name="Ana", age=28, roles=(Role.AUDIO,)),
            Profile(id=2, name="Ana", age=28, roles=(Role.AUDIO,)),
        ])

        assert result.valid
        assert result.warning_count == 1
        assert result.validated_count == 2


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_merge(self):
        first = ValidationResult(valid=True, validated_count=1)
        second = ValidationResult(valid=True, validated_count=1)
        second.add_issue(ValidationSeverity.ERROR, "bad", path="x")

        merged = first.merge(second)

        assert not merged.valid
        assert merged.validated_count == 2
        assert merged.issues[0].path == "x"

    def test_warning_keeps_result_valid(self):
        result = ValidationResult(valid=True)
        result.add_issue(ValidationSeverity.WARNING, "hmm")

        assert result.valid
