"""
Tests for custom exception hierarchy.
"""

import pytest
from tactical_board.exceptions import (
    TacticalBoardError,
    ValidationError,
    ImportValidationError,
    InvalidKeyframeError,
    InvalidSpeedError,
    InvalidDurationError,
    CatalogError,
    FormationNotFoundError,
    PersistenceError,
    PlanNotFoundError,
    PlanSaveError,
    ConfigurationError,
    InvalidConfigError,
)


class TestExceptionHierarchy:
    """Test the exception class hierarchy."""

    def test_base_exception_is_exception(self):
        assert issubclass(TacticalBoardError, Exception)

    def test_validation_errors_inherit_base(self):
        assert issubclass(ValidationError, TacticalBoardError)
        assert issubclass(ImportValidationError, ValidationError)
        assert issubclass(InvalidKeyframeError, ValidationError)
        assert issubclass(InvalidSpeedError, ValidationError)
        assert issubclass(InvalidDurationError, ValidationError)

    def test_catalog_errors_inherit_base(self):
        assert issubclass(CatalogError, TacticalBoardError)
        assert issubclass(FormationNotFoundError, CatalogError)

    def test_persistence_errors_inherit_base(self):
        assert issubclass(PersistenceError, TacticalBoardError)
        assert issubclass(PlanNotFoundError, PersistenceError)
        assert issubclass(PlanSaveError, PersistenceError)

    def test_config_errors_inherit_base(self):
        assert issubclass(ConfigurationError, TacticalBoardError)
        assert issubclass(InvalidConfigError, ConfigurationError)


class TestTacticalBoardError:
    """Test the base exception."""

    def test_simple_message(self):
        err = TacticalBoardError("something failed")
        assert str(err) == "something failed"
        assert err.context == {}

    def test_message_with_context(self):
        err = TacticalBoardError("bad", {"key": "value", "n": 3})
        assert str(err) == "bad [key=value, n=3]"

    def test_catch_as_base(self):
        with pytest.raises(TacticalBoardError):
            raise PlanNotFoundError(7)


class TestSpecificErrors:
    """Test message formatting of concrete errors."""

    def test_import_validation_error(self):
        err = ImportValidationError("first sample has no timestamp", source="a.json", index=0)
        assert str(err) == "Invalid movement data: first sample has no timestamp [source=a.json, index=0]"

    def test_import_validation_error_without_context(self):
        assert str(ImportValidationError()) == "Invalid movement data"

    def test_invalid_keyframe(self):
        err = InvalidKeyframeError(-1.0, "time must be >= 0")
        assert err.context == {"time": -1.0}

    def test_invalid_speed(self):
        assert InvalidSpeedError(0).context == {"speed": 0}

    def test_invalid_duration(self):
        err = InvalidDurationError(5.0, 10.0)
        assert err.context == {"duration": 5.0, "minimum": 10.0}

    def test_plan_not_found(self):
        assert str(PlanNotFoundError(42)) == "Tactical plan not found [plan_id=42]"

    def test_plan_save_error(self):
        err = PlanSaveError("Press", "disk full")
        assert str(err) == "Failed to save plan: disk full [name=Press]"

    def test_invalid_config(self):
        err = InvalidConfigError("pixels_per_meter", 0, "> 0")
        assert err.context == {"key": "pixels_per_meter", "value": 0, "expected": "> 0"}
