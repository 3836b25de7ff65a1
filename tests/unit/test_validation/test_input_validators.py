"""
Unit tests for input validators and the error handling helpers.
"""

import logging

import pytest

from workload_analyzer.validation import (
    ErrorSeverity,
    MalformedInputError,
    UnsynchronizedChannelsError,
    ValidationError,
    handle_cli_error,
    handle_error,
    validate_enum_choice,
    validate_file_affix,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
)


@pytest.mark.unit
class TestNumericValidators:
    """Test cases for integer and float validation."""

    def test_positive_integer(self):
        assert validate_positive_integer("7") == 7
        assert validate_positive_integer(0, min_value=0) == 0

    @pytest.mark.parametrize("value", [0, "x", None, True, 11])
    def test_positive_integer_rejects(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_positive_integer(value, max_value=10, field_name="count")

        assert exc_info.value.field_name == "count"

    def test_positive_float(self):
        assert validate_positive_float("2.5") == 2.5

    @pytest.mark.parametrize("value", [-0.1, "abc", 100.5])
    def test_positive_float_rejects(self, value):
        with pytest.raises(ValidationError):
            validate_positive_float(value, max_value=100.0)


@pytest.mark.unit
class TestOtherValidators:
    """Test cases for path, affix and choice validation."""

    def test_path_exists(self, temp_dir):
        assert validate_path_exists(temp_dir) == str(temp_dir)

        with pytest.raises(ValidationError, match="does not exist"):
            validate_path_exists(temp_dir / "missing", field_name="input_dir")

    def test_file_affix(self):
        assert validate_file_affix("Workload") == "Workload"
        assert validate_file_affix("") == ""

        with pytest.raises(ValidationError):
            validate_file_affix("", allow_empty=False)
        with pytest.raises(ValidationError):
            validate_file_affix("a\\b")
        with pytest.raises(ValidationError):
            validate_file_affix(3)

    def test_enum_choice(self):
        assert validate_enum_choice("csv", ["csv", "parquet"]) == "csv"
        assert validate_enum_choice("PARQUET", ["csv", "parquet"], case_sensitive=False) == "parquet"

        with pytest.raises(ValidationError):
            validate_enum_choice("PARQUET", ["csv", "parquet"])


@pytest.mark.unit
class TestErrorHandling:
    """Test cases for the error hierarchy and handlers."""

    def test_unsynchronized_error_carries_lengths(self):
        error = UnsynchronizedChannelsError("W", (3, 2, 3))

        assert error.workload_name == "W"
        assert error.lengths == (3, 2, 3)
        assert "(3, 2, 3)" in str(error)

    def test_malformed_input_error_source(self, temp_dir):
        error = MalformedInputError("bad", source=temp_dir / "x.json")

        assert error.source == str(temp_dir / "x.json")

    def test_handle_error_logs_and_reraises(self, caplog):
        test_logger = logging.getLogger("test.handle_error")

        with caplog.at_level(logging.WARNING, logger="test.handle_error"):
            with pytest.raises(ValueError):
                handle_error(ValueError("boom"), "testing", severity=ErrorSeverity.WARNING, logger=test_logger)

        assert "Error in testing: boom" in caplog.text

    def test_handle_error_without_reraise(self, caplog):
        test_logger = logging.getLogger("test.handle_error")

        with caplog.at_level(logging.INFO, logger="test.handle_error"):
            handle_error(ValueError("quiet"), "testing", severity="info", reraise=False, logger=test_logger)

        assert "quiet" in caplog.text

    def test_handle_cli_error_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ValueError("fatal"), "running", exit_code=3)

        assert exc_info.value.code == 3
