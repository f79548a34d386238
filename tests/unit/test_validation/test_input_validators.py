"""
Unit tests for the shared input validators and error helpers.
"""

import logging

import pytest

from workmon.validation import (
    ErrorSeverity,
    ValidationError,
    handle_cli_error,
    handle_error,
    validate_boolean,
    validate_directory,
    validate_duration,
    validate_enum_choice,
    validate_executable,
    validate_positive_float,
    validate_positive_integer,
)


@pytest.mark.unit
class TestValidateDuration:
    """Test cases for validate_duration."""

    @pytest.mark.parametrize(
        "text,seconds",
        [
            ("10s", 10.0),
            ("1m30s", 90.0),
            ("500ms", 0.5),
            ("1h", 3600.0),
            ("1.5h", 5400.0),
            ("2m", 120.0),
            ("250us", 0.00025),
            ("250µs", 0.00025),
            ("100ns", 1e-7),
            ("0", 0.0),
            ("0s", 0.0),
            (".5s", 0.5),
            ("+3s", 3.0),
        ],
    )
    def test_valid(self, text, seconds):
        assert validate_duration(text) == pytest.approx(seconds)

    @pytest.mark.parametrize("text", ["abc", "", "10", "-5s", "5x", "s", "1m 30s", "1.2.3s"])
    def test_invalid(self, text):
        with pytest.raises(ValidationError) as exc_info:
            validate_duration(text, field_name="--duration")
        assert exc_info.value.field_name == "--duration"

    def test_non_string(self):
        with pytest.raises(ValidationError):
            validate_duration(10)

    @pytest.mark.parametrize("text", ["9" * 400 + "s", "3000000h", "2562048h"])
    def test_out_of_range(self, text):
        with pytest.raises(ValidationError) as exc_info:
            validate_duration(text)
        assert "out of range" in str(exc_info.value)

    def test_largest_duration_accepted(self):
        assert validate_duration("2562047h") == pytest.approx(2562047 * 3600.0)


@pytest.mark.unit
class TestNumericValidators:
    """Test cases for integer and float validators."""

    def test_integer_from_string(self):
        assert validate_positive_integer("3") == 3

    @pytest.mark.parametrize("value", ["x", None, True, 0, -1])
    def test_integer_rejected(self, value):
        with pytest.raises(ValidationError):
            validate_positive_integer(value, min_value=1)

    def test_integer_upper_bound(self):
        with pytest.raises(ValidationError):
            validate_positive_integer(11, max_value=10)

    def test_float_bounds(self):
        assert validate_positive_float(2, min_value=1.0, max_value=60.0) == 2.0
        with pytest.raises(ValidationError):
            validate_positive_float(0.5, min_value=1.0)
        with pytest.raises(ValidationError):
            validate_positive_float(61, max_value=60.0)

    def test_float_rejects_bool(self):
        with pytest.raises(ValidationError):
            validate_positive_float(False)


@pytest.mark.unit
class TestOtherValidators:
    """Test cases for choice, boolean, path and executable validators."""

    def test_enum_choice(self):
        assert validate_enum_choice("csv", ["csv", "parquet"]) == "csv"
        with pytest.raises(ValidationError):
            validate_enum_choice("xlsx", ["csv", "parquet"])

    def test_boolean(self):
        assert validate_boolean(True) is True
        with pytest.raises(ValidationError):
            validate_boolean("yes")

    def test_directory(self, tmp_path):
        assert validate_directory(tmp_path) == tmp_path
        with pytest.raises(ValidationError):
            validate_directory(tmp_path / "missing")
        file_path = tmp_path / "file"
        file_path.write_text("x")
        with pytest.raises(ValidationError):
            validate_directory(file_path)

    def test_executable_path(self, tmp_path):
        script = tmp_path / "run.sh"
        script.write_text("#!/bin/sh\n")
        assert validate_executable(str(script)) == str(script)

    def test_executable_missing_path(self, tmp_path):
        with pytest.raises(ValidationError):
            validate_executable(str(tmp_path / "nope"))

    def test_executable_directory(self, tmp_path):
        with pytest.raises(ValidationError):
            validate_executable(str(tmp_path))

    def test_executable_on_path(self):
        assert validate_executable("sh").endswith("sh")

    def test_executable_not_on_path(self):
        with pytest.raises(ValidationError):
            validate_executable("definitely-not-a-real-command-xyz")

    def test_executable_empty(self):
        with pytest.raises(ValidationError):
            validate_executable("")


@pytest.mark.unit
class TestErrorHelpers:
    """Test cases for handle_error and handle_cli_error."""

    def test_handle_error_reraises(self):
        with pytest.raises(ValueError):
            handle_error(ValueError("boom"), "testing")

    def test_handle_error_logs_without_reraise(self, caplog):
        with caplog.at_level(logging.WARNING):
            handle_error(
                ValueError("boom"), "testing", severity=ErrorSeverity.WARNING, reraise=False
            )
        assert "Error in testing: boom" in caplog.text

    def test_handle_error_accepts_string_severity(self, caplog):
        with caplog.at_level(logging.ERROR):
            handle_error(ValueError("bad"), "ctx", severity="ERROR", reraise=False)
        assert "bad" in caplog.text

    def test_handle_cli_error_exits(self, caplog):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ValidationError("nope"), "argument validation", exit_code=3)
        assert exc_info.value.code == 3
        assert "CLI argument validation" in caplog.text
