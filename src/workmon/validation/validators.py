"""
Validation functions for configuration values and command-line arguments.
"""

import math
import os
import re
import shutil
from pathlib import Path
from typing import Any, List, Optional, Union

from .exceptions import ValidationError

# Nanoseconds per duration unit, as accepted by Go-style duration strings.
_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

# Largest duration representable as signed 64-bit nanoseconds (about 2562047h).
_MAX_DURATION_NS = 2**63 - 1


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is an integer within bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a number within bounds.

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_enum_choice(
    value: Any,
    valid_choices: List[str],
    field_name: str = "value"
) -> str:
    """
    Validate that a value is one of the allowed string choices.

    Raises:
        ValidationError: If the value is not a valid choice
    """
    if not isinstance(value, str) or value not in valid_choices:
        raise ValidationError(
            f"{field_name} must be one of {valid_choices}, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_boolean(value: Any, field_name: str = "value") -> bool:
    """Validate that a value is a real boolean, not a truthy stand-in."""
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a boolean, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_duration(value: Any, field_name: str = "duration") -> float:
    """
    Parse a Go-style duration string into seconds.

    A duration is a sequence of decimal numbers each followed by a unit
    (``ns``, ``us``, ``ms``, ``s``, ``m``, ``h``), such as ``"10s"``,
    ``"1m30s"`` or ``"1.5h"``. The bare string ``"0"`` is also accepted.
    Negative durations are rejected, as are durations longer than
    2562047h (the signed 64-bit nanosecond range).

    Args:
        value: Duration string to parse
        field_name: Name of the field being validated

    Returns:
        The duration in seconds.

    Raises:
        ValidationError: If the string is not a valid duration

    Examples:
        >>> validate_duration("1m30s")
        90.0
        >>> validate_duration("500ms")
        0.5
    """
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a duration string, got {value!r}",
            field_name=field_name,
            value=value
        )

    text = value.strip()
    if text == "0":
        return 0.0
    if not text or text.startswith("-"):
        raise ValidationError(
            f"invalid {field_name} {value!r}: expected e.g. '10s', '1m30s', '500ms'",
            field_name=field_name,
            value=value
        )
    if text.startswith("+"):
        text = text[1:]

    total_ns = 0.0
    position = 0
    while position < len(text):
        match = _DURATION_PART.match(text, position)
        if not match:
            raise ValidationError(
                f"invalid {field_name} {value!r}: expected e.g. '10s', '1m30s', '500ms'",
                field_name=field_name,
                value=value
            )
        number, unit = match.groups()
        total_ns += float(number) * _DURATION_UNITS[unit]
        position = match.end()

    if position == 0:
        raise ValidationError(
            f"invalid {field_name} {value!r}",
            field_name=field_name,
            value=value
        )
    if not math.isfinite(total_ns) or total_ns > _MAX_DURATION_NS:
        raise ValidationError(
            f"invalid {field_name} {value!r}: duration out of range",
            field_name=field_name,
            value=value
        )
    return total_ns / 1_000_000_000


def validate_path_exists(path: Union[str, Path], field_name: str = "path") -> str:
    """
    Validate that a path exists.

    Raises:
        ValidationError: If path doesn't exist
    """
    path_str = str(path)
    if not os.path.exists(path_str):
        raise ValidationError(
            f"{field_name} does not exist: {path_str}",
            field_name=field_name,
            value=path_str
        )
    return path_str


def validate_directory(path: Union[str, Path], field_name: str = "directory") -> Path:
    """
    Validate that a path exists and is a directory.

    Raises:
        ValidationError: If the path is missing or not a directory
    """
    validate_path_exists(path, field_name=field_name)
    directory = Path(path)
    if not directory.is_dir():
        raise ValidationError(
            f"{field_name} is not a directory: {directory}",
            field_name=field_name,
            value=str(directory)
        )
    return directory


def validate_executable(command: str, field_name: str = "workload") -> str:
    """
    Resolve a workload command to an executable path.

    A command containing a path separator must name an existing file; a bare
    name is looked up on ``PATH``.

    Returns:
        The resolved path of the executable.

    Raises:
        ValidationError: If the command cannot be found
    """
    if not command:
        raise ValidationError(
            f"{field_name} must be a non-empty command",
            field_name=field_name,
            value=command
        )

    if os.sep in command or (os.altsep and os.altsep in command):
        validate_path_exists(command, field_name=field_name)
        if Path(command).is_dir():
            raise ValidationError(
                f"{field_name} is a directory, not an executable: {command}",
                field_name=field_name,
                value=command
            )
        return command

    resolved = shutil.which(command)
    if resolved is None:
        raise ValidationError(
            f"{field_name} not found on PATH: {command}",
            field_name=field_name,
            value=command
        )
    return resolved
