"""
Validation and error handling for the workmon package.

This module provides input validation and error handling with consistent
error reporting across the application.
"""

# Core exception classes and error handling
from .exceptions import (
    ErrorSeverity,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_file_error,
)

# Validation functions
from .validators import (
    validate_boolean,
    validate_directory,
    validate_duration,
    validate_enum_choice,
    validate_executable,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Core functionality
    "ErrorSeverity",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_file_error",
    "handle_cli_error",
    # Validators
    "validate_boolean",
    "validate_directory",
    "validate_duration",
    "validate_enum_choice",
    "validate_executable",
    "validate_path_exists",
    "validate_positive_float",
    "validate_positive_integer",
]
