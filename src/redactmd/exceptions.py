#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the redactmd library.

This module defines specialized exception classes for the error conditions
that can occur while redacting a markdown document or reconstructing it
from a redacted copy.

Exception Hierarchy
-------------------
- RedactMdError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for parser or renderer)

  - FileError (file access and I/O)

  - DependencyError (optional package not installed)

  - ParsingError (markdown parsing failures)

  - RenderingError (output generation failures)

  - RestorationError (reconstruction from a redacted copy)
    - UnknownRedactionTypeError (no restoration method for a tag)
    - RedactionCountMismatchError (source and redacted copy disagree)
    - MalformedPlaceholderError (placeholder text without a usable index)

  - RegistrationError (restoration registry misuse)
    - DuplicateRedactionTypeError (tag registered twice)

"""

from typing import Any


class RedactMdError(Exception):
    """Base exception class for all redactmd-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(RedactMdError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an incorrect options class is provided.

    Parameters
    ----------
    converter_name : str
        Name of the parser or renderer that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{converter_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class FileError(RedactMdError):
    """Exception raised when an input or output file cannot be used.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class DependencyError(RedactMdError):
    """Exception raised when an optional package needed by a feature is missing.

    Parameters
    ----------
    feature : str
        Name of the feature that needs the packages (e.g. ``"rich-output"``)
    missing_packages : list[tuple[str, str]]
        ``(package_name, version_spec)`` pairs that are not installed
    message : str, optional
        Custom error message. A message with an install hint is built when
        omitted.

    """

    def __init__(self, feature: str, missing_packages: list[tuple[str, str]], message: str | None = None):
        """Initialize the dependency error with the missing packages."""
        if message is None:
            pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
            packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in missing_packages)
            message = f"{feature} requires the following packages: {pkg_list}\nInstall with: pip install {packages_str}"
        super().__init__(message)
        self.feature = feature
        self.missing_packages = missing_packages


class ParsingError(RedactMdError):
    """Exception raised when markdown parsing fails.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class RenderingError(RedactMdError):
    """Exception raised when output rendering fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class RestorationError(RedactMdError):
    """Base exception for failures while reconstructing a redacted document.

    Reconstruction is all-or-nothing: when one of these is raised no
    partially restored output has been returned to the caller.
    """


class UnknownRedactionTypeError(RestorationError):
    """Exception raised when a redaction tag has no restoration method.

    Parameters
    ----------
    redaction_type : str
        The tag that could not be resolved
    available_types : list[str], optional
        Tags that are registered, for the error message

    """

    def __init__(
        self,
        redaction_type: str,
        available_types: list[str] | None = None,
        message: str | None = None,
    ):
        """Initialize the unknown redaction type error."""
        if message is None:
            message = f"No restoration method registered for redaction type '{redaction_type}'"
            if available_types:
                message += f". Registered types: {', '.join(sorted(available_types))}"
        super().__init__(message)
        self.redaction_type = redaction_type
        self.available_types = available_types or []


class RedactionCountMismatchError(RestorationError):
    """Exception raised when the redacted copy and the source disagree.

    Parameters
    ----------
    expected : int
        Number of redactions found in the source document
    found : int
        Number of placeholders found in the redacted document

    """

    def __init__(self, expected: int, found: int, message: str | None = None):
        """Initialize the count mismatch error."""
        if message is None:
            message = (
                f"Source document has {expected} redaction(s) but the redacted document "
                f"contains {found} placeholder(s)"
            )
        super().__init__(message)
        self.expected = expected
        self.found = found


class MalformedPlaceholderError(RestorationError):
    """Exception raised when placeholder-shaped text carries no usable index.

    Callers that pair placeholders with redactions catch this and keep the
    text as a literal instead of failing the whole reconstruction.

    Parameters
    ----------
    raw : str
        The placeholder text as it appeared in the redacted document

    """

    def __init__(self, raw: str, message: str | None = None):
        """Initialize the malformed placeholder error."""
        if message is None:
            message = f"Malformed redaction placeholder: {raw!r}"
        super().__init__(message)
        self.raw = raw


class RegistrationError(RedactMdError):
    """Exception raised when the restoration registry is misused."""


class DuplicateRedactionTypeError(RegistrationError):
    """Exception raised when a redaction tag is registered twice.

    Parameters
    ----------
    redaction_type : str
        The tag that is already registered

    """

    def __init__(self, redaction_type: str, message: str | None = None):
        """Initialize the duplicate registration error."""
        if message is None:
            message = (
                f"Redaction type '{redaction_type}' is already registered. "
                f"Pass overwrite=True to replace the existing restoration method."
            )
        super().__init__(message)
        self.redaction_type = redaction_type
