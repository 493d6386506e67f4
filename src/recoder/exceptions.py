#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/exceptions.py
"""Custom exceptions for the recoder library.

This module defines specialized exception classes for the error conditions
that can occur while parsing pipeline recipes and applying recodings.
Failures of the sink being written to are never wrapped; they propagate
to the caller unchanged.

Exception Hierarchy
-------------------
- RecoderError (base exception)

  - ValidationError (parameter/option validation)
    - UnknownFormatTagError (recipe token names no format tag)
    - PipelineSyntaxError (malformed recipe step)
    - MalformedOptionError (codec option of the wrong shape)

  - NoTransformAvailableError (no codec for a tag pair)

  - RecodingError (codec failed on its input)

  - SourceConsumedError (second pass over a single-pass source)

  - WriterStateError (misuse of a RecodingWriter)

  - ConfigError (invalid configuration file)

"""

from __future__ import annotations

from typing import Any


class RecoderError(Exception):
    """Base exception class for all recoder-specific errors.

    Catching this will catch every library-specific error, but not the
    I/O errors raised by a sink that rejects a write.

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


class ValidationError(RecoderError):
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

    Attributes
    ----------
    parameter_name : str or None
        The name of the problematic parameter
    parameter_value : any
        The value that caused the error

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


class UnknownFormatTagError(ValidationError):
    """Exception raised when a recipe token does not name a format tag.

    Raised while parsing, before any text is transformed.

    Parameters
    ----------
    token : str
        The offending token exactly as written in the recipe
    message : str, optional
        Custom error message. If not provided, names the token

    Attributes
    ----------
    token : str
        The token that could not be resolved

    """

    def __init__(self, token: str, message: str | None = None):
        """Initialize the unknown tag error."""
        if message is None:
            message = f"Unknown format tag: '{token}'"
        super().__init__(message, parameter_name="tag", parameter_value=token)
        self.token = token


class PipelineSyntaxError(ValidationError):
    """Exception raised when a recipe step cannot be parsed.

    Parameters
    ----------
    recipe : str
        The full recipe being parsed
    token : str
        The malformed step token
    message : str, optional
        Custom error message

    """

    def __init__(self, recipe: str, token: str, message: str | None = None):
        """Initialize the syntax error."""
        if message is None:
            message = f"Malformed step '{token}' in recipe '{recipe}': option list is not terminated"
        super().__init__(message, parameter_name="recipe", parameter_value=recipe)
        self.recipe = recipe
        self.token = token


class MalformedOptionError(ValidationError):
    """Exception raised when a codec receives an option it cannot use.

    Options are only checked when the codec that declares them runs, so
    this error names the tag pair and the position of the option.

    Parameters
    ----------
    source_tag : str
        Source tag of the transition
    target_tag : str
        Target tag of the transition
    option_index : int
        Zero-based position of the option in the step's option list
    option_name : str
        Declared name of the option
    option_value : any
        The value that could not be converted
    reason : str, optional
        Why the value was rejected
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        source_tag: str,
        target_tag: str,
        option_index: int,
        option_name: str,
        option_value: Any,
        reason: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the malformed option error."""
        message = (
            f"Invalid option {option_index} ('{option_name}') for {source_tag} -> {target_tag}: {option_value!r}"
        )
        if reason:
            message += f" ({reason})"
        super().__init__(
            message, parameter_name=option_name, parameter_value=option_value, original_error=original_error
        )
        self.source_tag = source_tag
        self.target_tag = target_tag
        self.option_index = option_index


class NoTransformAvailableError(RecoderError):
    """Exception raised when no codec recodes between two adjacent tags.

    Parameters
    ----------
    source_tag : str
        Tag the text is recoded from
    target_tag : str
        Tag the text is recoded to
    message : str, optional
        Custom error message

    """

    def __init__(self, source_tag: str, target_tag: str, message: str | None = None):
        """Initialize the error naming both tags."""
        if message is None:
            message = f"No transform available from {source_tag} to {target_tag}"
        super().__init__(message)
        self.source_tag = source_tag
        self.target_tag = target_tag


class RecodingError(RecoderError):
    """Exception raised when a codec cannot process its input.

    Examples are invalid base64 text or non-numeric text fed to a numeric
    format step.

    Parameters
    ----------
    message : str
        Description of the failure
    source_tag : str, optional
        Source tag of the failing transition
    target_tag : str, optional
        Target tag of the failing transition
    original_error : Exception, optional
        The underlying exception

    """

    def __init__(
        self,
        message: str,
        source_tag: str | None = None,
        target_tag: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the recoding error."""
        super().__init__(message, original_error=original_error)
        self.source_tag = source_tag
        self.target_tag = target_tag


class SourceConsumedError(RecoderError):
    """Exception raised when a single-pass source is drained a second time."""


class WriterStateError(RecoderError):
    """Exception raised when a RecodingWriter is used out of order.

    Covers configuring twice, configuring after the first write and writing
    after close.

    """


class ConfigError(RecoderError):
    """Exception raised for unreadable or invalid configuration files.

    Parameters
    ----------
    message : str
        Description of the problem
    config_path : str, optional
        Path of the offending file
    original_error : Exception, optional
        The underlying parse error

    """

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error."""
        super().__init__(message, original_error=original_error)
        self.config_path = config_path


__all__ = [
    "RecoderError",
    "ValidationError",
    "UnknownFormatTagError",
    "PipelineSyntaxError",
    "MalformedOptionError",
    "NoTransformAvailableError",
    "RecodingError",
    "SourceConsumedError",
    "WriterStateError",
    "ConfigError",
]
