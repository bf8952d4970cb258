"""Exception hierarchy for seqspec.

All exceptions inherit from :class:`SeqspecError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`seqspec.exit_codes`.
The top-level error handler in :func:`seqspec.app.main` catches
``SeqspecError`` and exits with the appropriate code.

The parser, generator and validators never raise these; they report problems
as diagnostics. Only the I/O and CLI layers do.

Subclass hierarchy::

    SeqspecError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- InputError          (exit 7)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from typing import Optional

from seqspec.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INPUT_ERROR,
    EXIT_INVALID_USAGE,
)


class SeqspecError(Exception):
    """Base exception for all seqspec errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SeqspecError):
    """Raised for invalid CLI arguments (unknown service, conflicting flags)."""

    exit_code = EXIT_INVALID_USAGE


class InputError(SeqspecError):
    """Raised when a diagram or OpenAPI file cannot be read or decoded."""

    exit_code = EXIT_INPUT_ERROR


class ConfigError(SeqspecError):
    """Raised for unreadable or invalid configuration files."""

    exit_code = EXIT_GENERIC_FAILURE
