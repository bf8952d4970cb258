"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific failure category. Error constants are
referenced by the corresponding :class:`~seqspec.exceptions.SeqspecError`
subclass; :data:`EXIT_VALIDATION_FAILED` is returned directly by the
``validate`` and ``check`` commands.

Example::

    $ seqspec validate diagram.mmd
    $ echo $?
    3   # EXIT_VALIDATION_FAILED -- the diagram has errors
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_VALIDATION_FAILED = 3
"""Validation ran to completion and reported at least one error."""

EXIT_INPUT_ERROR = 7
"""The input could not be read or parsed."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
