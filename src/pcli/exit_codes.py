"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~pcli.exceptions.PcliError` subclass.
Shell scripts can inspect the exit code to tell a missing resource apart
from a broken collection file without parsing stderr.

Example::

    $ pcli show users nope
    $ echo $?
    4   # EXIT_NOT_FOUND -- no resource named "nope" under "users"
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""A resource path could not be resolved inside the collection."""

EXIT_EXTRACTION_ERROR = 5
"""Request details could not be extracted from the resolved resource."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred while fetching a remote collection."""

EXIT_COLLECTION_ERROR = 7
"""The collection document could not be loaded, parsed, or is malformed."""
