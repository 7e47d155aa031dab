"""Exception hierarchy for pcli.

All exceptions inherit from :class:`PcliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`pcli.exit_codes`.
The top-level error handler in :func:`pcli.app.main` catches
``PcliError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    PcliError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- ResolutionError          (exit 4)
    |   +-- NotFoundError
    |   +-- DeadEndError
    |   +-- UnknownKindError
    +-- ExtractionError          (exit 5)
    |   +-- MalformedBodyError
    |   +-- NoRequestDataError
    +-- ConnectionError_         (exit 6)
    +-- CollectionLoadError      (exit 7)
    +-- CollectionParseError     (exit 7)
    |   +-- MalformedTreeError
    +-- ConfigError              (exit 1)
"""

from __future__ import annotations

from pcli.exit_codes import (
    EXIT_COLLECTION_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_EXTRACTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
)


class PcliError(Exception):
    """Base exception for all pcli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`pcli.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(PcliError):
    """Raised for invalid CLI arguments (empty resource path, bad variables JSON)."""

    exit_code = EXIT_INVALID_USAGE


# --- Resolution ---


class ResolutionError(PcliError):
    """Base class for failures while following a path of names through the tree."""

    exit_code = EXIT_NOT_FOUND


class NotFoundError(ResolutionError):
    """Raised when a path segment has no matching child in the current scope.

    Args:
        segment: The name that could not be found.
        parent: Name of the container that was searched.
    """

    def __init__(self, segment: str, parent: str):
        super().__init__(f'"{segment}" not found in "{parent}".')
        self.segment = segment
        self.parent = parent


class DeadEndError(ResolutionError):
    """Raised when the path continues past a node that cannot have children.

    Args:
        name: Name of the childless node that was matched.
        segment: The first path segment that could not be reached.
    """

    def __init__(self, name: str, segment: str):
        super().__init__(
            f'"{name}" is an example and has no children; cannot reach "{segment}".'
        )
        self.name = name
        self.segment = segment


class UnknownKindError(ResolutionError):
    """Raised when a matched node is of a kind the resolver cannot descend into."""

    def __init__(self, name: str):
        super().__init__(f'Found unknown instance "{name}".')
        self.name = name


# --- Extraction ---


class ExtractionError(PcliError):
    """Base class for failures while extracting request details from a node."""

    exit_code = EXIT_EXTRACTION_ERROR


class MalformedBodyError(ExtractionError):
    """Raised when a non-empty raw request body is not valid JSON."""

    def __init__(self, name: str, reason: str):
        super().__init__(f'Request body of "{name}" is not valid JSON: {reason}')
        self.name = name


class NoRequestDataError(ExtractionError):
    """Raised when an example has neither its own nor an inherited request snapshot."""

    def __init__(self, name: str):
        super().__init__(f'not found request data on "{name}"')
        self.name = name


# --- Collection I/O ---


class ConnectionError_(PcliError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class CollectionLoadError(PcliError):
    """Raised when a collection cannot be read or fetched (missing file, HTTP error)."""

    exit_code = EXIT_COLLECTION_ERROR


class CollectionParseError(PcliError):
    """Raised when a collection document cannot be parsed into a resource tree."""

    exit_code = EXIT_COLLECTION_ERROR


class MalformedTreeError(CollectionParseError):
    """Raised when a tree is nested beyond the depth ceiling (cyclic or corrupted input)."""


class ConfigError(PcliError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
