"""Domain exceptions for protostream.

Every expected failure of a protocol operation has exactly one exception
type here, tagged with its ErrorKind. The dispatcher catches these at its
boundary and converts them into OperationResult errors, so callers of the
operation surface only see them through ``OperationResult.raise_for_error``.
Registry methods raise them directly.
"""

import errno
from enum import Enum


class ErrorKind(str, Enum):
    """Classification of operation failures.

    Allows callers to distinguish between failure modes without matching
    on messages.
    """

    NONE = "none"
    UNKNOWN_PROTOCOL = "unknown_protocol"
    DUPLICATE_PROTOCOL = "duplicate_protocol"
    CONTAINMENT_VIOLATION = "containment_violation"
    READ_ONLY_VIOLATION = "read_only_violation"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    NOT_EMPTY = "not_empty"
    IO_FAILURE = "io_failure"


class ProtostreamError(Exception):
    """Base exception for all protostream domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
        kind: Failure classification.
    """

    kind: ErrorKind = ErrorKind.IO_FAILURE

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class UnknownProtocolError(ProtostreamError):
    """Raised when a protocol name is not registered."""

    kind = ErrorKind.UNKNOWN_PROTOCOL


class DuplicateProtocolError(ProtostreamError):
    """Raised when registering a protocol name that is already taken."""

    kind = ErrorKind.DUPLICATE_PROTOCOL


class ContainmentViolationError(ProtostreamError):
    """Raised when a requested path would escape every configured root."""

    kind = ErrorKind.CONTAINMENT_VIOLATION


class ReadOnlyViolationError(ProtostreamError):
    """Raised when a mutating operation targets a read-only protocol."""

    kind = ErrorKind.READ_ONLY_VIOLATION


class NotFoundError(ProtostreamError):
    """Raised when the target of an operation does not exist."""

    kind = ErrorKind.NOT_FOUND


class AlreadyExistsError(ProtostreamError):
    """Raised when a create-style operation targets an existing entry."""

    kind = ErrorKind.ALREADY_EXISTS


class NotEmptyError(ProtostreamError):
    """Raised when removing a directory that still has entries."""

    kind = ErrorKind.NOT_EMPTY


class IOFailureError(ProtostreamError):
    """Raised when the filesystem fails for reasons outside the taxonomy."""

    kind = ErrorKind.IO_FAILURE


class SessionClosedError(RuntimeError):
    """Raised when a closed directory iteration session is used.

    This is a programming error, not an operation failure, so it is not
    part of the ProtostreamError hierarchy and is never turned into a result.
    """


_ERRORS_BY_KIND: dict[ErrorKind, type[ProtostreamError]] = {
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.ALREADY_EXISTS: AlreadyExistsError,
    ErrorKind.NOT_EMPTY: NotEmptyError,
    ErrorKind.IO_FAILURE: IOFailureError,
}


def classify_os_error(exception: OSError) -> ErrorKind:
    """Classify an OSError into an ErrorKind.

    Args:
        exception: The OS-level exception raised by a filesystem primitive.

    Returns:
        ErrorKind for the failure. Permission problems and type mismatches
        (file where a directory was expected and vice versa) are IO_FAILURE.
    """
    if isinstance(exception, FileNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exception, FileExistsError):
        return ErrorKind.ALREADY_EXISTS
    if exception.errno == errno.ENOTEMPTY:
        return ErrorKind.NOT_EMPTY
    return ErrorKind.IO_FAILURE


def from_os_error(exception: OSError, address: str) -> ProtostreamError:
    """Translate an OSError into the matching domain exception.

    The real path is deliberately left out of the message so that the
    location of the configured roots does not leak to callers.

    Args:
        exception: The OS-level exception.
        address: Protocol address the caller used (e.g. "test://file.ext").

    Returns:
        Domain exception instance (not raised).
    """
    kind = classify_os_error(exception)
    error_class = _ERRORS_BY_KIND[kind]
    reason = exception.strerror or exception.__class__.__name__
    return error_class(f"{reason}: {address}")
