"""Operation error logging and formatting utilities.

Provides consistent logging of failed operations and user-facing messages
for the command line host.

Error handling contract:
    The dispatcher catches ProtostreamError internally and returns error
    results. Callers check ``result.success`` (or the result's truthiness)
    rather than catching multiple exception types.
"""

import logging

from protostream.domain.exceptions import ErrorKind, ProtostreamError

logger = logging.getLogger(__name__)


def log_operation_error(exception: ProtostreamError, operation_name: str, address: str) -> None:
    """Log a failed operation with appropriate severity.

    - Containment violations: WARNING (possible traversal attempt)
    - I/O failures: ERROR (the filesystem misbehaved)
    - Other expected failures: DEBUG (the caller gets the result anyway)

    Args:
        exception: The domain error that stopped the operation.
        operation_name: Name of the operation (e.g. "ReadFile").
        address: Protocol address the operation targeted.
    """
    if exception.kind is ErrorKind.CONTAINMENT_VIOLATION:
        logger.warning("Rejected %s on %s: %s", operation_name, address, exception.message)
    elif exception.kind is ErrorKind.IO_FAILURE:
        logger.error("I/O failure during %s on %s: %s", operation_name, address, exception.message)
    else:
        logger.debug("%s on %s failed: %s", operation_name, address, exception.message)


def format_error_message(exception: Exception, operation_name: str) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exception: The exception that was caught.
        operation_name: Name of the operation for error messages (e.g., "mkdir").

    Returns:
        User-friendly error message string.
    """
    if isinstance(exception, ProtostreamError):
        return exception.message
    elif isinstance(exception, OSError):
        return (
            f"I/O error: {exception}. "
            "Check file permissions, disk space, and filesystem access."
        )
    elif isinstance(exception, ValueError):
        return f"{operation_name.capitalize()} error: {exception}"
    else:
        return f"Internal error during {operation_name}. Check logs for details."
