"""Core domain entities for protostream.

Defines the protocol descriptor, resolved paths, the closed set of
operation variants, and the result type every operation returns.
"""

import os
import re
import stat as stat_module
from dataclasses import dataclass, field
from typing import Any, ClassVar

from protostream.domain.exceptions import ErrorKind, ProtostreamError

# Same grammar URL schemes use: a letter, then letters, digits, "+", "-" or "."
PROTOCOL_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


@dataclass(frozen=True)
class StreamDescriptor:
    """Immutable configuration of one virtual protocol.

    Attributes:
        name: Protocol name used as the address prefix (e.g. "test").
        roots: Absolute directories the protocol is confined to, tried in order.
            Stored lexically normalized.
        writable: Whether mutating operations are allowed.

    Raises:
        ValueError: If the name is empty or malformed, writable is not a
            bool, roots is empty, or a root is not an absolute path string.
    """

    name: str
    roots: tuple[str, ...]
    writable: bool = False

    def __post_init__(self) -> None:
        """Validate and normalize the descriptor."""
        if not self.name:
            raise ValueError("Protocol name cannot be empty")
        if not PROTOCOL_NAME_PATTERN.match(self.name):
            raise ValueError(
                f"Invalid protocol name '{self.name}': must start with a letter "
                "and contain only letters, digits, '+', '-' or '.'"
            )
        if not isinstance(self.writable, bool):
            raise ValueError(
                f"writable of protocol '{self.name}' must be a boolean, "
                f"got {self.writable!r}"
            )
        if isinstance(self.roots, (str, os.PathLike)):
            raise ValueError("roots must be a sequence of paths, not a single path")
        if not self.roots:
            raise ValueError(f"Protocol '{self.name}' needs at least one root")

        normalized = []
        for root in self.roots:
            root_str = os.fspath(root) if isinstance(root, (str, os.PathLike)) else None
            if not isinstance(root_str, str):
                raise ValueError(
                    f"Root {root!r} of protocol '{self.name}' must be a path string"
                )
            if not os.path.isabs(root_str):
                raise ValueError(
                    f"Root '{root_str}' of protocol '{self.name}' must be absolute"
                )
            normalized.append(os.path.normpath(root_str))
        # frozen dataclass: bypass __setattr__ to store the normalized tuple
        object.__setattr__(self, "roots", tuple(normalized))

    def address(self, path: str) -> str:
        """Build the protocol address for a relative path."""
        return f"{self.name}://{path}"


@dataclass(frozen=True)
class ResolvedPath:
    """An absolute real path guaranteed to lie inside one protocol root.

    Attributes:
        root: The root the path was resolved under.
        path: Absolute real-filesystem path.
        relative: Normalized path relative to the root ("." for the root itself).
    """

    root: str
    path: str
    relative: str

    @property
    def is_root(self) -> bool:
        """Whether the path is the root directory itself."""
        return self.path == self.root

    @property
    def parent(self) -> str:
        """Real path of the parent directory."""
        return os.path.dirname(self.path)

    def __fspath__(self) -> str:
        return self.path


@dataclass(frozen=True)
class EntryStat:
    """Subset of stat information exposed for protocol entries.

    Attributes:
        size: Size in bytes.
        mtime: Modification time as a Unix timestamp.
        mode: Raw st_mode bits.
        is_dir: Whether the entry is a directory.
        is_file: Whether the entry is a regular file.
    """

    size: int
    mtime: float
    mode: int
    is_dir: bool
    is_file: bool

    @classmethod
    def from_stat_result(cls, result: os.stat_result) -> "EntryStat":
        """Build an EntryStat from os.stat() output."""
        return cls(
            size=result.st_size,
            mtime=result.st_mtime,
            mode=result.st_mode,
            is_dir=stat_module.S_ISDIR(result.st_mode),
            is_file=stat_module.S_ISREG(result.st_mode),
        )


# ---------------------------------------------------------------------------
# Operation variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Operation:
    """Base for the closed set of operations the dispatcher understands.

    Attributes:
        protocol: Registered protocol name.
        path: Path relative to the protocol roots.
    """

    protocol: str
    path: str

    mutating: ClassVar[bool] = False
    # Whether resolution should prefer a root where the target already exists
    requires_existing: ClassVar[bool] = True

    @property
    def is_mutating(self) -> bool:
        """Whether the operation changes the filesystem."""
        return self.mutating

    @property
    def may_create(self) -> bool:
        """Whether the operation may create its target."""
        return not self.requires_existing

    @property
    def address(self) -> str:
        """Protocol address of the operation target."""
        return f"{self.protocol}://{self.path}"


@dataclass(frozen=True)
class ListDirectory(Operation):
    """Open a directory iteration session."""


@dataclass(frozen=True)
class ScanDirectory(Operation):
    """List a directory into a sorted list of entry names."""


@dataclass(frozen=True)
class MakeDirectory(Operation):
    """Create a directory, optionally with missing parents."""

    recursive: bool = False

    mutating: ClassVar[bool] = True
    requires_existing: ClassVar[bool] = False


@dataclass(frozen=True)
class RemoveDirectory(Operation):
    """Remove an empty directory."""

    mutating: ClassVar[bool] = True


@dataclass(frozen=True)
class Touch(Operation):
    """Create an empty file or update its modification time."""

    mtime: float | None = None

    mutating: ClassVar[bool] = True
    requires_existing: ClassVar[bool] = False


@dataclass(frozen=True)
class Unlink(Operation):
    """Remove a file."""

    mutating: ClassVar[bool] = True


@dataclass(frozen=True)
class ReadFile(Operation):
    """Read the full contents of a file."""


@dataclass(frozen=True)
class WriteFile(Operation):
    """Write contents to a file, truncating any previous contents."""

    data: bytes | str = b""

    mutating: ClassVar[bool] = True
    requires_existing: ClassVar[bool] = False

    @property
    def payload(self) -> bytes:
        """Contents as bytes (text is UTF-8 encoded)."""
        if isinstance(self.data, str):
            return self.data.encode("utf-8")
        return bytes(self.data)


@dataclass(frozen=True)
class Stat(Operation):
    """Look up size, type and modification time of an entry."""


@dataclass(frozen=True)
class OpenFile(Operation):
    """Open a binary file object.

    Attributes:
        mode: Binary open mode ("rb", "wb", "ab", "xb", "r+b", ...).
            Text modes are coerced to binary.
    """

    mode: str = "rb"

    WRITE_FLAGS: ClassVar[frozenset[str]] = frozenset("wax+")

    def __post_init__(self) -> None:
        """Validate the open mode."""
        mode = self.mode
        if (
            not mode
            or set(mode) - set("rwax+bt")
            or len(set(mode)) != len(mode)
            or sum(flag in mode for flag in "rwax") != 1
            or ("b" in mode and "t" in mode)
        ):
            raise ValueError(f"Invalid open mode '{self.mode}'")

    @property
    def is_mutating(self) -> bool:
        return any(flag in self.WRITE_FLAGS for flag in self.mode)

    @property
    def binary_mode(self) -> str:
        """The mode with a "b" flag and without any "t" flag."""
        mode = self.mode.replace("t", "")
        return mode if "b" in mode else mode + "b"

    @property
    def may_create(self) -> bool:
        """Only read modes need the file to exist already."""
        return "r" not in self.mode


@dataclass(frozen=True)
class Rename:
    """Rename an entry, possibly across protocols.

    Attributes:
        source_protocol: Protocol of the entry to rename.
        source_path: Path of the entry, relative to the source protocol roots.
        target_protocol: Protocol of the new location.
        target_path: New path, relative to the target protocol roots.
    """

    source_protocol: str
    source_path: str
    target_protocol: str
    target_path: str

    @property
    def is_mutating(self) -> bool:
        return True

    @property
    def address(self) -> str:
        return (
            f"{self.source_protocol}://{self.source_path} -> "
            f"{self.target_protocol}://{self.target_path}"
        )


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class OperationResult:
    """Outcome of a dispatched operation.

    A failed result is falsy, like a native filesystem call that returned
    false, so ``if not dispatcher.mkdir(...)`` reads naturally. Callers
    that prefer exceptions call ``raise_for_error()``.

    Attributes:
        success: Whether the operation succeeded.
        value: Operation-specific payload (bytes, byte count, session, ...).
        error: Error message if the operation failed.
        error_kind: Failure classification (ErrorKind.NONE on success).
        hint: Optional actionable suggestion for failed results.
    """

    success: bool
    value: Any = None
    error: str | None = None
    error_kind: ErrorKind = ErrorKind.NONE
    hint: str | None = None
    exception: ProtostreamError | None = field(default=None, repr=False, compare=False)

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def create_success(cls, value: Any = True) -> "OperationResult":
        """Create a success result.

        Args:
            value: Operation payload. Defaults to True for operations
                without a meaningful return value.

        Returns:
            OperationResult with success=True.
        """
        return cls(success=True, value=value)

    @classmethod
    def create_error(cls, exception: ProtostreamError) -> "OperationResult":
        """Create an error result from a domain exception.

        Args:
            exception: The domain error that stopped the operation.

        Returns:
            OperationResult with success=False and the error classified.
        """
        return cls(
            success=False,
            value=None,
            error=exception.message,
            error_kind=exception.kind,
            hint=exception.hint,
            exception=exception,
        )

    def raise_for_error(self) -> "OperationResult":
        """Raise the captured domain exception if the operation failed.

        Returns:
            self, so calls can be chained on success.

        Raises:
            ProtostreamError: The exception captured by create_error().
        """
        if not self.success and self.exception is not None:
            raise self.exception
        return self
