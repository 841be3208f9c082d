"""Operation dispatcher for protocol paths.

Every operation goes through the same steps, in this order:

1. Look up the protocol descriptor in the registry.
2. For mutating operations, refuse read-only protocols. This happens
   before the path is resolved and before the filesystem is touched.
3. Resolve the path against the protocol roots (lexical containment).
4. Pick the root: an existing target wins; otherwise, for operations that
   may create the target, the first root whose parent directory exists.
5. Call the filesystem primitive and translate OSErrors into the domain
   error taxonomy.

Expected failures come back as error OperationResults. Only programming
errors (unsupported operation objects, closed sessions) raise.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, BinaryIO

from protostream.core import resolver
from protostream.core.operation_errors import log_operation_error
from protostream.core.registry import StreamRegistry
from protostream.core.session import DirectoryIterationSession
from protostream.domain.entities import (
    EntryStat,
    ListDirectory,
    MakeDirectory,
    OpenFile,
    Operation,
    OperationResult,
    ReadFile,
    RemoveDirectory,
    Rename,
    ResolvedPath,
    ScanDirectory,
    Stat,
    StreamDescriptor,
    Touch,
    Unlink,
    WriteFile,
)
from protostream.domain.exceptions import (
    IOFailureError,
    NotFoundError,
    ProtostreamError,
    ReadOnlyViolationError,
    from_os_error,
)
from protostream.ports.fs import FileSystem

logger = logging.getLogger(__name__)


@contextmanager
def _filesystem_errors(address: str) -> Iterator[None]:
    """Translate OSErrors raised inside the block into domain errors."""
    try:
        yield
    except OSError as e:
        raise from_os_error(e, address) from e


class OperationDispatcher:
    """Single entry point for operations on registered protocols.

    The set of operations is closed: dispatch() looks the handler up by the
    operation's type and rejects anything else with TypeError.

    Example:
        dispatcher = OperationDispatcher(registry, LocalFileSystem())
        result = dispatcher.read_file("assets", "logo.svg")
        if result:
            data = result.value
    """

    def __init__(self, registry: StreamRegistry, fs: FileSystem) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Registry the protocol names are looked up in.
            fs: Filesystem the resolved operations are delegated to.
        """
        self._registry = registry
        self._fs = fs
        self._handlers: dict[type, Callable[[Any], Any]] = {
            ListDirectory: self._list_directory,
            ScanDirectory: self._scan_directory,
            MakeDirectory: self._make_directory,
            RemoveDirectory: self._remove_directory,
            Touch: self._touch,
            Unlink: self._unlink,
            ReadFile: self._read_file,
            WriteFile: self._write_file,
            Stat: self._stat,
            OpenFile: self._open_file,
            Rename: self._rename,
        }

    @property
    def registry(self) -> StreamRegistry:
        return self._registry

    def dispatch(self, operation: Operation | Rename) -> OperationResult:
        """Run an operation and return its result.

        Args:
            operation: One of the operation variants.

        Returns:
            OperationResult; failed results carry the error kind and message.

        Raises:
            TypeError: If the operation type is not supported.
        """
        handler = self._handlers.get(type(operation))
        if handler is None:
            raise TypeError(f"Unsupported operation: {type(operation).__name__}")

        name = type(operation).__name__
        logger.debug("Dispatching %s on %s", name, operation.address)
        try:
            value = handler(operation)
        except ProtostreamError as e:
            log_operation_error(e, name, operation.address)
            return OperationResult.create_error(e)
        except OSError as e:
            # Raised outside a primitive call, e.g. by an existence probe
            error = from_os_error(e, operation.address)
            log_operation_error(error, name, operation.address)
            return OperationResult.create_error(error)
        return OperationResult.create_success(value)

    # ------------------------------------------------------------------
    # Convenience entry points
    # ------------------------------------------------------------------

    def list_directory(self, protocol: str, path: str) -> OperationResult:
        """Open a DirectoryIterationSession over a directory."""
        return self.dispatch(ListDirectory(protocol, path))

    def scan_directory(self, protocol: str, path: str) -> OperationResult:
        """List a directory into a sorted list including "." and ".."."""
        return self.dispatch(ScanDirectory(protocol, path))

    def make_directory(
        self, protocol: str, path: str, recursive: bool = False
    ) -> OperationResult:
        return self.dispatch(MakeDirectory(protocol, path, recursive=recursive))

    def remove_directory(self, protocol: str, path: str) -> OperationResult:
        return self.dispatch(RemoveDirectory(protocol, path))

    def touch(
        self, protocol: str, path: str, mtime: float | None = None
    ) -> OperationResult:
        return self.dispatch(Touch(protocol, path, mtime=mtime))

    def unlink(self, protocol: str, path: str) -> OperationResult:
        return self.dispatch(Unlink(protocol, path))

    def read_file(self, protocol: str, path: str) -> OperationResult:
        """Read a file; the result value is its contents as bytes."""
        return self.dispatch(ReadFile(protocol, path))

    def write_file(
        self, protocol: str, path: str, data: bytes | str
    ) -> OperationResult:
        """Write a file; the result value is the number of bytes written."""
        return self.dispatch(WriteFile(protocol, path, data=data))

    def rename(
        self,
        source_protocol: str,
        source_path: str,
        target_protocol: str,
        target_path: str,
    ) -> OperationResult:
        return self.dispatch(
            Rename(source_protocol, source_path, target_protocol, target_path)
        )

    def stat(self, protocol: str, path: str) -> OperationResult:
        """Stat an entry; the result value is an EntryStat."""
        return self.dispatch(Stat(protocol, path))

    def open_file(self, protocol: str, path: str, mode: str = "rb") -> OperationResult:
        """Open a binary file object; the caller must close it."""
        return self.dispatch(OpenFile(protocol, path, mode=mode))

    def exists(self, protocol: str, path: str) -> bool:
        """Check whether an entry exists. Never fails; errors mean False."""
        return self.stat(protocol, path).success

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _descriptor_for(self, protocol: str, mutating: bool) -> StreamDescriptor:
        descriptor = self._registry.lookup(protocol)
        if mutating and not descriptor.writable:
            raise ReadOnlyViolationError(
                f"Protocol '{protocol}' is read-only",
                hint="Register the protocol with writable=True to allow changes",
            )
        return descriptor

    def _select(self, candidates: list[ResolvedPath], may_create: bool) -> ResolvedPath:
        """Pick the root a path resolves under.

        Args:
            candidates: Resolved paths, one per root, in root order.
            may_create: Whether the operation may create the target.

        Returns:
            The first existing candidate; else, if may_create, the first
            candidate whose parent directory exists; else the first candidate.
        """
        for candidate in candidates:
            if self._fs.exists(candidate.path):
                return candidate
        if may_create:
            for candidate in candidates:
                if self._fs.is_dir(candidate.parent):
                    return candidate
        return candidates[0]

    def _resolve(self, operation: Operation) -> ResolvedPath:
        descriptor = self._descriptor_for(operation.protocol, operation.is_mutating)
        candidates = resolver.candidates(descriptor.roots, operation.path)
        return self._select(candidates, operation.may_create)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _list_directory(self, operation: ListDirectory) -> DirectoryIterationSession:
        target = self._resolve(operation)
        with _filesystem_errors(operation.address):
            entries = self._fs.list_dir(target.path)
        return DirectoryIterationSession(operation.address, entries)

    def _scan_directory(self, operation: ScanDirectory) -> list[str]:
        session = self._list_directory(ListDirectory(operation.protocol, operation.path))
        with session:
            return sorted(session.entries)

    def _make_directory(self, operation: MakeDirectory) -> bool:
        target = self._resolve(operation)
        with _filesystem_errors(operation.address):
            self._fs.mkdir(target.path, parents=operation.recursive)
        return True

    def _remove_directory(self, operation: RemoveDirectory) -> bool:
        target = self._resolve(operation)
        if target.is_root:
            raise IOFailureError(f"Cannot remove the protocol root: {operation.address}")
        with _filesystem_errors(operation.address):
            self._fs.rmdir(target.path)
        return True

    def _touch(self, operation: Touch) -> bool:
        target = self._resolve(operation)
        with _filesystem_errors(operation.address):
            self._fs.touch(target.path, operation.mtime)
        return True

    def _unlink(self, operation: Unlink) -> bool:
        target = self._resolve(operation)
        with _filesystem_errors(operation.address):
            self._fs.unlink(target.path)
        return True

    def _read_file(self, operation: ReadFile) -> bytes:
        target = self._resolve(operation)
        with _filesystem_errors(operation.address):
            return self._fs.read(target.path)

    def _write_file(self, operation: WriteFile) -> int:
        target = self._resolve(operation)
        with _filesystem_errors(operation.address):
            return self._fs.write(target.path, operation.payload)

    def _stat(self, operation: Stat) -> EntryStat:
        target = self._resolve(operation)
        with _filesystem_errors(operation.address):
            return EntryStat.from_stat_result(self._fs.stat(target.path))

    def _open_file(self, operation: OpenFile) -> BinaryIO:
        target = self._resolve(operation)
        with _filesystem_errors(operation.address):
            return self._fs.open(target.path, operation.binary_mode)

    def _rename(self, operation: Rename) -> bool:
        # Both lookups and both read-only checks happen before any resolution
        source_descriptor = self._descriptor_for(operation.source_protocol, True)
        target_descriptor = self._descriptor_for(operation.target_protocol, True)

        source = self._select(
            resolver.candidates(source_descriptor.roots, operation.source_path),
            may_create=False,
        )
        target = self._select(
            resolver.candidates(target_descriptor.roots, operation.target_path),
            may_create=True,
        )

        source_address = source_descriptor.address(operation.source_path)
        if not self._fs.exists(source.path):
            raise NotFoundError(f"No such file or directory: {source_address}")
        if source.path == target.path:
            logger.debug("Rename of %s onto itself is a no-op", source_address)
            return True
        if source.is_root or target.is_root:
            raise IOFailureError(f"Cannot rename a protocol root: {operation.address}")

        with _filesystem_errors(operation.address):
            self._fs.rename(source.path, target.path)
        return True
