"""Address-based host facade.

Lets application code address files as "protocol://path" with calls named
after the native filesystem functions they stand in for:

    host = StreamHost(dispatcher)
    host.mkdir("assets://icons")
    host.file_put_contents("assets://icons/logo.svg", svg)
    names = host.scandir("assets://icons").value

Every call returns an OperationResult, including for malformed addresses.
"""

from protostream.core.address import Address, parse_address
from protostream.core.dispatcher import OperationDispatcher
from protostream.domain.entities import OperationResult
from protostream.domain.exceptions import UnknownProtocolError


class StreamHost:
    """Splits addresses and forwards them to an OperationDispatcher."""

    def __init__(self, dispatcher: OperationDispatcher) -> None:
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> OperationDispatcher:
        return self._dispatcher

    def opendir(self, address: str) -> OperationResult:
        """Open a DirectoryIterationSession over a directory address."""
        return self._call(address, self._dispatcher.list_directory)

    def scandir(self, address: str) -> OperationResult:
        """Sorted entry names of a directory, "." and ".." included."""
        return self._call(address, self._dispatcher.scan_directory)

    def mkdir(self, address: str, recursive: bool = False) -> OperationResult:
        return self._call(
            address,
            lambda protocol, path: self._dispatcher.make_directory(
                protocol, path, recursive=recursive
            ),
        )

    def rmdir(self, address: str) -> OperationResult:
        return self._call(address, self._dispatcher.remove_directory)

    def touch(self, address: str, mtime: float | None = None) -> OperationResult:
        return self._call(
            address,
            lambda protocol, path: self._dispatcher.touch(protocol, path, mtime=mtime),
        )

    def unlink(self, address: str) -> OperationResult:
        return self._call(address, self._dispatcher.unlink)

    def file_get_contents(self, address: str) -> OperationResult:
        return self._call(address, self._dispatcher.read_file)

    def file_put_contents(self, address: str, data: bytes | str) -> OperationResult:
        return self._call(
            address,
            lambda protocol, path: self._dispatcher.write_file(protocol, path, data),
        )

    def stat(self, address: str) -> OperationResult:
        return self._call(address, self._dispatcher.stat)

    def open(self, address: str, mode: str = "rb") -> OperationResult:
        return self._call(
            address,
            lambda protocol, path: self._dispatcher.open_file(protocol, path, mode),
        )

    def exists(self, address: str) -> bool:
        return self.stat(address).success

    def rename(self, source: str, target: str) -> OperationResult:
        try:
            source_address = parse_address(source)
            target_address = parse_address(target)
        except ValueError as e:
            return OperationResult.create_error(UnknownProtocolError(str(e)))
        return self._dispatcher.rename(
            source_address.protocol,
            source_address.path,
            target_address.protocol,
            target_address.path,
        )

    def _call(self, address: str, operation) -> OperationResult:
        try:
            parsed: Address = parse_address(address)
        except ValueError as e:
            return OperationResult.create_error(UnknownProtocolError(str(e)))
        return operation(parsed.protocol, parsed.path)
