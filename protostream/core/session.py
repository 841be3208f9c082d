"""Directory iteration sessions.

A session captures the entries of a directory once, when it is opened, and
walks them with an explicit cursor. Rewinding resets the cursor, so the
first entry read after rewind() is always the first entry ever read.
"""

from collections.abc import Iterator, Sequence
from typing import Self

from protostream.domain.exceptions import SessionClosedError

DOT_ENTRIES = (".", "..")


class DirectoryIterationSession:
    """Cursor over a snapshot of directory entries.

    The snapshot starts with "." and "..", followed by the remaining names in
    the order the filesystem enumerated them. Sessions are owned by the
    caller that opened them and are not shared between threads.

    Example:
        with dispatcher.list_directory("assets", ".").value as session:
            for name in session:
                ...
    """

    def __init__(self, address: str, entries: Sequence[str]) -> None:
        """Initialize the session.

        Args:
            address: Protocol address of the listed directory.
            entries: Entry names, excluding "." and "..".
        """
        self.address = address
        self._entries: tuple[str, ...] = DOT_ENTRIES + tuple(
            name for name in entries if name not in DOT_ENTRIES
        )
        self._cursor = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def position(self) -> int:
        """Index of the entry the next read() returns."""
        self._check_open()
        return self._cursor

    @property
    def entries(self) -> tuple[str, ...]:
        """All captured entries, independent of the cursor."""
        self._check_open()
        return self._entries

    def read(self) -> str | None:
        """Return the next entry and advance the cursor.

        Returns:
            Entry name, or None once every entry has been read.

        Raises:
            SessionClosedError: If the session was closed.
        """
        self._check_open()
        if self._cursor >= len(self._entries):
            return None
        entry = self._entries[self._cursor]
        self._cursor += 1
        return entry

    def rewind(self) -> None:
        """Move the cursor back to the first entry.

        Raises:
            SessionClosedError: If the session was closed.
        """
        self._check_open()
        self._cursor = 0

    def close(self) -> None:
        """Release the snapshot. Closing twice is allowed."""
        self._closed = True
        self._entries = ()

    def _check_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"Directory session for {self.address} is closed")

    def __iter__(self) -> Iterator[str]:
        """Iterate over the unread entries, advancing the cursor."""
        while True:
            entry = self.read()
            if entry is None:
                return
            yield entry

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"at {self._cursor}/{len(self._entries)}"
        return f"<DirectoryIterationSession {self.address} {state}>"
