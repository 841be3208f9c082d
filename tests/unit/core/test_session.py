"""Tests for directory iteration sessions."""

import pytest

from protostream.core.session import DirectoryIterationSession
from protostream.domain.exceptions import SessionClosedError


@pytest.fixture
def session() -> DirectoryIterationSession:
    """Session over two entries in filesystem order."""
    return DirectoryIterationSession("test://./", ["file.ext", "directory"])


class TestReading:
    """Tests for read() and iteration."""

    def test_dot_entries_come_first(self, session: DirectoryIterationSession) -> None:
        assert session.read() == "."
        assert session.read() == ".."

    def test_enumeration_order_is_kept(self, session: DirectoryIterationSession) -> None:
        """Remaining entries are not sorted."""
        assert session.entries == (".", "..", "file.ext", "directory")

    def test_read_returns_none_at_end(self, session: DirectoryIterationSession) -> None:
        for _ in range(4):
            assert session.read() is not None
        assert session.read() is None
        assert session.read() is None

    def test_iteration_consumes_remaining_entries(
        self, session: DirectoryIterationSession
    ) -> None:
        session.read()
        assert list(session) == ["..", "file.ext", "directory"]
        assert session.read() is None

    def test_dot_entries_from_listing_are_not_duplicated(self) -> None:
        session = DirectoryIterationSession("test://./", [".", "a", ".."])
        assert session.entries == (".", "..", "a")

    def test_position_tracks_cursor(self, session: DirectoryIterationSession) -> None:
        assert session.position == 0
        session.read()
        assert session.position == 1


class TestRewind:
    """Tests for rewind()."""

    def test_rewind_returns_first_entry_again(
        self, session: DirectoryIterationSession
    ) -> None:
        """The first entry after rewind is the first entry ever read."""
        first = session.read()
        session.read()
        session.read()

        session.rewind()

        assert session.read() == first

    def test_rewind_after_exhaustion(self, session: DirectoryIterationSession) -> None:
        first_pass = list(session)
        session.rewind()
        assert list(session) == first_pass


class TestClose:
    """Tests for close() and the closed state."""

    def test_operations_fail_after_close(self, session: DirectoryIterationSession) -> None:
        session.close()

        assert session.closed
        with pytest.raises(SessionClosedError):
            session.read()
        with pytest.raises(SessionClosedError):
            session.rewind()
        with pytest.raises(SessionClosedError):
            _ = session.entries

    def test_close_is_idempotent(self, session: DirectoryIterationSession) -> None:
        session.close()
        session.close()
        assert session.closed

    def test_context_manager_closes(self) -> None:
        with DirectoryIterationSession("test://./", ["a"]) as session:
            assert session.read() == "."
        assert session.closed

    def test_repr_shows_state(self, session: DirectoryIterationSession) -> None:
        assert "at 0/4" in repr(session)
        session.close()
        assert "closed" in repr(session)
