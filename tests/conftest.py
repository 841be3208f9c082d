"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from protostream.adapters.fs.local import LocalFileSystem
from protostream.core.dispatcher import OperationDispatcher
from protostream.core.host import StreamHost
from protostream.core.registry import StreamRegistry
from protostream.domain.entities import StreamDescriptor

# ============================================================================
# Resource Tree Helpers
# ============================================================================
# Every test that touches the disk works on a fresh copy of the same tree:
#
#   Resources/
#     file.ext        "contents\n"
#     directory/


def create_test_files(path: Path, files: dict[str, str]) -> None:
    """Create multiple files in a directory.

    Args:
        path: Base directory for file creation.
        files: Mapping of relative file paths to file contents.
               Parent directories are created automatically.

    Example:
        create_test_files(root, {
            "file.ext": "contents\\n",
            "nested/other.ext": "other",
        })
    """
    for file_path, content in files.items():
        full_path = path / file_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content)


def create_resources(path: Path) -> Path:
    """Create the standard resource tree used by protocol tests.

    Args:
        path: Directory to create (parents are created as needed).

    Returns:
        Absolute path to the resource root.
    """
    path.mkdir(parents=True, exist_ok=True)
    create_test_files(path, {"file.ext": "contents\n"})
    (path / "directory").mkdir()
    return path.resolve()


@pytest.fixture
def resources(tmp_path: Path) -> Path:
    """Root directory with file.ext and an empty directory/."""
    return create_resources(tmp_path / "Resources")


@pytest.fixture
def fs() -> LocalFileSystem:
    """Local filesystem adapter."""
    return LocalFileSystem()


@pytest.fixture
def registry(resources: Path) -> StreamRegistry:
    """Registry with a writable "test" and a read-only "test-read" protocol.

    Both protocols are rooted at the same resource directory.
    """
    registry = StreamRegistry()
    registry.register(StreamDescriptor("test", (str(resources),), writable=True))
    registry.register(StreamDescriptor("test-read", (str(resources),), writable=False))
    return registry


@pytest.fixture
def dispatcher(registry: StreamRegistry, fs: LocalFileSystem) -> OperationDispatcher:
    """Dispatcher over the test protocols."""
    return OperationDispatcher(registry, fs)


@pytest.fixture
def host(dispatcher: OperationDispatcher) -> StreamHost:
    """Address-based host over the test protocols."""
    return StreamHost(dispatcher)


@pytest.fixture
def no_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the global config location at a path that does not exist.

    Keeps tests isolated from the user's ~/.config/protostream/config.toml.
    """
    config_home = tmp_path / "xdg-config-home"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("APPDATA", raising=False)
    return config_home / "protostream" / "config.toml"
