"""Unit tests for the factory module.

Tests the factory classes that centralize adapter instantiation,
ensuring clean architecture separation between CLI and adapters.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from protostream.adapters.config.toml_config_provider import TomlConfigProvider
from protostream.adapters.factory import ConfigFactory, DispatcherFactory
from protostream.adapters.fs.local import LocalFileSystem
from protostream.core.host import StreamHost
from protostream.core.registry import StreamRegistry
from protostream.domain.config import ProtocolConfig, ProtostreamConfig
from protostream.domain.entities import StreamDescriptor
from protostream.domain.exceptions import DuplicateProtocolError


@pytest.fixture
def config(resources: Path) -> ProtostreamConfig:
    return ProtostreamConfig(
        protocols={
            "test": ProtocolConfig("test", [str(resources)], writable=True),
            "test-read": ProtocolConfig("test-read", [str(resources)]),
        }
    )


class TestConfigFactory:
    """Tests for ConfigFactory class."""

    def test_creates_toml_provider(self):
        assert isinstance(ConfigFactory().create_config_provider(), TomlConfigProvider)

    def test_load_reads_given_file(self, tmp_path: Path, no_global_config: Path):
        config_file = tmp_path / "protostream.toml"
        config_file.write_text('[protocols.data]\nroots = ["/srv/data"]\n')

        assert "data" in ConfigFactory().load(config_file).protocols


class TestDispatcherFactory:
    """Tests for DispatcherFactory class."""

    def test_create_registry_registers_every_protocol(self, config):
        registry = DispatcherFactory(config).create_registry()

        assert registry.names() == ["test", "test-read"]
        assert registry.lookup("test").writable is True
        assert registry.lookup("test-read").writable is False

    def test_create_registry_fills_given_registry(self, config):
        registry = StreamRegistry()
        assert DispatcherFactory(config).create_registry(registry) is registry

    def test_create_registry_conflict_raises(self, config, resources: Path):
        """Configured names clash with protocols registered in code."""
        registry = StreamRegistry().register(StreamDescriptor("test", (str(resources),)))

        with pytest.raises(DuplicateProtocolError):
            DispatcherFactory(config).create_registry(registry)

    def test_create_dispatcher_defaults_to_local_fs(self, config):
        dispatcher = DispatcherFactory(config).create_dispatcher()

        assert dispatcher.read_file("test-read", "file.ext").value == b"contents\n"

    def test_create_dispatcher_uses_given_fs(self, config):
        fs = MagicMock(spec=LocalFileSystem)
        fs.exists.return_value = True
        fs.read.return_value = b"mocked"

        dispatcher = DispatcherFactory(config).create_dispatcher(fs=fs)

        assert dispatcher.read_file("test", "file.ext").value == b"mocked"
        fs.read.assert_called_once()

    def test_create_host(self, config):
        host = DispatcherFactory(config).create_host()

        assert isinstance(host, StreamHost)
        assert host.scandir("test://").value == [".", "..", "directory", "file.ext"]

    def test_empty_config_gives_empty_registry(self):
        registry = DispatcherFactory(ProtostreamConfig.default()).create_registry()
        assert len(registry) == 0
