"""Factory classes for dispatcher and adapter instantiation.

This module centralizes the wiring of the registry, the filesystem adapter
and the dispatcher, keeping the CLI layer free from direct adapter imports.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from protostream.core.dispatcher import OperationDispatcher
from protostream.core.host import StreamHost
from protostream.core.registry import StreamRegistry

if TYPE_CHECKING:
    from protostream.domain.config import ProtostreamConfig
    from protostream.ports.fs import FileSystem

logger = logging.getLogger(__name__)


class ConfigFactory:
    """Factory for creating configuration providers."""

    def create_config_provider(self):
        """Create the TOML configuration provider."""
        from protostream.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider()

    def load(self, local_path: Path | None = None) -> ProtostreamConfig:
        """Load the merged global/local configuration."""
        return self.create_config_provider().load(local_path)


class DispatcherFactory:
    """Factory for dispatchers backed by configured protocols.

    Args:
        config: ProtostreamConfig with the protocols to register.
    """

    def __init__(self, config: ProtostreamConfig) -> None:
        """Initialize factory with configuration.

        Args:
            config: Configuration containing protocol declarations.
        """
        self._config = config

    def create_registry(self, registry: StreamRegistry | None = None) -> StreamRegistry:
        """Register every configured protocol.

        Args:
            registry: Registry to fill. A new one is created if omitted.

        Returns:
            The filled registry.

        Raises:
            ValueError: If a protocol has an invalid name or root.
            DuplicateProtocolError: If a protocol is already registered.
        """
        registry = registry if registry is not None else StreamRegistry()
        for name in sorted(self._config.protocols):
            registry.register(self._config.protocols[name].to_descriptor())
        logger.debug("Registered %d configured protocol(s)", len(self._config.protocols))
        return registry

    def create_dispatcher(
        self,
        fs: FileSystem | None = None,
        registry: StreamRegistry | None = None,
    ) -> OperationDispatcher:
        """Create a dispatcher over the configured protocols.

        Args:
            fs: Filesystem adapter. Defaults to LocalFileSystem.
            registry: Registry to register the protocols in.

        Returns:
            Configured OperationDispatcher.
        """
        if fs is None:
            from protostream.adapters.fs.local import LocalFileSystem

            fs = LocalFileSystem()
        return OperationDispatcher(self.create_registry(registry), fs)

    def create_host(self, fs: FileSystem | None = None) -> StreamHost:
        """Create an address-based host over the configured protocols."""
        return StreamHost(self.create_dispatcher(fs))
