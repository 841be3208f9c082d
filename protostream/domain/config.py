"""Config domain models for protostream.

Configuration is stored in TOML and declares the protocols to register and
the logging level of the command line host. This module defines the domain
models that represent validated configuration state.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any

from protostream.domain.entities import StreamDescriptor

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ProtocolConfig:
    """Configuration for one virtual protocol.

    Attributes:
        name: Protocol name (e.g., "assets")
        roots: Absolute root directories, tried in order
        writable: Whether mutating operations are allowed (default: False)

    Raises:
        ValueError: If roots is empty or not a list of paths, or writable
            is not a bool.
    """

    name: str
    roots: list[str] = field(default_factory=list)
    writable: bool = False

    def __post_init__(self) -> None:
        """Validate protocol config after initialization."""
        if not isinstance(self.roots, (list, tuple)):
            raise ValueError(f"Protocol '{self.name}': roots must be a list of paths")
        if not self.roots:
            raise ValueError(f"Protocol '{self.name}' must declare at least one root")
        for root in self.roots:
            if not isinstance(root, (str, os.PathLike)):
                raise ValueError(
                    f"Protocol '{self.name}': root {root!r} must be a path string"
                )
        # A TOML string such as "false" would otherwise be truthy
        if not isinstance(self.writable, bool):
            raise ValueError(
                f"Protocol '{self.name}': writable must be true or false, "
                f"got {self.writable!r}"
            )

    def to_descriptor(self) -> StreamDescriptor:
        """Build the immutable descriptor registered for this protocol.

        Raises:
            ValueError: If the name or a root is invalid.
        """
        return StreamDescriptor(
            name=self.name, roots=tuple(self.roots), writable=self.writable
        )


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for log output.

    Attributes:
        level: Root log level name (default: "WARNING")

    Raises:
        ValueError: If level is not a standard logging level name.
    """

    level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate logging config after initialization."""
        if not isinstance(self.level, str) or self.level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"level must be one of {', '.join(LOG_LEVELS)}, got {self.level!r}"
            )

    @property
    def numeric_level(self) -> int:
        """The level as a logging module constant."""
        return getattr(logging, self.level.upper())


@dataclass(frozen=True)
class ProtostreamConfig:
    """Complete protostream configuration.

    Attributes:
        protocols: Protocol configurations keyed by protocol name
        logging: Logging configuration
    """

    protocols: dict[str, ProtocolConfig] = field(default_factory=dict)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def default() -> "ProtostreamConfig":
        """Create a config with all default values (no protocols)."""
        return ProtostreamConfig(protocols={}, logging=LoggingConfig())

    @staticmethod
    def from_partial(
        base: "ProtostreamConfig", data: dict[str, Any]
    ) -> "ProtostreamConfig":
        """Overlay raw config data on top of an existing config.

        The logging section is merged key by key. Protocols are merged by
        name: a protocol declared in ``data`` replaces the one in ``base``.

        Args:
            base: Config to start from
            data: Raw TOML data with "logging" and/or "protocols" sections

        Returns:
            New ProtostreamConfig with the overrides applied

        Raises:
            ValueError: If any section is malformed.
        """
        if not isinstance(data.get("logging", {}), dict):
            raise ValueError("'logging' must be a table")
        if not isinstance(data.get("protocols", {}), dict):
            raise ValueError("'protocols' must be a table of protocol tables")
        logging_data = {"level": base.logging.level, **data.get("logging", {})}
        protocols = dict(base.protocols)
        try:
            for name, protocol_data in data.get("protocols", {}).items():
                if not isinstance(protocol_data, dict):
                    raise ValueError(f"Protocol '{name}' must be a table")
                protocols[name] = ProtocolConfig(name=name, **protocol_data)
            logging_config = LoggingConfig(**logging_data)
        except TypeError as e:
            # Unknown keys surface as unexpected keyword arguments
            raise ValueError(f"Unknown configuration key: {e}") from e

        return ProtostreamConfig(protocols=protocols, logging=logging_config)
