"""Stream registry mapping protocol names to descriptors.

The registry is an explicitly constructed object handed to the dispatcher.
A lazily created process-wide instance is available through
default_registry() for hosts that need ambient access.
"""

import logging
import threading
from collections.abc import Iterator
from typing import Self

from protostream.domain.entities import StreamDescriptor
from protostream.domain.exceptions import DuplicateProtocolError, UnknownProtocolError

logger = logging.getLogger(__name__)


class StreamRegistry:
    """Thread-safe registry of stream descriptors.

    Lookups and mutations are serialized by a single lock. Descriptors are
    immutable, so a descriptor returned by lookup() can be used without
    holding the lock.

    register() and unregister() return the registry so calls can be chained:

        registry.register(assets).register(assets_read_only)

    Unregistering a name that is not registered raises UnknownProtocolError.
    """

    def __init__(self) -> None:
        self._descriptors: dict[str, StreamDescriptor] = {}
        self._lock = threading.Lock()

    def register(self, descriptor: StreamDescriptor, *, replace: bool = False) -> Self:
        """Register a descriptor under its protocol name.

        Args:
            descriptor: Descriptor to register.
            replace: Replace an existing registration instead of failing.

        Returns:
            The registry, for chaining.

        Raises:
            DuplicateProtocolError: If the name is taken and replace is False.
        """
        with self._lock:
            if descriptor.name in self._descriptors and not replace:
                raise DuplicateProtocolError(
                    f"Protocol '{descriptor.name}' is already registered",
                    hint="Unregister it first or register with replace=True",
                )
            self._descriptors[descriptor.name] = descriptor
        logger.info(
            "Registered protocol %s (%s) with roots %s",
            descriptor.name,
            "writable" if descriptor.writable else "read-only",
            ", ".join(descriptor.roots),
        )
        return self

    def unregister(self, name: str) -> Self:
        """Remove a protocol so later lookups fail.

        Args:
            name: Protocol name.

        Returns:
            The registry, for chaining.

        Raises:
            UnknownProtocolError: If the name is not registered.
        """
        with self._lock:
            if self._descriptors.pop(name, None) is None:
                raise UnknownProtocolError(f"Protocol '{name}' is not registered")
        logger.info("Unregistered protocol %s", name)
        return self

    def lookup(self, name: str) -> StreamDescriptor:
        """Look up the descriptor registered under a name.

        Raises:
            UnknownProtocolError: If the name is not registered.
        """
        with self._lock:
            descriptor = self._descriptors.get(name)
        if descriptor is None:
            raise UnknownProtocolError(
                f"Unknown protocol '{name}'",
                hint="Check the protocol name or register it first",
            )
        return descriptor

    def names(self) -> list[str]:
        """Registered protocol names, sorted."""
        with self._lock:
            return sorted(self._descriptors)

    def descriptors(self) -> list[StreamDescriptor]:
        """Registered descriptors, sorted by name."""
        with self._lock:
            return [self._descriptors[name] for name in sorted(self._descriptors)]

    def clear(self) -> None:
        """Remove every registration."""
        with self._lock:
            self._descriptors.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._descriptors

    def __len__(self) -> int:
        with self._lock:
            return len(self._descriptors)

    def __iter__(self) -> Iterator[StreamDescriptor]:
        return iter(self.descriptors())


_default_registry: StreamRegistry | None = None
_default_registry_lock = threading.Lock()


def default_registry() -> StreamRegistry:
    """Get the process-wide registry, creating it on first use.

    Uses double-checked locking so concurrent first calls share one instance.
    """
    global _default_registry
    if _default_registry is None:
        with _default_registry_lock:
            # Double-check pattern: re-check after acquiring lock
            if _default_registry is None:
                _default_registry = StreamRegistry()
    return _default_registry
