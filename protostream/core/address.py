"""Splitting of "protocol://path" addresses.

The dispatcher works on (protocol, path) pairs; hosts that accept full
addresses split them here first.
"""

from dataclasses import dataclass

SCHEME_SEPARATOR = "://"


@dataclass(frozen=True)
class Address:
    """A protocol address split into its parts.

    Attributes:
        protocol: Protocol name (text before "://").
        path: Path relative to the protocol roots ("." if empty).
    """

    protocol: str
    path: str

    def __str__(self) -> str:
        return f"{self.protocol}{SCHEME_SEPARATOR}{self.path}"


def parse_address(address: str) -> Address:
    """Split an address of the form "protocol://relative/path".

    Args:
        address: Full address.

    Returns:
        Address with the protocol and the relative path. An empty path
        designates the protocol root and becomes ".".

    Raises:
        ValueError: If the address has no "://" or an empty protocol.
    """
    protocol, separator, path = address.partition(SCHEME_SEPARATOR)
    if not separator:
        raise ValueError(
            f"Invalid address '{address}': expected the form protocol://path"
        )
    if not protocol:
        raise ValueError(f"Invalid address '{address}': protocol is empty")
    return Address(protocol=protocol, path=path or ".")
