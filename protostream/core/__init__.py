"""Core protocol resolution and dispatch.

Contains the path resolver, the stream registry, the operation dispatcher,
directory iteration sessions and the address-based host facade.
"""

from protostream.core import resolver
from protostream.core.address import Address, parse_address
from protostream.core.dispatcher import OperationDispatcher
from protostream.core.host import StreamHost
from protostream.core.registry import StreamRegistry, default_registry
from protostream.core.session import DirectoryIterationSession

__all__ = [
    "Address",
    "DirectoryIterationSession",
    "OperationDispatcher",
    "StreamHost",
    "StreamRegistry",
    "default_registry",
    "parse_address",
    "resolver",
]
