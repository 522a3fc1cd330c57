"""Transport module."""

from .cache import TransportCache, TransportOptions, build_transport
from .provider import ScopedTransportProvider

__all__ = ["ScopedTransportProvider", "TransportCache", "TransportOptions", "build_transport"]
