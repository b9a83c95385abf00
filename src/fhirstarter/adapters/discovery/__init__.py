"""Discovery source adapters."""

from .loader import load_discovery_source
from .memory import InMemoryDiscoverySource

__all__ = ["InMemoryDiscoverySource", "load_discovery_source"]
