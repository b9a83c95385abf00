"""Discovery source port.

The discovery source is the external container (e.g. a dependency-injection
context) the bootstrap resolves providers and interceptors from. Lookups
either return a well-typed result or None when nothing is registered.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .interceptor import ServerInterceptor
    from .providers import ResourceProvider, SystemProvider


class DiscoverySource(abc.ABC):
    """Contract for resolving provider and interceptor instances by role."""

    @abc.abstractmethod
    def resource_providers(self, name: str) -> Sequence[ResourceProvider] | None:
        """Resolve the set of resource providers registered under ``name``.

        Args:
            name: Version-derived logical name, e.g. ``"myResourceProvidersDstu2"``.

        Returns:
            The providers in registration order, or None if ``name`` is unknown.
        """

    @abc.abstractmethod
    def system_provider(self, name: str) -> SystemProvider | None:
        """Resolve the single system provider registered under ``name``.

        Returns:
            The provider, or None if ``name`` is unknown.
        """

    @abc.abstractmethod
    def interceptors(self) -> Sequence[ServerInterceptor]:
        """Return every registered interceptor, in invocation order."""
