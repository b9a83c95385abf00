"""Registry of resource-type bindings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fhirstarter.domain.errors import DuplicateBinding, RegistryFrozen

if TYPE_CHECKING:
    from fhirstarter.interfaces.providers import ResourceProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceProviderBinding:
    """Pairs a resource type with the provider responsible for it."""

    resource_type: str
    provider: ResourceProvider


class ProviderRegistry:
    """Holds at most one provider per resource type, in registration order.

    The registry is writable until `freeze()` is called by bootstrap; it is
    read-only afterwards and can then be shared across request threads
    without locking.
    """

    KIND = "provider registry"

    def __init__(self) -> None:
        self._bindings: dict[str, ResourceProviderBinding] = {}
        self._frozen = False

    def register(self, resource_type: str, provider: ResourceProvider) -> None:
        """Bind ``provider`` to ``resource_type``.

        Raises:
            RegistryFrozen: If the registry has been frozen.
            DuplicateBinding: If ``resource_type`` is already bound. The
                existing binding is kept.
        """
        if self._frozen:
            raise RegistryFrozen(self.KIND)
        if resource_type in self._bindings:
            raise DuplicateBinding(resource_type)
        self._bindings[resource_type] = ResourceProviderBinding(resource_type, provider)
        logger.debug("Bound %s to %s", resource_type, type(provider).__name__)

    def lookup(self, resource_type: str) -> ResourceProvider | None:
        """Return the provider bound to ``resource_type``, or None."""
        if binding := self._bindings.get(resource_type):
            return binding.provider
        return None

    def all_bindings(self) -> tuple[ResourceProviderBinding, ...]:
        """All bindings in registration order."""
        return tuple(self._bindings.values())

    def resource_types(self) -> tuple[str, ...]:
        """Bound resource types in registration order."""
        return tuple(self._bindings)

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        """Whether the registry rejects further registrations."""
        return self._frozen

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, resource_type: object) -> bool:
        return resource_type in self._bindings
