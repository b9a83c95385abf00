"""In-memory discovery source: a small named bean container."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence

from fhirstarter.interfaces.discovery import DiscoverySource
from fhirstarter.interfaces.interceptor import ServerInterceptor
from fhirstarter.interfaces.providers import ResourceProvider, SystemProvider

logger = logging.getLogger(__name__)


class InMemoryDiscoverySource(DiscoverySource):
    """Discovery source backed by a dict of named beans.

    Beans keep their registration order. `interceptors()` returns every
    registered bean that is a `ServerInterceptor`, in that order, which makes
    registration order the interceptor invocation order.

    Note:
        Not thread-safe; populate it before bootstrap.
    """

    def __init__(self) -> None:
        self._beans: dict[str, object] = {}
        self._interceptor_ids = itertools.count(1)

    def register_bean(self, name: str, bean: object) -> None:
        """Register ``bean`` under ``name``.

        Raises:
            ValueError: If ``name`` is already taken.
        """
        if name in self._beans:
            raise ValueError(f"A bean named '{name}' is already registered.")
        self._beans[name] = bean
        logger.debug("Registered bean %s (%s)", name, type(bean).__name__)

    def register_interceptor(
        self, interceptor: ServerInterceptor, name: str | None = None
    ) -> None:
        """Register an interceptor, generating an unused name if none is given."""
        if name is None:
            name = next(
                candidate
                for n in self._interceptor_ids
                if (candidate := f"interceptor#{n}") not in self._beans
            )
        self.register_bean(name, interceptor)

    def bean_names(self) -> tuple[str, ...]:
        """Names of all registered beans, in registration order."""
        return tuple(self._beans)

    # --- lookups ---

    def resource_providers(self, name: str) -> Sequence[ResourceProvider] | None:
        if (bean := self._beans.get(name)) is None:
            return None
        if not isinstance(bean, (list, tuple)) or not all(
            isinstance(provider, ResourceProvider) for provider in bean
        ):
            raise TypeError(f"Bean '{name}' is not a sequence of resource providers.")
        return tuple(bean)

    def system_provider(self, name: str) -> SystemProvider | None:
        if (bean := self._beans.get(name)) is None:
            return None
        if not isinstance(bean, SystemProvider):
            raise TypeError(
                f"Bean '{name}' is a {type(bean).__name__}, not a system provider."
            )
        return bean

    def interceptors(self) -> Sequence[ServerInterceptor]:
        return tuple(
            bean for bean in self._beans.values() if isinstance(bean, ServerInterceptor)
        )
