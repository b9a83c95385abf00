"""Provider roles a server is composed from.

A server binds one `ResourceProvider` per resource type and exactly one
`SystemProvider` for whole-system interactions. Both are supplied by a
discovery source; their persistence and business logic live elsewhere.
"""

from __future__ import annotations

import abc
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fhirstarter.domain.value_objects import Operation

    from .rest import Request, Response, ResultList


class ResourceProvider(abc.ABC):
    """Handler for every interaction on one resource type."""

    @property
    @abc.abstractmethod
    def resource_type(self) -> str:
        """The resource type this provider is bound to, e.g. ``"Patient"``."""

    @abc.abstractmethod
    def supported_operations(self) -> Iterable[Operation]:
        """Declare the operations this provider supports.

        Every declared operation must target `resource_type`; anything else is
        a capability inconsistency and aborts bootstrap.
        """

    @abc.abstractmethod
    def handle(self, request: Request) -> Response | ResultList:
        """Serve a request addressed to this provider's resource type.

        Returning a `ResultList` hands paging of the results to the server.
        """


class SystemProvider(abc.ABC):
    """Handler for interactions spanning resource types (transaction, global history)."""

    @abc.abstractmethod
    def supported_operations(self) -> Iterable[Operation]:
        """Declare the system-level operations this provider supports.

        Operations may also target a resource type, which must then be bound
        to a resource provider.
        """

    @abc.abstractmethod
    def handle(self, request: Request) -> Response | ResultList:
        """Serve a request that is not addressed to a single resource type."""
