"""Demo providers and a ready-populated discovery source.

Serves a handful of in-memory Patient, Observation and Organization
resources so the CLI and tests have something real to assemble. Not a
persistence layer: data lives for the life of the process.
"""

from __future__ import annotations

import copy
import itertools
import threading
from collections.abc import Iterable, Mapping
from typing import Any

from fhirstarter.adapters.interceptors import LoggingInterceptor
from fhirstarter.domain.value_objects import (
    Interaction,
    Operation,
    ProtocolVersion,
    discovery_keys_for,
)
from fhirstarter.interfaces.providers import ResourceProvider, SystemProvider
from fhirstarter.interfaces.rest import (
    Request,
    Response,
    ResultList,
    operation_outcome,
)

from .memory import InMemoryDiscoverySource

Resource = dict[str, Any]

DEMO_RESOURCES: dict[str, list[Resource]] = {
    "Patient": [
        {
            "resourceType": "Patient",
            "id": "1",
            "name": [{"family": ["Chalmers"], "given": ["Peter"]}],
            "gender": "male",
        },
        {
            "resourceType": "Patient",
            "id": "2",
            "name": [{"family": ["Windsor"], "given": ["Anna"]}],
            "gender": "female",
        },
    ],
    "Observation": [
        {
            "resourceType": "Observation",
            "id": "1",
            "status": "final",
            "code": {"text": "Body weight"},
            "subject": {"reference": "Patient/1"},
        },
    ],
    "Organization": [
        {"resourceType": "Organization", "id": "1", "name": "Example Hospital"},
    ],
}


class InMemoryResourceProvider(ResourceProvider):
    """Read, search and create over an in-memory list of resources.

    Search matches top-level parameters by string equality; parameters
    starting with ``_`` are ignored.
    """

    def __init__(self, resource_type: str, resources: Iterable[Mapping[str, Any]] = ()):
        self._resource_type = resource_type
        self._resources: dict[str, Resource] = {
            str(r["id"]): dict(r) for r in resources
        }
        self._ids = itertools.count(len(self._resources) + 1)
        self._lock = threading.Lock()

    @property
    def resource_type(self) -> str:
        return self._resource_type

    def supported_operations(self) -> Iterable[Operation]:
        for interaction in (Interaction.READ, Interaction.SEARCH_TYPE, Interaction.CREATE):
            yield Operation(interaction, self._resource_type)

    def all(self) -> list[Resource]:
        """Snapshot of every stored resource."""
        with self._lock:
            return [copy.deepcopy(r) for r in self._resources.values()]

    def handle(self, request: Request) -> Response | ResultList:
        segments = request.segments
        match (request.method, len(segments)):
            case ("GET", 1):
                return self._search(request.params)
            case ("GET", 2):
                return self._read(segments[1])
            case ("POST", 1):
                return self._create(request.body)
            case _:
                return operation_outcome(
                    405,
                    "error",
                    "not-supported",
                    f"{request.method} /{request.path} is not supported",
                )

    def _read(self, resource_id: str) -> Response:
        with self._lock:
            resource = self._resources.get(resource_id)
        if resource is None:
            return operation_outcome(
                404,
                "error",
                "not-found",
                f"Resource {self._resource_type}/{resource_id} is not known",
            )
        return Response(body=copy.deepcopy(resource))

    def _search(self, params: Mapping[str, str]) -> ResultList:
        criteria = {k: v for k, v in params.items() if not k.startswith("_")}
        matches = [
            r for r in self.all() if all(str(r.get(k)) == v for k, v in criteria.items())
        ]
        return ResultList(tuple(matches))

    def _create(self, body: Any) -> Response:
        if not isinstance(body, Mapping) or body.get("resourceType") != self._resource_type:
            return operation_outcome(
                400,
                "error",
                "invalid",
                f"Body must be a {self._resource_type} resource",
            )
        with self._lock:
            resource_id = str(next(self._ids))
            resource = {**copy.deepcopy(dict(body)), "id": resource_id}
            self._resources[resource_id] = resource
        return Response(
            status=201,
            body=copy.deepcopy(resource),
            headers={"Location": f"{self._resource_type}/{resource_id}/_history/1"},
        )


class InMemorySystemProvider(SystemProvider):
    """Whole-system search across a set of in-memory resource providers."""

    def __init__(self, providers: Iterable[InMemoryResourceProvider]):
        self._providers = tuple(providers)

    def supported_operations(self) -> Iterable[Operation]:
        yield Operation(Interaction.SEARCH_SYSTEM)

    def handle(self, request: Request) -> Response | ResultList:
        if request.method == "GET" and not request.segments:
            return ResultList(
                tuple(r for provider in self._providers for r in provider.all())
            )
        return operation_outcome(
            405,
            "error",
            "not-supported",
            f"{request.method} /{request.path} is not supported",
        )


def build_demo_discovery() -> InMemoryDiscoverySource:
    """Return a discovery source populated for every protocol version."""
    source = InMemoryDiscoverySource()
    for version in ProtocolVersion:
        keys = discovery_keys_for(version)
        providers = [
            InMemoryResourceProvider(resource_type, resources)
            for resource_type, resources in DEMO_RESOURCES.items()
        ]
        source.register_bean(keys.resource_providers, providers)
        source.register_bean(keys.system_provider, InMemorySystemProvider(providers))
    source.register_interceptor(LoggingInterceptor(), name="loggingInterceptor")
    return source
