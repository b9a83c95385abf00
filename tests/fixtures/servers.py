"""Fixtures that bootstrap servers from the fakes in `tests.fixtures.providers`."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from fhirstarter.adapters.id_generators import SimpleIdGenerator
from fhirstarter.bootstrap import ServerBootstrap
from fhirstarter.config import PagingSettings
from fhirstarter.domain.value_objects import ProtocolVersion, ServerMetadata
from fhirstarter.interfaces.discovery import DiscoverySource
from fhirstarter.service_layer.policy import RequestPolicyConfig
from fhirstarter.service_layer.server import Server

# pylint: disable=redefined-outer-name

BASE_ADDRESS = "http://fhir.example.org/baseDstu2"
INCOMING_BASE = "http://localhost:8080/fhir"

ServerFactory = Callable[..., Server]


@pytest.fixture
def metadata() -> ServerMetadata:
    """Metadata with a static base address."""
    return ServerMetadata(
        implementation_description="Example Server", base_address=BASE_ADDRESS
    )


@pytest.fixture
def make_server(fixed_clock, metadata) -> ServerFactory:
    """Factory bootstrapping a `Server` with deterministic tokens and clock.

    Keyword Args:
        discovery: Discovery source to assemble from.
        version: Protocol version (DSTU2 by default).
        policy: Request policy (library defaults when omitted).
        paging: Paging bounds (small defaults so paging is easy to trigger).
        metadata: Server metadata (the `metadata` fixture when omitted).
    """

    def factory(
        discovery: DiscoverySource,
        version: ProtocolVersion = ProtocolVersion.DSTU2,
        policy: RequestPolicyConfig | None = None,
        paging: PagingSettings | None = None,
        metadata: ServerMetadata = metadata,
    ) -> Server:
        return ServerBootstrap(
            version=version,
            policy=policy,
            paging=paging
            or PagingSettings(capacity=3, maximum_page_size=50, default_page_size=2),
            id_generator=SimpleIdGenerator(length=4),
            clock=fixed_clock,
        ).initialize(discovery, metadata)

    return factory


@pytest.fixture
def server(make_server, standard_discovery) -> Server:
    """Server assembled from the standard fake providers."""
    return make_server(standard_discovery)
