"""Bootstrap a server from a discovery source and static metadata."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import replace

from fhirstarter import config
from fhirstarter.adapters.discovery import load_discovery_source
from fhirstarter.adapters.id_generators import ULIDGenerator, UUIDv4Generator
from fhirstarter.adapters.paging import FifoMemoryPagingController
from fhirstarter.domain.errors import (
    BootstrapError,
    DependencyFailure,
    MissingProviderSet,
    MissingSystemProvider,
)
from fhirstarter.domain.value_objects import (
    ProtocolVersion,
    ServerMetadata,
    discovery_keys_for,
)
from fhirstarter.interfaces.discovery import DiscoverySource
from fhirstarter.interfaces.id_generator import IdGenerator
from fhirstarter.interfaces.providers import SystemProvider
from fhirstarter.service_layer.capability import Clock, CapabilityStatementBuilder
from fhirstarter.service_layer.interceptors import InterceptorChain
from fhirstarter.service_layer.policy import RequestPolicyConfig
from fhirstarter.service_layer.registry import ProviderRegistry
from fhirstarter.service_layer.server import Server

logger = logging.getLogger(__name__)

TOKEN_GENERATORS: dict[str, type[IdGenerator]] = {
    "ulid": ULIDGenerator,
    "uuid4": UUIDv4Generator,
}


@contextmanager
def bootstrap_step(step: str) -> Iterator[None]:
    """Run one bootstrap step, wrapping collaborator failures.

    `BootstrapError`s pass through unchanged; any other exception becomes a
    `DependencyFailure` naming the step, chained to the original.
    """
    logger.debug("Bootstrap step: %s", step)
    try:
        yield
    except BootstrapError as e:
        logger.error("Bootstrap failed at '%s': %s", step, e)
        raise
    except Exception as e:  # pylint: disable=broad-except
        logger.error("Bootstrap failed at '%s': %s", step, e)
        raise DependencyFailure(step, e) from e


def build_provider_registry(
    discovery_source: DiscoverySource, version: ProtocolVersion
) -> ProviderRegistry:
    """Resolve the version's resource providers and bind them in order.

    Raises:
        MissingProviderSet: If the discovery source has no set for the version.
        DuplicateBinding: If two providers claim the same resource type.
    """
    name = discovery_keys_for(version).resource_providers
    if (providers := discovery_source.resource_providers(name)) is None:
        raise MissingProviderSet(version.name, name)
    registry = ProviderRegistry()
    for provider in providers:
        registry.register(provider.resource_type, provider)
    return registry


def resolve_system_provider(
    discovery_source: DiscoverySource, version: ProtocolVersion
) -> SystemProvider:
    """Resolve the version's single system provider.

    Raises:
        MissingSystemProvider: If the discovery source has none for the version.
    """
    name = discovery_keys_for(version).system_provider
    if (provider := discovery_source.system_provider(name)) is None:
        raise MissingSystemProvider(version.name, name)
    return provider


def build_request_policy(settings: config.ServerSettings) -> RequestPolicyConfig:
    """Translate configured serving switches into a `RequestPolicyConfig`."""
    return RequestPolicyConfig(
        browser_friendly_content_types=settings.browser_friendly,
        default_pretty_print=settings.pretty_print,
        default_response_encoding=settings.default_encoding,
        canonical_base_address=settings.base_address,
        etag_support=settings.etag_support,
    )


def build_paging_controller(
    settings: config.PagingSettings, id_generator: IdGenerator | None = None
) -> FifoMemoryPagingController:
    """Build the FIFO in-memory paging controller.

    Tokens come from ``id_generator`` when given, otherwise from the generator
    for the configured token format.
    """
    return FifoMemoryPagingController(
        capacity=settings.capacity,
        maximum_page_size=settings.maximum_page_size,
        default_page_size=settings.default_page_size,
        id_generator=id_generator or TOKEN_GENERATORS[settings.tokens](),
    )


def build_interceptor_chain(discovery_source: DiscoverySource) -> InterceptorChain:
    """Register the discovered interceptors in the order the source returns them."""
    chain = InterceptorChain()
    for interceptor in discovery_source.interceptors():
        chain.register(interceptor)
    return chain


class ServerBootstrap:
    """Assembles exactly one consistent `Server`, or fails fast.

    Args:
        version: FHIR version fixed for the server's lifetime.
        policy: Serving policy; its canonical base address is replaced by the
            metadata's base address when the metadata supplies one.
        paging: Paging controller bounds.
        id_generator: Paging token source (ULIDs by default).
        clock: Timestamp source for the conformance statement.
    """

    def __init__(
        self,
        version: ProtocolVersion = ProtocolVersion.DSTU2,
        policy: RequestPolicyConfig | None = None,
        paging: config.PagingSettings | None = None,
        id_generator: IdGenerator | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.version = version
        self.policy = policy or RequestPolicyConfig()
        self.paging = paging or config.PagingSettings()
        self._id_generator = id_generator
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: config.ServerSettings) -> ServerBootstrap:
        """Create a bootstrap configured from `ServerSettings`."""
        return cls(
            version=settings.fhir_version,
            policy=build_request_policy(settings),
            paging=settings.paging,
        )

    def initialize(
        self, discovery_source: DiscoverySource, metadata: ServerMetadata
    ) -> Server:
        """Run every bootstrap step in order and publish the server.

        Nothing is published unless every step succeeds.

        Raises:
            MissingProviderSet: No resource providers for the version.
            MissingSystemProvider: No system provider for the version.
            DuplicateBinding: Two providers for one resource type.
            CapabilityInconsistency: A declared operation has no backing binding.
            DependencyFailure: Any other collaborator failure, chained.
        """
        version = self.version
        logger.debug("FHIR version fixed to %s (%s)", version.name, version.fhir_version)

        with bootstrap_step("resolve resource providers"):
            registry = build_provider_registry(discovery_source, version)
            registry.freeze()

        with bootstrap_step("resolve system provider"):
            system_provider = resolve_system_provider(discovery_source, version)

        with bootstrap_step("build conformance statement"):
            statement = CapabilityStatementBuilder(version, clock=self._clock).build(
                registry, system_provider, metadata
            )

        with bootstrap_step("apply request policy"):
            policy = replace(
                self.policy,
                canonical_base_address=metadata.base_address
                or self.policy.canonical_base_address,
            )

        with bootstrap_step("build paging controller"):
            paging = build_paging_controller(self.paging, self._id_generator)

        with bootstrap_step("register interceptors"):
            interceptors = build_interceptor_chain(discovery_source)
            interceptors.freeze()

        server = Server(
            version=version,
            metadata=metadata,
            registry=registry,
            system_provider=system_provider,
            capability_statement=statement,
            policy=policy,
            paging=paging,
            interceptors=interceptors,
        )
        logger.info(
            "Server ready: FHIR %s, %d resource types, %d interceptors, base %s",
            version.name,
            len(registry),
            len(interceptors),
            policy.canonical_base_address or "<from request>",
        )
        return server


def bootstrap(
    discovery_source: DiscoverySource | None = None,
    environ: Mapping[str, str] | None = None,
) -> Server:
    """Bootstrap a server configured from the environment.

    Args:
        discovery_source: Source to resolve providers from; when None it is
            loaded from the configured ``FHIRSTARTER_DISCOVERY`` reference.
        environ: Environment mapping (defaults to `os.environ`).
    """
    settings = config.get_server_settings(environ)
    if discovery_source is None:
        with bootstrap_step("load discovery source"):
            discovery_source = load_discovery_source(settings.discovery)
    return ServerBootstrap.from_settings(settings).initialize(
        discovery_source, settings.metadata
    )
