"""Unit tests for the in-memory discovery source and its loader."""

import pytest

from fhirstarter.adapters.discovery import InMemoryDiscoverySource, load_discovery_source
from fhirstarter.interfaces.interceptor import ServerInterceptor
from tests.fixtures.providers import FakeResourceProvider, FakeSystemProvider

# pylint: disable=magic-value-comparison

DEMO_REFERENCE = "fhirstarter.adapters.discovery.demo:build_demo_discovery"


class TestInMemoryDiscoverySource:
    """Tests for InMemoryDiscoverySource."""

    @staticmethod
    def test_absent_names_resolve_to_none() -> None:
        """Nothing registered, nothing found."""
        source = InMemoryDiscoverySource()
        assert source.resource_providers("myResourceProvidersDstu2") is None
        assert source.system_provider("mySystemProviderDstu2") is None
        assert source.interceptors() == ()

    @staticmethod
    def test_resolves_registered_beans() -> None:
        """Registered providers come back as registered."""
        source = InMemoryDiscoverySource()
        patient = FakeResourceProvider("Patient")
        system = FakeSystemProvider()
        source.register_bean("providers", [patient])
        source.register_bean("system", system)
        assert source.resource_providers("providers") == (patient,)
        assert source.system_provider("system") is system

    @staticmethod
    def test_duplicate_names_rejected() -> None:
        """A name can only be registered once."""
        source = InMemoryDiscoverySource()
        source.register_bean("system", FakeSystemProvider())
        with pytest.raises(ValueError, match="already registered"):
            source.register_bean("system", FakeSystemProvider())

    @staticmethod
    def test_wrong_bean_kinds_raise_type_error() -> None:
        """Names resolving to the wrong kind of bean are rejected."""
        source = InMemoryDiscoverySource()
        source.register_bean("providers", FakeSystemProvider())
        source.register_bean("system", [FakeResourceProvider("Patient")])
        with pytest.raises(TypeError, match="not a sequence of resource providers"):
            source.resource_providers("providers")
        with pytest.raises(TypeError, match="not a system provider"):
            source.system_provider("system")

    @staticmethod
    def test_interceptors_in_registration_order() -> None:
        """Interceptors come back in registration order, other beans skipped."""
        source = InMemoryDiscoverySource()
        first, second = ServerInterceptor(), ServerInterceptor()
        source.register_interceptor(first)
        source.register_bean("system", FakeSystemProvider())
        source.register_interceptor(second, name="auditInterceptor")
        assert source.interceptors() == (first, second)
        assert source.bean_names() == ("interceptor#1", "system", "auditInterceptor")

    @staticmethod
    def test_generated_interceptor_names_never_clash() -> None:
        """Unnamed interceptors skip names already taken by other beans."""
        source = InMemoryDiscoverySource()
        named, first, second = ServerInterceptor(), ServerInterceptor(), ServerInterceptor()
        source.register_interceptor(first)
        source.register_interceptor(named, name="interceptor#2")
        source.register_interceptor(second)
        assert source.interceptors() == (first, named, second)
        assert source.bean_names() == ("interceptor#1", "interceptor#2", "interceptor#3")


class TestLoadDiscoverySource:
    """Tests for load_discovery_source."""

    @staticmethod
    def test_loads_factory() -> None:
        """A factory reference is called to produce the source."""
        source = load_discovery_source(DEMO_REFERENCE)
        assert isinstance(source, InMemoryDiscoverySource)
        assert source.system_provider("mySystemProviderDstu2") is not None

    @staticmethod
    def test_loads_instance() -> None:
        """An instance reference is used as is."""
        source = load_discovery_source(f"{__name__}:MODULE_SOURCE")
        assert source is MODULE_SOURCE

    @staticmethod
    @pytest.mark.parametrize("reference", ["no_colon", ":attr", "module:"])
    def test_malformed_reference(reference: str) -> None:
        """References must look like module:attribute."""
        with pytest.raises(ValueError, match="module:attribute"):
            load_discovery_source(reference)

    @staticmethod
    def test_missing_module() -> None:
        """Unknown modules surface the import failure."""
        with pytest.raises(ImportError):
            load_discovery_source("fhirstarter.no_such_module:factory")

    @staticmethod
    def test_wrong_type() -> None:
        """Attributes that do not yield a discovery source are rejected."""
        with pytest.raises(TypeError, match="did not produce a DiscoverySource"):
            load_discovery_source(f"{__name__}:not_a_source")


MODULE_SOURCE = InMemoryDiscoverySource()


def not_a_source() -> object:
    """Factory returning something that is not a discovery source."""
    return object()
