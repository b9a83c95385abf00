"""Adapters (infrastructure) for FHIRSTARTER.

Provide concrete implementations of the interfaces: discovery sources that
supply providers and interceptors, the in-memory paging controller, paging
token generators, and demo providers.

Dependency rule: may import `fhirstarter.domain` and `fhirstarter.interfaces`;
neither may import this package.
"""
