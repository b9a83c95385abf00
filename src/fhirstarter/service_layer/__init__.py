"""Service layer for FHIRSTARTER.

Implements what a server is made of once assembled: the provider registry,
the conformance statement builder, request policy, the interceptor chain and
the server's request-handling surface.

Dependency rule: may import `fhirstarter.domain` and `fhirstarter.interfaces`,
but not `fhirstarter.adapters` or `fhirstarter.entrypoints`.
"""
