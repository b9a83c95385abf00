"""FHIRSTARTER

Composition layer for a FHIR REST server. Fixes the protocol version,
binds the discovered resource and system providers, derives the
conformance statement and assembles the request policy, paging and
interceptor chain into one immutable server.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
