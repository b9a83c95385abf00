"""Bootstrap (composition root) for FHIRSTARTER.

Assembles a server at startup: fixes the FHIR version, resolves resource and
system providers from a discovery source, derives the conformance statement,
applies request policy, builds the paging controller and registers the
interceptor chain, then publishes one immutable `Server`.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain).
- This package may import: `fhirstarter.adapters`, `fhirstarter.service_layer`,
  `fhirstarter.interfaces`, `fhirstarter.domain`, and `fhirstarter.config`.
- Inner layers must not import `fhirstarter.bootstrap`.

Public surface:
- `ServerBootstrap` and the `bootstrap()` convenience; wiring helpers stay in
  `bootstrap.bootstrap`.
- No protocol logic lives here; this is assembly only.
"""

from .bootstrap import ServerBootstrap, bootstrap

__all__ = ["ServerBootstrap", "bootstrap"]
