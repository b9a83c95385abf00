"""Entrypoints (inbound adapters) for FHIRSTARTER.

Expose the server to the outside world: today the ``fhirstarter`` CLI, which
bootstraps a server and reports on it. Parse and validate inputs, call the
bootstrap, and present results.

Dependency rule: may import `fhirstarter.bootstrap` and
`fhirstarter.service_layer`; avoid importing `fhirstarter.adapters` directly.
"""
