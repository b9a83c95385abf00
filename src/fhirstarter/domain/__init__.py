"""Domain layer for FHIRSTARTER.

Contains the value objects the server is assembled from (protocol versions,
encodings, interactions) and the bootstrap error taxonomy. This package is
deliberately technology-agnostic.

Dependency rule: do not import from `fhirstarter.adapters` or
`fhirstarter.entrypoints`.
"""
