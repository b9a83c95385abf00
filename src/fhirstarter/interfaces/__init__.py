"""Interfaces (application boundary) for FHIRSTARTER.

Defines framework-free contracts: the provider and interceptor roles the
server is composed from, the discovery source that supplies them, the paging
controller port, ID generators and the small request/response DTOs shared by
the service layer and adapters. Business rules stay out of this package.

Dependency rule: may import `fhirstarter.domain` only. It may be imported by
`fhirstarter.service_layer`, `fhirstarter.adapters`, and
`fhirstarter.bootstrap`.
"""
