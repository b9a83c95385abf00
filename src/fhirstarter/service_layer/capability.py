"""Conformance statement derivation.

The statement is built once at bootstrap from the frozen provider registry,
the system provider and the server metadata. Building is deterministic:
identical inputs give identical statements, the generation timestamp aside.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fhirstarter.domain.errors import CapabilityInconsistency
from fhirstarter.domain.value_objects import (
    EncodingFormat,
    Interaction,
    Operation,
    ProtocolVersion,
    ServerMetadata,
)

if TYPE_CHECKING:
    from fhirstarter.interfaces.providers import SystemProvider

    from .registry import ProviderRegistry

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock for statement timestamps."""
    return datetime.now(UTC)


@dataclass(frozen=True)
class ResourceCapability:
    """Interactions supported on one resource type."""

    type: str
    interactions: tuple[Interaction, ...]


@dataclass(frozen=True)
class CapabilityStatement:
    """What a server instance supports.

    ``date`` is generation metadata and takes no part in equality.
    """

    version: ProtocolVersion
    software_name: str
    software_version: str
    implementation_description: str
    implementation_url: str | None
    publisher: str | None
    formats: tuple[EncodingFormat, ...]
    resources: tuple[ResourceCapability, ...]
    system_interactions: tuple[Interaction, ...]
    date: datetime = field(compare=False)

    @property
    def fhir_version(self) -> str:
        """The advertised ``fhirVersion``."""
        return self.version.fhir_version

    def resource_types(self) -> tuple[str, ...]:
        """Advertised resource types, in registration order."""
        return tuple(resource.type for resource in self.resources)

    def to_dict(self, include_date: bool = True) -> dict[str, Any]:
        """Render the statement as a Conformance resource for this version."""
        key = self.version.interaction_key
        document: dict[str, Any] = {"resourceType": "Conformance", "status": "active"}
        if include_date:
            document["date"] = self.date.isoformat(timespec="seconds")
        if self.publisher:
            document["publisher"] = self.publisher
        document["software"] = {
            "name": self.software_name,
            "version": self.software_version,
        }
        implementation = {"description": self.implementation_description}
        if self.implementation_url:
            implementation["url"] = self.implementation_url
        document["implementation"] = implementation
        document["fhirVersion"] = self.fhir_version
        document["acceptUnknown"] = (
            False if self.version is ProtocolVersion.DSTU1 else "extensions"
        )
        document["format"] = [f.fhir_content_type for f in self.formats]

        rest: dict[str, Any] = {
            "mode": "server",
            "resource": [
                {
                    "type": resource.type,
                    key: [{"code": i.value} for i in resource.interactions],
                }
                for resource in self.resources
            ],
        }
        if self.system_interactions:
            rest[key] = [{"code": i.value} for i in self.system_interactions]
        document["rest"] = [rest]
        return document

    def to_json(self, include_date: bool = True, pretty: bool = False) -> str:
        """Serialize `to_dict()`; key order is stable so output is byte-stable."""
        return json.dumps(
            self.to_dict(include_date=include_date),
            indent=2 if pretty else None,
            ensure_ascii=False,
        )


class CapabilityStatementBuilder:
    """Derive a `CapabilityStatement` from what bootstrap bound.

    Args:
        version: Protocol version the statement is shaped for.
        clock: Source of the generation timestamp (UTC now by default).
    """

    def __init__(self, version: ProtocolVersion, clock: Clock | None = None) -> None:
        self._version = version
        self._clock = clock or utc_now

    def build(
        self,
        registry: ProviderRegistry,
        system_provider: SystemProvider,
        metadata: ServerMetadata,
    ) -> CapabilityStatement:
        """Enumerate the bindings in order and collect their declared operations.

        Raises:
            CapabilityInconsistency: If a provider declares an operation its
                binding cannot back: another resource type, a system
                interaction from a resource provider, a badly scoped
                operation, or a system-provider operation on an unbound type.
        """
        per_type: dict[str, list[Interaction]] = {}
        for binding in registry.all_bindings():
            interactions = per_type.setdefault(binding.resource_type, [])
            provider_name = type(binding.provider).__name__
            for op in binding.provider.supported_operations():
                if op.resource_type != binding.resource_type:
                    raise CapabilityInconsistency(
                        provider_name,
                        op.interaction.value,
                        op.resource_type,
                        f"provider is bound to {binding.resource_type}",
                    )
                _check_scope(provider_name, op)
                _append_once(interactions, op.interaction)

        system_interactions: list[Interaction] = []
        provider_name = type(system_provider).__name__
        for op in system_provider.supported_operations():
            _check_scope(provider_name, op)
            if op.resource_type is None:
                _append_once(system_interactions, op.interaction)
            elif op.resource_type in per_type:
                _append_once(per_type[op.resource_type], op.interaction)
            else:
                raise CapabilityInconsistency(
                    provider_name,
                    op.interaction.value,
                    op.resource_type,
                    "resource type is not bound to any provider",
                )

        statement = CapabilityStatement(
            version=self._version,
            software_name=metadata.software_name,
            software_version=metadata.software_version,
            implementation_description=metadata.implementation_description,
            implementation_url=metadata.base_address,
            publisher=metadata.publisher,
            formats=tuple(EncodingFormat),
            resources=tuple(
                ResourceCapability(resource_type, tuple(interactions))
                for resource_type, interactions in per_type.items()
            ),
            system_interactions=tuple(system_interactions),
            date=self._clock(),
        )
        logger.debug(
            "Built conformance statement: %d resource types, %d system interactions",
            len(statement.resources),
            len(statement.system_interactions),
        )
        return statement


def _check_scope(provider_name: str, op: Operation) -> None:
    if not op.is_well_scoped:
        reason = (
            "system interactions take no resource type"
            if op.is_system_level
            else "interaction needs a resource type"
        )
        raise CapabilityInconsistency(
            provider_name, op.interaction.value, op.resource_type, reason
        )


def _append_once(items: list[Interaction], interaction: Interaction) -> None:
    if interaction not in items:
        items.append(interaction)


def interactions_of(statement: CapabilityStatement) -> Iterable[Operation]:
    """Flatten a statement back into the operations it advertises."""
    for resource in statement.resources:
        for interaction in resource.interactions:
            yield Operation(interaction, resource.type)
    for interaction in statement.system_interactions:
        yield Operation(interaction)
