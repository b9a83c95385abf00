"""Module including value objects used across the domain layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import assert_never

from fhirstarter import __version__


class ProtocolVersion(Enum):
    """FHIR revisions a server instance can be assembled for.

    The version is fixed once per server; everything version-specific
    (discovery keys, bundle format, conformance document shape) is derived
    from it.
    """

    DSTU1 = "dstu1"
    DSTU2 = "dstu2"

    @property
    def fhir_version(self) -> str:
        """The ``fhirVersion`` string advertised in the conformance statement."""
        return _FHIR_VERSIONS[self]

    @property
    def bundle_format(self) -> str:
        """Bundle representation used by this revision (Atom feed or Bundle resource)."""
        return "atom" if self is ProtocolVersion.DSTU1 else "bundle"

    @property
    def interaction_key(self) -> str:
        """Conformance key under which a resource lists its interactions."""
        return "operation" if self is ProtocolVersion.DSTU1 else "interaction"

    @classmethod
    def parse(cls, text: str) -> ProtocolVersion:
        """Parse a version name case-insensitively (``"DSTU2"``, ``"dstu2"``).

        Raises:
            ValueError: If the text names no known version.
        """
        try:
            return cls(text.strip().lower())
        except ValueError as e:
            choices = ", ".join(v.name for v in cls)
            raise ValueError(
                f"Unknown FHIR version {text!r} (expected one of: {choices})"
            ) from e


_FHIR_VERSIONS = {
    ProtocolVersion.DSTU1: "0.0.82",
    ProtocolVersion.DSTU2: "1.0.2",
}


class EncodingFormat(Enum):
    """Wire encodings a response may be rendered in."""

    JSON = "json"
    XML = "xml"

    @property
    def fhir_content_type(self) -> str:
        """Strict FHIR MIME type for this encoding."""
        return f"application/{self.value}+fhir"

    @property
    def browser_content_type(self) -> str:
        """Plain MIME type that browsers render instead of downloading."""
        return f"application/{self.value}"

    @classmethod
    def from_mime_or_name(cls, text: str | None) -> EncodingFormat | None:
        """Resolve a ``_format`` value or ``Accept`` entry to an encoding.

        Accepts the short names (``json``, ``xml``) and the recognized MIME
        types; MIME parameters such as ``;q=0.9`` are ignored. Returns None
        when nothing matches.
        """
        if not text:
            return None
        return _RECOGNIZED_TYPES.get(text.split(";")[0].strip().lower())

    @classmethod
    def parse(cls, text: str) -> EncodingFormat:
        """Parse a configured encoding name.

        Raises:
            ValueError: If the text is neither ``json`` nor ``xml``.
        """
        if (encoding := cls.from_mime_or_name(text)) is None:
            raise ValueError(f"Unknown encoding {text!r} (expected json or xml)")
        return encoding


_RECOGNIZED_TYPES = {
    alias: encoding
    for encoding in EncodingFormat
    for alias in (
        encoding.value,
        f"application/{encoding.value}",
        f"application/{encoding.value}+fhir",
        f"application/fhir+{encoding.value}",
        f"text/{encoding.value}",
    )
}


class ETagSupport(Enum):
    """Whether version ETags are emitted on responses."""

    ENABLED = "enabled"
    DISABLED = "disabled"


class InteractionScope(Enum):
    """Level of the REST API an interaction applies to."""

    INSTANCE = "instance"
    TYPE = "type"
    SYSTEM = "system"


class Interaction(Enum):
    """REST interaction codes as advertised in a conformance statement."""

    READ = "read"
    VREAD = "vread"
    UPDATE = "update"
    DELETE = "delete"
    HISTORY_INSTANCE = "history-instance"
    VALIDATE = "validate"
    HISTORY_TYPE = "history-type"
    CREATE = "create"
    SEARCH_TYPE = "search-type"
    TRANSACTION = "transaction"
    HISTORY_SYSTEM = "history-system"
    SEARCH_SYSTEM = "search-system"

    @property
    def scope(self) -> InteractionScope:
        """The API level this interaction lives on."""
        return _INTERACTION_SCOPES[self]


_INTERACTION_SCOPES = {
    Interaction.READ: InteractionScope.INSTANCE,
    Interaction.VREAD: InteractionScope.INSTANCE,
    Interaction.UPDATE: InteractionScope.INSTANCE,
    Interaction.DELETE: InteractionScope.INSTANCE,
    Interaction.HISTORY_INSTANCE: InteractionScope.INSTANCE,
    Interaction.VALIDATE: InteractionScope.TYPE,
    Interaction.HISTORY_TYPE: InteractionScope.TYPE,
    Interaction.CREATE: InteractionScope.TYPE,
    Interaction.SEARCH_TYPE: InteractionScope.TYPE,
    Interaction.TRANSACTION: InteractionScope.SYSTEM,
    Interaction.HISTORY_SYSTEM: InteractionScope.SYSTEM,
    Interaction.SEARCH_SYSTEM: InteractionScope.SYSTEM,
}


@dataclass(frozen=True)
class Operation:
    """An interaction a provider declares support for.

    ``resource_type`` is required for instance/type interactions and must be
    None for system interactions.
    """

    interaction: Interaction
    resource_type: str | None = None

    @property
    def is_system_level(self) -> bool:
        """True for whole-system interactions (transaction, global history...)."""
        return self.interaction.scope is InteractionScope.SYSTEM

    @property
    def is_well_scoped(self) -> bool:
        """True when the resource type presence matches the interaction scope."""
        return self.is_system_level == (self.resource_type is None)


@dataclass(frozen=True)
class ServerMetadata:
    """Static description of the server stamped into the conformance statement."""

    implementation_description: str
    base_address: str | None = None
    software_name: str = "FHIRSTARTER"
    software_version: str = __version__
    publisher: str | None = None


@dataclass(frozen=True)
class DiscoveryKeys:
    """Logical names the providers of one version are registered under."""

    resource_providers: str
    system_provider: str


def discovery_keys_for(version: ProtocolVersion) -> DiscoveryKeys:
    """Return the discovery names for ``version``.

    Exhaustive over `ProtocolVersion`; a new member without a case here is a
    type-checking error.
    """
    match version:
        case ProtocolVersion.DSTU1:
            return DiscoveryKeys(
                resource_providers="myResourceProvidersDstu1",
                system_provider="mySystemProviderDstu1",
            )
        case ProtocolVersion.DSTU2:
            return DiscoveryKeys(
                resource_providers="myResourceProvidersDstu2",
                system_provider="mySystemProviderDstu2",
            )
        case _:
            assert_never(version)
