"""Domain-layer error definitions."""

# ============================================================================
#                           Bootstrap errors
# ============================================================================


class BootstrapError(Exception):
    """Base class for errors raised while assembling a server.

    Every subclass is fatal: a server whose capability composition failed is
    never published.
    """


class MissingProviderSet(BootstrapError):
    """Raised when the discovery source has no resource providers for a version."""

    def __init__(self, version: str, name: str) -> None:
        super().__init__(
            f"No resource provider set named '{name}' found for FHIR {version}."
        )
        self.version = version
        self.name = name


class MissingSystemProvider(BootstrapError):
    """Raised when the discovery source has no system provider for a version."""

    def __init__(self, version: str, name: str) -> None:
        super().__init__(f"No system provider named '{name}' found for FHIR {version}.")
        self.version = version
        self.name = name


class DuplicateBinding(BootstrapError):
    """Raised when a second provider is registered for a bound resource type."""

    def __init__(self, resource_type: str) -> None:
        super().__init__(
            f"Resource type '{resource_type}' is already bound to a provider."
        )
        self.resource_type = resource_type


class RegistryFrozen(BootstrapError):
    """Raised when a frozen registry or chain is modified after bootstrap."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"The {kind} is frozen and can no longer be modified.")
        self.kind = kind


class CapabilityInconsistency(BootstrapError):
    """Raised when a provider declares an operation the bindings cannot back.

    Attributes:
        provider (str): Name of the declaring provider.
        operation (str): The offending interaction code.
        resource_type (str | None): The resource type the operation targets.
        reason (str): Why the declaration is inconsistent.
    """

    def __init__(
        self, provider: str, operation: str, resource_type: str | None, reason: str
    ) -> None:
        target = resource_type if resource_type is not None else "<system>"
        super().__init__(
            f"Provider {provider} declares '{operation}' on {target}: {reason}."
        )
        self.provider = provider
        self.operation = operation
        self.resource_type = resource_type
        self.reason = reason


class DependencyFailure(BootstrapError):
    """Raised when a collaborator fails during a bootstrap step.

    The original exception is kept as ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, step: str, cause: BaseException) -> None:
        super().__init__(
            f"Bootstrap step '{step}' failed: {type(cause).__name__}: {cause}"
        )
        self.step = step
        self.cause = cause
