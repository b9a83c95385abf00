"""Configuration utilities for FHIRSTARTER.

Reads the server settings from ``FHIRSTARTER_*`` environment variables. The
defaults reproduce the classic example server: FHIR DSTU2, JSON, pretty
printing, browser-friendly content types, 100 remembered searches and a
maximum page size of 5000.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TypeVar

from fhirstarter.domain.value_objects import (
    EncodingFormat,
    ETagSupport,
    ProtocolVersion,
    ServerMetadata,
)

ENV_PREFIX = "FHIRSTARTER_"  # pragma: no mutate

DEFAULT_DISCOVERY = "fhirstarter.adapters.discovery.demo:build_demo_discovery"
DEFAULT_IMPLEMENTATION_DESCRIPTION = "Example Server"

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}
PAGING_TOKEN_FORMATS = ("ulid", "uuid4")

T = TypeVar("T")


class InvalidSettingError(ValueError):
    """Raised when a ``FHIRSTARTER_*`` variable holds an unusable value."""

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(f"{name}={value!r} is invalid: {reason}")
        self.name = name
        self.value = value
        self.reason = reason


@dataclass(frozen=True)
class PagingSettings:
    """Bounds of the in-memory paging controller."""

    capacity: int = 100
    maximum_page_size: int = 5000
    default_page_size: int = 10
    tokens: str = "ulid"


@dataclass(frozen=True)
class ServerSettings:  # pylint: disable=too-many-instance-attributes
    """Everything the environment decides about a server instance."""

    fhir_version: ProtocolVersion = ProtocolVersion.DSTU2
    implementation_description: str = DEFAULT_IMPLEMENTATION_DESCRIPTION
    base_address: str | None = None
    publisher: str | None = None
    default_encoding: EncodingFormat = EncodingFormat.JSON
    pretty_print: bool = True
    browser_friendly: bool = True
    etag_support: ETagSupport = ETagSupport.ENABLED
    paging: PagingSettings = field(default_factory=PagingSettings)
    discovery: str = DEFAULT_DISCOVERY

    @property
    def metadata(self) -> ServerMetadata:
        """Static server description for the conformance statement."""
        return ServerMetadata(
            implementation_description=self.implementation_description,
            base_address=self.base_address,
            publisher=self.publisher,
        )


def get_server_settings(environ: Mapping[str, str] | None = None) -> ServerSettings:
    """Build `ServerSettings` from the environment.

    Args:
        environ: Mapping to read from; defaults to `os.environ`.

    Returns:
        The settings, with defaults for every unset variable.

    Raises:
        InvalidSettingError: If a variable is set to an unusable value.
    """
    env = os.environ if environ is None else environ
    defaults = ServerSettings()
    return ServerSettings(
        fhir_version=_env_parsed(
            env, "FHIR_VERSION", ProtocolVersion.parse, defaults.fhir_version
        ),
        implementation_description=_env_str(env, "IMPLEMENTATION_DESCRIPTION")
        or defaults.implementation_description,
        base_address=_env_str(env, "BASE_ADDRESS"),
        publisher=_env_str(env, "PUBLISHER"),
        default_encoding=_env_parsed(
            env, "DEFAULT_ENCODING", EncodingFormat.parse, defaults.default_encoding
        ),
        pretty_print=_env_bool(env, "PRETTY_PRINT", defaults.pretty_print),
        browser_friendly=_env_bool(env, "BROWSER_FRIENDLY", defaults.browser_friendly),
        etag_support=_env_parsed(
            env,
            "ETAG_SUPPORT",
            lambda raw: ETagSupport(raw.strip().lower()),
            defaults.etag_support,
        ),
        paging=PagingSettings(
            capacity=_env_int(env, "PAGING_CAPACITY", defaults.paging.capacity),
            maximum_page_size=_env_int(
                env, "MAX_PAGE_SIZE", defaults.paging.maximum_page_size
            ),
            default_page_size=_env_int(
                env, "DEFAULT_PAGE_SIZE", defaults.paging.default_page_size
            ),
            tokens=_env_parsed(
                env, "PAGING_TOKENS", _parse_token_format, defaults.paging.tokens
            ),
        ),
        discovery=_env_str(env, "DISCOVERY") or defaults.discovery,
    )


def _env_str(env: Mapping[str, str], name: str) -> str | None:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    if (raw := _env_str(env, name)) is None:
        return default
    if raw.lower() in _TRUE:
        return True
    if raw.lower() in _FALSE:
        return False
    raise InvalidSettingError(ENV_PREFIX + name, raw, "expected a boolean")


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    if (raw := _env_str(env, name)) is None:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise InvalidSettingError(ENV_PREFIX + name, raw, "expected an integer") from e
    if value < 1:
        raise InvalidSettingError(ENV_PREFIX + name, raw, "must be positive")
    return value


def _env_parsed(
    env: Mapping[str, str], name: str, parse: Callable[[str], T], default: T
) -> T:
    if (raw := _env_str(env, name)) is None:
        return default
    try:
        return parse(raw)
    except ValueError as e:
        raise InvalidSettingError(ENV_PREFIX + name, raw, str(e)) from e


def _parse_token_format(raw: str) -> str:
    if (token_format := raw.strip().lower()) not in PAGING_TOKEN_FORMATS:
        raise ValueError(f"expected one of: {', '.join(PAGING_TOKEN_FORMATS)}")
    return token_format
