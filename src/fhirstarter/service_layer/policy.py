"""Request/response policy shared by every request.

`RequestPolicyConfig` holds the global switches fixed at bootstrap: content
negotiation mode, default encoding and pretty printing, the canonical base
address and ETag support. The dispatcher consults it per request through
`negotiate()` and `absolute_url()`.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass

from fhirstarter.domain.value_objects import EncodingFormat, ETagSupport
from fhirstarter.interfaces.rest import Request

# pylint: disable=too-few-public-methods

BROWSER_ACCEPT_MARKER = "text/html"


class AddressStrategy(abc.ABC):
    """Decides the base URL every generated link is prefixed with."""

    @abc.abstractmethod
    def determine_base(self, request: Request) -> str:
        """Return the server base URL (no trailing slash) for ``request``."""


class HardcodedAddressStrategy(AddressStrategy):
    """Always use a fixed base URL, whatever host/port the request came in on."""

    def __init__(self, base: str) -> None:
        if not base:
            raise ValueError("A hardcoded server base address must not be empty")
        self.base = base.rstrip("/")

    def determine_base(self, request: Request) -> str:
        return self.base

    def __repr__(self) -> str:
        return f"HardcodedAddressStrategy({self.base!r})"


class IncomingRequestAddressStrategy(AddressStrategy):
    """Use the base URL the request physically arrived on."""

    def determine_base(self, request: Request) -> str:
        return request.server_base.rstrip("/")

    def __repr__(self) -> str:
        return "IncomingRequestAddressStrategy()"


@dataclass(frozen=True)
class Negotiation:
    """Outcome of content negotiation for one request."""

    encoding: EncodingFormat
    content_type: str
    pretty: bool


@dataclass(frozen=True)
class RequestPolicyConfig:
    """Global serving policy, immutable once the server is built.

    Attributes:
        browser_friendly_content_types: Serve plain ``application/json`` or
            ``application/xml`` to browsers so they display the payload
            instead of downloading it. This deviates from strict FHIR content
            types for browser requests only.
        default_pretty_print: Pretty print unless the request says otherwise.
        default_response_encoding: Encoding used when the request expresses
            no preference.
        canonical_base_address: Base URL for all generated links. None means
            links use the base the request arrived on.
        etag_support: Whether ``ETag`` headers are passed through.
    """

    browser_friendly_content_types: bool = False
    default_pretty_print: bool = False
    default_response_encoding: EncodingFormat = EncodingFormat.JSON
    canonical_base_address: str | None = None
    etag_support: ETagSupport = ETagSupport.ENABLED

    @property
    def address_strategy(self) -> AddressStrategy:
        """Strategy derived from `canonical_base_address`."""
        if self.canonical_base_address:
            return HardcodedAddressStrategy(self.canonical_base_address)
        return IncomingRequestAddressStrategy()

    def base_address(self, request: Request) -> str:
        """Base URL links for ``request`` are rendered against."""
        return self.address_strategy.determine_base(request)

    def absolute_url(self, request: Request, *parts: str) -> str:
        """Join ``parts`` onto the base address."""
        tail = "/".join(part.strip("/") for part in parts if part)
        base = self.base_address(request)
        return f"{base}/{tail}" if tail else base

    def negotiate(self, request: Request) -> Negotiation:
        """Choose encoding, content type and pretty printing for ``request``.

        Precedence for the encoding: ``_format`` parameter, then the first
        recognized ``Accept`` entry, then the default. ``_pretty`` overrides
        the pretty-print default; browser requests are pretty printed unless
        they ask otherwise. A ``_format`` holding a full MIME type turns off
        browser treatment, so the strict content type is served as asked.
        """
        accept = request.header("Accept") or ""
        requested_format = request.params.get("_format") or ""
        # an explicit MIME type in _format is honored verbatim, even from a browser
        is_browser = (
            BROWSER_ACCEPT_MARKER in accept.lower() and "/" not in requested_format
        )

        encoding = EncodingFormat.from_mime_or_name(requested_format)
        if encoding is None:
            encoding = next(
                (
                    found
                    for entry in accept.split(",")
                    if (found := EncodingFormat.from_mime_or_name(entry)) is not None
                ),
                self.default_response_encoding,
            )

        if self.browser_friendly_content_types and is_browser:
            content_type = encoding.browser_content_type
        else:
            content_type = encoding.fhir_content_type

        match (request.params.get("_pretty") or "").strip().lower():
            case "true":
                pretty = True
            case "false":
                pretty = False
            case _:
                pretty = self.default_pretty_print or is_browser

        return Negotiation(encoding=encoding, content_type=content_type, pretty=pretty)
