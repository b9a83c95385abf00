"""Request/response DTOs exchanged between the dispatcher, providers and hooks.

These are deliberately thin: the HTTP container owns parsing and the wire
codecs own (de)serialization. Bodies are plain Python structures.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class Request:
    """An inbound REST request, relative to the server base.

    Attributes:
        method: HTTP method in upper case (``GET``, ``POST``...).
        path: Path below the server base, e.g. ``"Patient/123/_history"``.
        params: Query parameters (single-valued).
        headers: Request headers; lookups through `header()` are case-insensitive.
        body: Parsed request body, if any.
        server_base: Base URL the request physically arrived on, e.g.
            ``"http://localhost:8080/fhir"``.
    """

    method: str = "GET"
    path: str = ""
    params: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    server_base: str = ""

    @property
    def segments(self) -> tuple[str, ...]:
        """Non-empty path segments."""
        return tuple(part for part in self.path.split("/") if part)

    @property
    def resource_type(self) -> str | None:
        """Resource type addressed by the path, or None for system-level paths.

        Resource type names start with an upper-case letter; ``metadata``,
        ``_history`` and the empty path are system level.
        """
        if self.segments and self.segments[0][:1].isupper():
            return self.segments[0]
        return None

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return a header value, matching the name case-insensitively."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default


@dataclass(frozen=True)
class Response:
    """An outbound response before wire encoding.

    ``encoding`` and ``pretty`` are left as None by providers and filled in by
    the request policy.
    """

    status: int = 200
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    content_type: str | None = None
    encoding: str | None = None
    pretty: bool | None = None

    def with_header(self, name: str, value: str) -> Response:
        """Return a copy with one header added or replaced."""
        return replace(self, headers={**self.headers, name: value})

    def without_header(self, name: str) -> Response:
        """Return a copy with a header removed (case-insensitive)."""
        wanted = name.lower()
        return replace(
            self, headers={k: v for k, v in self.headers.items() if k.lower() != wanted}
        )


@dataclass(frozen=True)
class ResultList:
    """A search result set a provider hands back for the server to page.

    Each resource is a mapping with at least ``resourceType`` and ``id``.
    """

    resources: tuple[Mapping[str, Any], ...] = ()

    def __len__(self) -> int:
        return len(self.resources)


def operation_outcome(status: int, severity: str, code: str, message: str) -> Response:
    """Build a response carrying a single-issue OperationOutcome body."""
    return Response(
        status=status,
        body={
            "resourceType": "OperationOutcome",
            "issue": [{"severity": severity, "code": code, "diagnostics": message}],
        },
    )
