"""The assembled server and its request-handling surface."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from fhirstarter.domain.value_objects import ETagSupport, ProtocolVersion, ServerMetadata
from fhirstarter.interfaces.paging import PagingController, PagingTokenNotFound
from fhirstarter.interfaces.rest import Request, Response, ResultList, operation_outcome

if TYPE_CHECKING:
    from fhirstarter.interfaces.providers import SystemProvider

    from .capability import CapabilityStatement
    from .interceptors import InterceptorChain
    from .policy import RequestPolicyConfig
    from .registry import ProviderRegistry

logger = logging.getLogger(__name__)

METADATA_PATH = "metadata"
GETPAGES_PARAM = "_getpages"
GETPAGES_OFFSET_PARAM = "_getpagesoffset"
COUNT_PARAM = "_count"


class InvalidRequestParameter(ValueError):
    """Raised when a paging parameter is not a valid integer."""

    def __init__(self, name: str, value: str) -> None:
        super().__init__(f"Invalid value for parameter '{name}': {value!r}")
        self.name = name
        self.value = value


@dataclass(frozen=True)
class Server:
    """A fully assembled, read-only server.

    Only `ServerBootstrap` builds servers. Every component except the paging
    controller is frozen, so one instance can serve concurrent requests.

    Request flow: pre-handle hooks, dispatch (conformance statement, paging,
    resource provider or system provider), post-handle hooks, pre-response
    hooks, then policy shaping. A pre-handle abort skips dispatch and the
    post-handle hooks. A hook that raises is treated like a failing provider:
    the exception hooks see it and the client gets an OperationOutcome.
    """

    version: ProtocolVersion
    metadata: ServerMetadata
    registry: ProviderRegistry
    system_provider: SystemProvider
    capability_statement: CapabilityStatement
    policy: RequestPolicyConfig
    paging: PagingController
    interceptors: InterceptorChain

    def handle(self, request: Request) -> Response:
        """Serve one request and return the shaped response."""
        logger.debug("Handling %s /%s", request.method, request.path)
        try:
            if (response := self.interceptors.invoke_pre(request)) is None:
                response = self._dispatch(request)
                response = self.interceptors.invoke_post(request, response) or response
        except PagingTokenNotFound as e:
            logger.info("%s", e)
            response = operation_outcome(410, "error", "not-found", str(e))
        except InvalidRequestParameter as e:
            response = operation_outcome(400, "error", "invalid", str(e))
        except Exception as e:  # pylint: disable=broad-except
            response = self._fail(request, e)

        try:
            response = self.interceptors.invoke_pre_response(request, response) or response
        except Exception as e:  # pylint: disable=broad-except
            response = self._fail(request, e)
        return self._shape(request, response)

    def _fail(self, request: Request, exc: Exception) -> Response:
        """Answer an unexpected failure, letting exception hooks replace the 500."""
        logger.exception("Exception handling %s /%s", request.method, request.path)
        try:
            response = self.interceptors.invoke_exception(request, exc)
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "Exception hook failed for %s /%s", request.method, request.path
            )
            response = None
        return response or operation_outcome(500, "fatal", "exception", str(exc))

    # --- dispatch ---

    def _dispatch(self, request: Request) -> Response:
        if request.method == "GET" and request.segments == (METADATA_PATH,):
            return Response(body=self.capability_statement.to_dict())

        if request.resource_type is None and GETPAGES_PARAM in request.params:
            return self._continue_paging(request)

        if (resource_type := request.resource_type) is not None:
            provider = self.registry.lookup(resource_type)
            if provider is None:
                known = ", ".join(self.registry.resource_types())
                return operation_outcome(
                    404,
                    "error",
                    "not-supported",
                    f"Unknown resource type '{resource_type}' - "
                    f"Server knows how to handle: [{known}]",
                )
            result = provider.handle(request)
        else:
            result = self.system_provider.handle(request)

        if isinstance(result, ResultList):
            return self._first_page(request, result)
        return result

    def _first_page(self, request: Request, results: ResultList) -> Response:
        count = self.paging.clamp_count(_int_param(request.params, COUNT_PARAM))
        total = len(results)
        links = {"self": self._self_link(request)}
        if total > count:
            token = self.paging.create_page(results.resources)
            links["next"] = self._paging_link(request, token, count, count)
        return Response(
            body=self._bundle(request, results.resources[:count], total, links)
        )

    def _continue_paging(self, request: Request) -> Response:
        token = request.params[GETPAGES_PARAM]
        offset = _int_param(request.params, GETPAGES_OFFSET_PARAM) or 0
        if offset < 0:
            raise InvalidRequestParameter(GETPAGES_OFFSET_PARAM, str(offset))
        page = self.paging.fetch_page(
            token, offset, _int_param(request.params, COUNT_PARAM)
        )
        links = {"self": self._paging_link(request, token, offset, page.count)}
        if page.next_offset is not None:
            links["next"] = self._paging_link(request, token, page.next_offset, page.count)
        if page.previous_offset is not None:
            links["previous"] = self._paging_link(
                request, token, page.previous_offset, page.count
            )
        return Response(body=self._bundle(request, page.items, page.total, links))

    # --- rendering ---

    def _self_link(self, request: Request) -> str:
        url = self.policy.absolute_url(request, request.path)
        return f"{url}?{urlencode(dict(request.params))}" if request.params else url

    def _paging_link(self, request: Request, token: str, offset: int, count: int) -> str:
        query = urlencode(
            {GETPAGES_PARAM: token, GETPAGES_OFFSET_PARAM: offset, COUNT_PARAM: count}
        )
        return f"{self.policy.base_address(request)}?{query}"

    def _bundle(
        self,
        request: Request,
        resources: Sequence[Mapping[str, Any]],
        total: int,
        links: Mapping[str, str],
    ) -> dict[str, Any]:
        def full_url(resource: Mapping[str, Any]) -> str:
            return self.policy.absolute_url(
                request, str(resource.get("resourceType", "")), str(resource.get("id", ""))
            )

        if self.version.bundle_format == "atom":
            return {
                "resourceType": "Bundle",
                "title": "Search results",
                "totalResults": total,
                "link": [{"rel": rel, "href": url} for rel, url in links.items()],
                "entry": [{"id": full_url(r), "content": dict(r)} for r in resources],
            }
        return {
            "resourceType": "Bundle",
            "type": "searchset",
            "total": total,
            "link": [{"relation": rel, "url": url} for rel, url in links.items()],
            "entry": [{"fullUrl": full_url(r), "resource": dict(r)} for r in resources],
        }

    def _shape(self, request: Request, response: Response) -> Response:
        negotiation = self.policy.negotiate(request)
        shaped = replace(
            response,
            encoding=negotiation.encoding.value,
            content_type=response.content_type or negotiation.content_type,
            pretty=negotiation.pretty if response.pretty is None else response.pretty,
        )
        if self.policy.etag_support is ETagSupport.DISABLED:
            shaped = shaped.without_header("ETag")
        return shaped


def _int_param(params: Mapping[str, str], name: str) -> int | None:
    if (raw := params.get(name)) is None:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidRequestParameter(name, raw) from e
