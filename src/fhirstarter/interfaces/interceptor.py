"""Server interceptor contract.

Interceptors are invoked around every request. Each hook returns None to let
processing continue, or a `Response` to abort the current phase and answer
with that response instead. Subclasses override only the hooks they need.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .rest import Request, Response

# pylint: disable=unused-argument


class ServerInterceptor:
    """Base class for request/response hooks; every hook is a no-op by default."""

    def incoming_request_pre_handled(self, request: Request) -> Response | None:
        """Called before the request is dispatched to a provider."""
        return None

    def incoming_request_post_handled(
        self, request: Request, response: Response
    ) -> Response | None:
        """Called after a provider produced a response."""
        return None

    def outgoing_response(self, request: Request, response: Response) -> Response | None:
        """Called just before the response is shaped and sent."""
        return None

    def handle_exception(self, request: Request, exc: Exception) -> Response | None:
        """Called when a provider raised; may supply the response to send."""
        return None
