"""Ordered chain of server interceptors."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from fhirstarter.domain.errors import RegistryFrozen

if TYPE_CHECKING:
    from fhirstarter.interfaces.interceptor import ServerInterceptor
    from fhirstarter.interfaces.rest import Request, Response

logger = logging.getLogger(__name__)


class InterceptorChain:
    """Interceptors invoked in registration order.

    Registering the same instance twice invokes it twice. In every phase a
    hook that returns a `Response` aborts the phase: later hooks are skipped
    and that response is returned to the caller.
    """

    KIND = "interceptor chain"

    def __init__(self) -> None:
        self._interceptors: list[ServerInterceptor] = []
        self._frozen = False

    def register(self, interceptor: ServerInterceptor) -> None:
        """Append ``interceptor`` to the chain.

        Raises:
            RegistryFrozen: If the chain has been frozen.
        """
        if self._frozen:
            raise RegistryFrozen(self.KIND)
        self._interceptors.append(interceptor)
        logger.debug("Registered interceptor %s", type(interceptor).__name__)

    def freeze(self) -> None:
        """Reject further registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        """Whether the chain rejects further registrations."""
        return self._frozen

    def __iter__(self) -> Iterator[ServerInterceptor]:
        return iter(tuple(self._interceptors))

    def __len__(self) -> int:
        return len(self._interceptors)

    # --- phases ---

    def invoke_pre(self, request: Request) -> Response | None:
        """Run the pre-handle hooks; return the aborting response, if any."""
        return self._run(
            "incoming_request_pre_handled",
            lambda hook: hook.incoming_request_pre_handled(request),
        )

    def invoke_post(self, request: Request, response: Response) -> Response | None:
        """Run the post-handle hooks; return the aborting response, if any."""
        return self._run(
            "incoming_request_post_handled",
            lambda hook: hook.incoming_request_post_handled(request, response),
        )

    def invoke_pre_response(
        self, request: Request, response: Response
    ) -> Response | None:
        """Run the pre-response hooks; return the aborting response, if any."""
        return self._run(
            "outgoing_response",
            lambda hook: hook.outgoing_response(request, response),
        )

    def invoke_exception(self, request: Request, exc: Exception) -> Response | None:
        """Offer a provider failure to the hooks; return the first response supplied."""
        return self._run(
            "handle_exception",
            lambda hook: hook.handle_exception(request, exc),
        )

    def _run(
        self, phase: str, call: Callable[[ServerInterceptor], Response | None]
    ) -> Response | None:
        for interceptor in self._interceptors:
            if (response := call(interceptor)) is not None:
                logger.debug(
                    "Interceptor %s aborted %s with status %s",
                    type(interceptor).__name__,
                    phase,
                    response.status,
                )
                return response
        return None
