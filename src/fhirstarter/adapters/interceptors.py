"""Ready-made server interceptors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fhirstarter.interfaces.interceptor import ServerInterceptor

if TYPE_CHECKING:
    from fhirstarter.interfaces.rest import Request, Response

ACCESS_LOGGER = "fhirstarter.access"


class LoggingInterceptor(ServerInterceptor):
    """Write one access line per response to a dedicated logger.

    Args:
        logger_name: Logger to write to (``fhirstarter.access`` by default).
        level: Level of the access lines.
    """

    def __init__(self, logger_name: str = ACCESS_LOGGER, level: int = logging.INFO):
        self._logger = logging.getLogger(logger_name)
        self._level = level

    def outgoing_response(self, request: Request, response: Response) -> None:
        self._logger.log(
            self._level,
            "%s /%s -> %d",
            request.method,
            request.path,
            response.status,
        )

    def handle_exception(self, request: Request, exc: Exception) -> None:
        self._logger.warning(
            "%s /%s raised %s: %s", request.method, request.path, type(exc).__name__, exc
        )
