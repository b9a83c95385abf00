"""Errors raised by PagingController implementations."""


class PagingError(Exception):
    """Base class for paging errors."""


class PagingTokenNotFound(PagingError, LookupError):
    """Raised when a paging token is unknown (evicted or never issued).

    This is a request-time condition: the dispatcher reports it to the client
    as an expired result set and carries on serving other requests.

    Attributes:
        token (str): The token that could not be resolved.
    """

    def __init__(self, token: str):
        super().__init__(
            f"Search result set '{token}' does not exist and may have expired."
        )
        self.token = token
