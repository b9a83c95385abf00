"""FHIRSTARTER Paging Interface Package"""

from .errors import PagingError, PagingTokenNotFound
from .paging import Page, PagingController

__all__ = [
    "Page",
    "PagingController",
    "PagingError",
    "PagingTokenNotFound",
]
