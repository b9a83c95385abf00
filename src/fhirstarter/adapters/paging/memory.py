"""In-memory FIFO paging controller."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from fhirstarter.adapters.id_generators import ULIDGenerator
from fhirstarter.interfaces.id_generator import IdGenerator
from fhirstarter.interfaces.paging import Page, PagingController, PagingTokenNotFound

logger = logging.getLogger(__name__)

DEFAULT_MAXIMUM_PAGE_SIZE = 5000
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True, slots=True)
class PagingContext:
    """A remembered result set."""

    token: str
    results: tuple[Mapping[str, Any], ...]

    @property
    def total(self) -> int:
        """Number of items in the result set."""
        return len(self.results)


class FifoMemoryPagingController(PagingController):
    """Keeps the last ``capacity`` result sets in memory, evicting oldest first.

    Creation and eviction happen in one critical section, so a concurrent
    reader sees either the state before a `create_page` call or the state
    after it. Stored result sets are immutable tuples; slicing a page happens
    outside the lock.

    Args:
        capacity: Number of result sets remembered concurrently.
        maximum_page_size: Ceiling for the page size a client may request.
        default_page_size: Page size when the client does not ask for one.
        id_generator: Source of opaque tokens (ULIDs by default).

    Raises:
        ValueError: If any size is not a positive integer, or the default page
            size exceeds the maximum.
    """

    def __init__(
        self,
        capacity: int,
        maximum_page_size: int = DEFAULT_MAXIMUM_PAGE_SIZE,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        id_generator: IdGenerator | None = None,
    ) -> None:
        for name, value in (
            ("capacity", capacity),
            ("maximum_page_size", maximum_page_size),
            ("default_page_size", default_page_size),
        ):
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if default_page_size > maximum_page_size:
            raise ValueError(
                f"default_page_size ({default_page_size}) exceeds "
                f"maximum_page_size ({maximum_page_size})"
            )
        self._capacity = capacity
        self._maximum_page_size = maximum_page_size
        self._default_page_size = default_page_size
        self._id_generator = id_generator or ULIDGenerator()
        self._contexts: OrderedDict[str, PagingContext] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def retention_capacity(self) -> int:
        return self._capacity

    @property
    def maximum_page_size(self) -> int:
        return self._maximum_page_size

    @property
    def default_page_size(self) -> int:
        return self._default_page_size

    def __len__(self) -> int:
        with self._lock:
            return len(self._contexts)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._contexts

    def create_page(self, results: Sequence[Mapping[str, Any]]) -> str:
        context = PagingContext(token=self._id_generator.new_id(), results=tuple(results))
        with self._lock:
            self._contexts[context.token] = context
            while len(self._contexts) > self._capacity:
                evicted, _ = self._contexts.popitem(last=False)
                logger.debug("Evicted paging context %s", evicted)
        logger.debug(
            "Stored paging context %s (%d results)", context.token, context.total
        )
        return context.token

    def fetch_page(self, token: str, start: int, count: int | None = None) -> Page:
        if start < 0:
            raise ValueError(f"start must not be negative, got {start}")
        with self._lock:
            context = self._contexts.get(token)
        if context is None:
            logger.debug("Paging context %s not found", token)
            raise PagingTokenNotFound(token)

        size = self.clamp_count(count)
        return Page(
            token=token,
            offset=start,
            count=size,
            items=context.results[start : start + size],
            total=context.total,
        )
