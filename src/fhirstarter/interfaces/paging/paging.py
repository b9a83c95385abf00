"""Interfaces for resuming multi-page search results across requests.

A `PagingController` remembers a bounded number of result sets under opaque
tokens so later requests can fetch further pages without re-running the
search.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Page:
    """One slice of a remembered result set."""

    token: str
    offset: int
    count: int  # page size after clamping
    items: tuple[Mapping[str, Any], ...]
    total: int

    @property
    def next_offset(self) -> int | None:
        """Offset of the following page, or None on the last page."""
        end = self.offset + len(self.items)
        return end if end < self.total else None

    @property
    def previous_offset(self) -> int | None:
        """Offset of the preceding page, or None on the first page."""
        if self.offset <= 0:
            return None
        return max(0, self.offset - self.count)


class PagingController(abc.ABC):
    """Bounded token → result-set registry with a page size ceiling."""

    @property
    @abc.abstractmethod
    def retention_capacity(self) -> int:
        """Maximum number of result sets remembered at once."""

    @property
    @abc.abstractmethod
    def maximum_page_size(self) -> int:
        """Upper bound for the number of items returned by one page."""

    @property
    @abc.abstractmethod
    def default_page_size(self) -> int:
        """Page size used when the client does not ask for one."""

    @abc.abstractmethod
    def create_page(self, results: Sequence[Mapping[str, Any]]) -> str:
        """Remember a result set and return the token that resumes it.

        If remembering it exceeds `retention_capacity`, the oldest result set
        is forgotten.
        """

    @abc.abstractmethod
    def fetch_page(self, token: str, start: int, count: int | None = None) -> Page:
        """Return the page of a remembered result set starting at ``start``.

        Args:
            token: Token returned by `create_page`.
            start: Zero-based offset of the first item.
            count: Requested page size; clamped with `clamp_count`.

        Raises:
            PagingTokenNotFound: If the token is unknown or was evicted.
            ValueError: If ``start`` is negative.
        """

    def clamp_count(self, count: int | None) -> int:
        """Clamp a requested page size to ``[1, maximum_page_size]``.

        Missing or non-positive requests get the default page size.
        """
        if count is None or count <= 0:
            return self.default_page_size
        return min(count, self.maximum_page_size)
