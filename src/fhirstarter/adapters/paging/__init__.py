"""Paging controller adapters."""

from .memory import FifoMemoryPagingController

__all__ = ["FifoMemoryPagingController"]
