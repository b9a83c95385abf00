"""Fixtures for paging controller contract tests."""

from collections.abc import Callable, Iterable

import pytest

from fhirstarter.adapters.id_generators import SimpleIdGenerator
from fhirstarter.adapters.paging import FifoMemoryPagingController
from fhirstarter.interfaces.paging import PagingController

PagingFactory = Callable[..., PagingController]


@pytest.fixture(params=["fifo_memory"])
def paging_factory(request: pytest.FixtureRequest) -> Iterable[PagingFactory]:
    """Return a factory building fresh controllers of the requested backend.

    The factory accepts ``capacity``, ``maximum_page_size`` and
    ``default_page_size``. Tokens are sequential so tests can predict them.

    Supported params:
      - `"fifo_memory"` → FifoMemoryPagingController
    """

    match request.param:
        case "fifo_memory":

            def factory(
                capacity: int = 10,
                maximum_page_size: int = 5000,
                default_page_size: int = 10,
            ) -> PagingController:
                return FifoMemoryPagingController(
                    capacity=capacity,
                    maximum_page_size=maximum_page_size,
                    default_page_size=default_page_size,
                    id_generator=SimpleIdGenerator(),
                )

            yield factory
        case _:
            raise ValueError(f"unknown paging controller type: {request.param}")
