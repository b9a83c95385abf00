"""Contract tests for PagingController implementations."""

from __future__ import annotations

import pytest

from fhirstarter.interfaces.paging import PagingError, PagingTokenNotFound

# pylint: disable=magic-value-comparison


def _results(n: int, prefix: str = "r") -> list[dict]:
    return [{"resourceType": "Patient", "id": f"{prefix}{i}"} for i in range(n)]


def test_create_then_fetch(paging_factory) -> None:
    """A fresh token resumes the result set it was created for."""
    controller = paging_factory()
    results = _results(25)
    token = controller.create_page(results)
    page = controller.fetch_page(token, 10, 10)
    assert page.token == token
    assert page.total == 25
    assert [r["id"] for r in page.items] == [f"r{i}" for i in range(10, 20)]


def test_tokens_are_distinct(paging_factory) -> None:
    """Every result set gets its own token."""
    controller = paging_factory()
    tokens = {controller.create_page(_results(1)) for _ in range(5)}
    assert len(tokens) == 5


def test_fifo_eviction(paging_factory) -> None:
    """Capacity two: creating P3 forgets P1 but keeps P2 and P3."""
    controller = paging_factory(capacity=2)
    p1 = controller.create_page(_results(3, "a"))
    p2 = controller.create_page(_results(3, "b"))
    p3 = controller.create_page(_results(3, "c"))

    with pytest.raises(PagingTokenNotFound) as excinfo:
        controller.fetch_page(p1, 0)
    assert excinfo.value.token == p1
    assert controller.fetch_page(p2, 0).items[0]["id"] == "b0"
    assert controller.fetch_page(p3, 0).items[0]["id"] == "c0"


def test_fetching_does_not_refresh_age(paging_factory) -> None:
    """Eviction is by creation order; reads do not keep a result set alive."""
    controller = paging_factory(capacity=2)
    p1 = controller.create_page(_results(1))
    controller.create_page(_results(1))
    controller.fetch_page(p1, 0)
    controller.create_page(_results(1))
    with pytest.raises(PagingTokenNotFound):
        controller.fetch_page(p1, 0)


def test_unknown_token(paging_factory) -> None:
    """Invented tokens are reported as not found."""
    controller = paging_factory()
    with pytest.raises(PagingTokenNotFound) as excinfo:
        controller.fetch_page("does-not-exist", 0)
    assert isinstance(excinfo.value, PagingError)
    assert isinstance(excinfo.value, LookupError)
    assert "does-not-exist" in str(excinfo.value)


def test_count_clamped_to_maximum(paging_factory) -> None:
    """Pages never exceed the maximum page size."""
    controller = paging_factory(maximum_page_size=5, default_page_size=2)
    token = controller.create_page(_results(20))
    page = controller.fetch_page(token, 0, 100)
    assert page.count == 5
    assert len(page.items) == 5


def test_default_page_size(paging_factory) -> None:
    """No requested count gives the default page size."""
    controller = paging_factory(maximum_page_size=5, default_page_size=2)
    token = controller.create_page(_results(20))
    assert len(controller.fetch_page(token, 0).items) == 2


def test_start_past_end_is_empty(paging_factory) -> None:
    """Offsets beyond the result set give an empty last page."""
    controller = paging_factory()
    token = controller.create_page(_results(3))
    page = controller.fetch_page(token, 10)
    assert page.items == ()
    assert page.next_offset is None


def test_negative_start_rejected(paging_factory) -> None:
    """Negative offsets are programming errors."""
    controller = paging_factory()
    token = controller.create_page(_results(3))
    with pytest.raises(ValueError):
        controller.fetch_page(token, -1)


def test_result_set_is_snapshotted(paging_factory) -> None:
    """Mutating the caller's list after creation does not change the pages."""
    controller = paging_factory()
    results = _results(3)
    token = controller.create_page(results)
    results.clear()
    assert controller.fetch_page(token, 0).total == 3


def test_limits_exposed(paging_factory) -> None:
    """Configured bounds are readable."""
    controller = paging_factory(capacity=7, maximum_page_size=40, default_page_size=4)
    assert controller.retention_capacity == 7
    assert controller.maximum_page_size == 40
    assert controller.default_page_size == 4


@pytest.mark.parametrize(
    "kwargs",
    [
        {"capacity": 0},
        {"capacity": -1},
        {"maximum_page_size": 0},
        {"default_page_size": 0},
        {"maximum_page_size": 5, "default_page_size": 10},
    ],
)
def test_invalid_bounds_rejected(paging_factory, kwargs) -> None:
    """Non-positive sizes and a default above the maximum are rejected."""
    with pytest.raises(ValueError):
        paging_factory(**kwargs)
