"""Integration tests for the paging token generators."""

import uuid

import pytest

from fhirstarter.adapters.id_generators import (
    SimpleIdGenerator,
    ULIDGenerator,
    UUIDv4Generator,
)


@pytest.mark.parametrize("length", [4, 10, 26])
def test_simple_id_generator_shape(length):
    """SimpleIdGenerator produces zero-padded digits of the requested length."""
    gen = SimpleIdGenerator(length=length)
    new_id = gen.new_id()
    assert len(new_id) == length
    assert new_id.isdigit()
    assert int(new_id) == 1


def test_simple_id_generator_sequential():
    """SimpleIdGenerator counts up from one."""
    gen = SimpleIdGenerator(length=4)
    assert [gen.new_id() for _ in range(3)] == ["0001", "0002", "0003"]


def test_ulid_has_len_26():
    """ULIDs are 26 characters long."""
    required_length = 26
    assert len(ULIDGenerator().new_id()) == required_length


def test_uuid4_version_is_4():
    """UUIDv4Generator produces valid UUIDv4 identifiers."""
    required_version = 4
    assert uuid.UUID(UUIDv4Generator().new_id()).version == required_version
