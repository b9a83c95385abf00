"""Paging token generators for FHIRSTARTER."""

import itertools
import threading
import uuid

from ulid import monotonic

from fhirstarter.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods


class ULIDGenerator(IdGenerator):
    """Thread-safe monotonic ULID generator.

    ULID tokens sort by creation time, which keeps paging tokens readable in
    logs. This generator uses the `ulid-py` library.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Generate a new ULID (serialized across threads)."""
        with self._lock:
            return str(monotonic.new())


class UUIDv4Generator(IdGenerator):
    """Random UUIDv4 tokens, the format classic FHIR servers hand out."""

    def new_id(self) -> str:
        """Generate a new UUID."""
        return str(uuid.uuid4())


class SimpleIdGenerator(IdGenerator):
    """Sequential, zero-padded tokens.

    Note:
        Predictable; only suitable for tests and demos.
    """

    def __init__(self, length: int = 26) -> None:
        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self._length = length

    def new_id(self) -> str:
        """Generate the next sequential identifier."""
        with self._lock:
            return f"{next(self._counter):0{self._length}d}"
