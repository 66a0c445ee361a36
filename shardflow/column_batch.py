"""Column batches: fixed-size value columns and variable-length sequence columns.

A column batch is the unit that moves between shards. ``share`` hands out
another view of the same storage. ``dump_to`` moves the contents into a
serialisation queue and leaves the batch empty. A :class:`Table` groups
several columns so they can be dumped together.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any


def _push(queue, item) -> None:
    if hasattr(queue, "push"):
        queue.push(item)
    else:
        queue.append(item)


class FixedColumnBatch:
    """A column of single values with a fixed capacity.

    A batch loaded from a dumped buffer has size and capacity equal to the
    number of values it was given.
    """

    fixed = True

    def __init__(self, capacity: int = 0, *, values: Sequence[Any] | None = None) -> None:
        if values is not None:
            self._storage: list[Any] = list(values)
            self._size = len(self._storage)
            self._capacity = self._size
            return
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._storage = [None] * capacity
        self._size = 0
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._size

    def _check_index(self, index: int) -> int:
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError("column batch index out of range")
        return index

    def __getitem__(self, index: int) -> Any:
        return self._storage[self._check_index(index)]

    def __setitem__(self, index: int, value: Any) -> None:
        self._storage[self._check_index(index)] = value

    def __iter__(self) -> Iterator[Any]:
        for index in range(self._size):
            yield self._storage[index]

    def append(self, value: Any) -> None:
        """Add a value at the end; raises IndexError when the batch is full."""
        if self._size >= self._capacity:
            raise IndexError("column batch is full")
        self._storage[self._size] = value
        self._size += 1

    def erase_tail(self) -> None:
        """Drop the last value, if any."""
        if self._size > 0:
            self._size -= 1

    def reset(self, capacity: int) -> None:
        """Replace the storage with a fresh, empty one of ``capacity`` slots."""
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._storage = [None] * capacity
        self._size = 0
        self._capacity = capacity

    def share(self) -> FixedColumnBatch:
        """Return a batch over the same storage with the current size."""
        other = FixedColumnBatch.__new__(type(self))
        other._storage = self._storage
        other._size = self._size
        other._capacity = self._capacity
        return other

    def dump_to(self, queue) -> None:
        """Move the values into ``queue`` as one tuple and empty this batch."""
        payload = tuple(self._storage[:self._size])
        self._storage = []
        self._size = 0
        self._capacity = 0
        _push(queue, payload)


class DynamicColumnBatch:
    """A column whose entries are variable-length sequences.

    Entries are stored back to back in a data buffer, indexed by
    ``(offset, length)`` metadata. The data buffer doubles its reserved
    size whenever an entry does not fit.
    """

    fixed = False

    def __init__(
        self,
        capacity: int = 0,
        init_reserved: int = 0,
        *,
        meta: Sequence[tuple[int, int]] | None = None,
        data: Sequence[Any] | None = None,
    ) -> None:
        if meta is not None or data is not None:
            self._meta: list[tuple[int, int] | None] = [tuple(m) for m in (meta or ())]
            self._data: list[Any] = list(data or ())
            self._size = len(self._meta)
            self._capacity = self._size
            if self._size:
                offset, length = self._meta[-1]
                self._occupied = offset + length
            else:
                self._occupied = 0
            if self._occupied > len(self._data):
                raise ValueError("metadata refers past the end of the data")
            self._reserved = self._occupied
            return
        if capacity < 0 or init_reserved < 0:
            raise ValueError("capacity and reserved size must not be negative")
        self._meta = [None] * capacity
        self._data = []
        self._size = 0
        self._capacity = capacity
        self._occupied = 0
        self._reserved = init_reserved

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def reserved(self) -> int:
        """Number of data elements the current buffer can hold."""
        return self._reserved

    def __len__(self) -> int:
        return self._size

    def _wrap(self, items: list[Any]) -> Any:
        return tuple(items)

    def __getitem__(self, index: int) -> Any:
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError("column batch index out of range")
        offset, length = self._meta[index]
        return self._wrap(self._data[offset:offset + length])

    def __iter__(self) -> Iterator[Any]:
        for index in range(self._size):
            yield self[index]

    def _ensure_space(self, length: int) -> None:
        required = self._occupied + length
        if required > self._reserved:
            reserved = self._reserved
            while reserved < required:
                reserved = max(reserved * 2, 1)
            self._reserved = reserved
            # A fresh buffer: earlier shares keep the old one.
            self._data = list(self._data[:self._occupied])

    def push_back(self, items: Sequence[Any], extra: Any = None) -> None:
        """Append one entry made of ``items``, followed by ``extra`` if given."""
        if self._size >= self._capacity:
            raise IndexError("column batch is full")
        values = list(items)
        if extra is not None:
            values.append(extra)
        self._ensure_space(len(values))
        self._meta[self._size] = (self._occupied, len(values))
        self._size += 1
        del self._data[self._occupied:]
        self._data.extend(values)
        self._occupied += len(values)

    def share(self) -> DynamicColumnBatch:
        """Return a batch over the same buffers with the current size."""
        other = DynamicColumnBatch.__new__(type(self))
        other._meta = self._meta
        other._data = self._data
        other._size = self._size
        other._capacity = self._capacity
        other._occupied = self._occupied
        other._reserved = self._reserved
        return other

    def dump_to(self, queue) -> None:
        """Move metadata and data into ``queue`` as two tuples; empty this batch."""
        meta = tuple(self._meta[:self._size])
        data = tuple(self._data[:self._occupied])
        self._meta = []
        self._data = []
        self._size = 0
        self._capacity = 0
        self._occupied = 0
        self._reserved = 0
        _push(queue, meta)
        _push(queue, data)


class StringColumnBatch(DynamicColumnBatch):
    """A column of strings; entries read back as ``str``."""

    def _wrap(self, items: list[Any]) -> str:
        return "".join(items)

    def push_back(self, items: str, extra: str | None = None) -> None:
        if not isinstance(items, str):
            raise TypeError("a string column holds strings")
        if extra is not None and (not isinstance(extra, str) or len(extra) != 1):
            raise TypeError("extra must be a single character")
        super().push_back(items, extra)


class PathColumnBatch(DynamicColumnBatch):
    """A column of integer paths; entries read back as tuples of ints."""

    def push_back(self, items: Sequence[int], extra: int | None = None) -> None:
        values = [int(v) for v in items]
        super().push_back(values, None if extra is None else int(extra))


class Table:
    """Several columns that are dumped together, in order."""

    def __init__(self, *columns: Any) -> None:
        for column in columns:
            if not callable(getattr(column, "dump_to", None)):
                raise TypeError("every table column must provide dump_to")
        self.columns = columns

    def __len__(self) -> int:
        return len(self.columns)

    def __getitem__(self, index: int) -> Any:
        return self.columns[index]

    def dump_to(self, queue) -> None:
        for column in self.columns:
            column.dump_to(queue)


def make_table(*args: Any) -> Table:
    """Group the given columns into a table."""
    return Table(*args)