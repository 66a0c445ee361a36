"""Little-endian integers read from and written to arbitrary byte offsets."""

from __future__ import annotations

_BYTE_ORDER = "little"


def _check_span(buffer, offset: int, count: int) -> None:
    if offset < 0 or count < 0:
        raise ValueError("offset and size must not be negative")
    if offset + count > len(buffer):
        raise ValueError(
            f"need {count} bytes at offset {offset}, buffer holds {len(buffer)}"
        )


def load_unaligned_int(buffer, offset: int = 0, size: int = 4) -> int:
    """Read an unsigned integer of ``size`` bytes starting at ``offset``."""
    _check_span(buffer, offset, size)
    return int.from_bytes(bytes(buffer[offset:offset + size]), _BYTE_ORDER)


def load_unaligned_int_partial(buffer, offset: int, length: int, size: int = 8) -> int:
    """Read ``length`` bytes into a zero-filled integer of ``size`` bytes."""
    if length > size:
        raise ValueError(f"cannot read {length} bytes into a {size}-byte integer")
    _check_span(buffer, offset, length)
    return int.from_bytes(bytes(buffer[offset:offset + length]), _BYTE_ORDER)


def store_unaligned_int(buffer: bytearray, offset: int, value: int, size: int = 4) -> None:
    """Write ``value`` as an unsigned ``size``-byte integer at ``offset``.

    Raises OverflowError when the value does not fit.
    """
    _check_span(buffer, offset, size)
    buffer[offset:offset + size] = value.to_bytes(size, _BYTE_ORDER)