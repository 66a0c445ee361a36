"""Actor messages: headers, payload-carrying messages and their wire form.

A serialised message is a little-endian 32-bit length (which does not
count itself), the packed header, a 32-bit count of payload buffers and
then each buffer preceded by its own 32-bit length.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from .address import MAX_ADDR_LENGTH, SHARD_ID_BYTES, Address

_HEADER_FORMAT = f"<B{MAX_ADDR_LENGTH}sBIIBB"
HEADER_SIZE = struct.calcsize(_HEADER_FORMAT)
_U32 = struct.Struct("<I")


class MessageType(IntEnum):
    """Kind of an actor message."""

    USER = 0x01
    RESPONSE = 0x02
    EXCEPTION_RESPONSE = 0x03
    FORCE_STOP = 0x04
    PEACE_STOP = 0x08


@dataclass
class Header:
    """Routing information carried by every message."""

    addr: Address = field(default_factory=Address)
    behavior_tid: int = 0
    src_shard_id: int = 0
    pr_id: int = 0
    m_type: MessageType = MessageType.USER
    from_network: bool = False

    def pack(self) -> bytes:
        """Encode the header into its fixed-size binary form."""
        return struct.pack(
            _HEADER_FORMAT,
            self.addr.length,
            bytes(self.addr.data),
            self.behavior_tid,
            self.src_shard_id,
            self.pr_id,
            int(self.m_type),
            int(self.from_network),
        )

    @classmethod
    def unpack(cls, raw: bytes) -> Header:
        """Decode a header produced by :meth:`pack`."""
        if len(raw) != HEADER_SIZE:
            raise ValueError(f"a header takes {HEADER_SIZE} bytes, got {len(raw)}")
        length, data, behavior_tid, src, pr_id, m_type, from_network = struct.unpack(
            _HEADER_FORMAT, raw
        )
        return cls(
            addr=Address(bytearray(data), length),
            behavior_tid=behavior_tid,
            src_shard_id=src,
            pr_id=pr_id,
            m_type=MessageType(m_type),
            from_network=bool(from_network),
        )


def _as_buffer(item: Any) -> bytes:
    if isinstance(item, (bytes, bytearray, memoryview)):
        return bytes(item)
    raise TypeError("payload buffers must be bytes-like")


@dataclass
class ActorMessage:
    """A header and an optional payload.

    A payload must provide ``dump_to(queue)``, appending bytes-like buffers
    to the list it is given.
    """

    hdr: Header
    data: Any = None

    @property
    def has_payload(self) -> bool:
        return self.data is not None

    def serialize(self) -> bytes:
        """Encode the message into its wire form."""
        buffers: list[bytes] = []
        if self.data is not None:
            dump = getattr(self.data, "dump_to", None)
            if not callable(dump):
                raise TypeError("message payload must provide dump_to")
            queue: list[Any] = []
            dump(queue)
            buffers = [_as_buffer(item) for item in queue]
        body_len = HEADER_SIZE + 4 + 4 * len(buffers) + sum(len(b) for b in buffers)
        parts = [_U32.pack(body_len), self.hdr.pack(), _U32.pack(len(buffers))]
        for buf in buffers:
            parts.append(_U32.pack(len(buf)))
            parts.append(buf)
        return b"".join(parts)


def _message(
    addr: Address,
    behavior_tid: int,
    src_shard_id: int,
    pr_id: int,
    m_type: MessageType,
    data: Any,
) -> ActorMessage:
    header = Header(
        addr=addr.copy(),
        behavior_tid=behavior_tid,
        src_shard_id=src_shard_id,
        pr_id=pr_id,
        m_type=MessageType(m_type),
        from_network=False,
    )
    return ActorMessage(header, data)


def make_system_message(addr: Address, m_type: MessageType) -> ActorMessage:
    """A payload-free control message such as a stop request."""
    return _message(addr, 0, 0, 0, m_type, None)


def make_request_message(
    addr: Address,
    behavior_tid: int,
    src_shard_id: int,
    pr_id: int,
    m_type: MessageType = MessageType.USER,
    data: Any = None,
) -> ActorMessage:
    """A request that expects a response under ``pr_id``."""
    return _message(addr, behavior_tid, src_shard_id, pr_id, m_type, data)


def make_one_way_request_message(
    addr: Address,
    behavior_tid: int,
    src_shard_id: int,
    m_type: MessageType = MessageType.USER,
    data: Any = None,
) -> ActorMessage:
    """A request that expects no response."""
    return _message(addr, behavior_tid, src_shard_id, 0, m_type, data)


def make_response_message(
    shard_id: int,
    pr_id: int,
    m_type: MessageType = MessageType.RESPONSE,
    data: Any = None,
) -> ActorMessage:
    """A response addressed to the shard that issued request ``pr_id``."""
    addr = Address.for_shard(shard_id)
    if addr.length != SHARD_ID_BYTES:
        raise ValueError("response address must hold only a shard id")
    return _message(addr, 0, 0, pr_id, m_type, data)