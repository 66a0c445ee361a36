import struct

import pytest

from shardflow.address import Address, ScopeBuilder, Scope
from shardflow.message import (
    HEADER_SIZE,
    ActorMessage,
    Header,
    MessageType,
    make_one_way_request_message,
    make_request_message,
    make_response_message,
    make_system_message,
)


class BytesPayload:
    def __init__(self, *chunks):
        self.chunks = chunks

    def dump_to(self, queue):
        queue.extend(self.chunks)


def _address():
    return ScopeBuilder(3, Scope(7, 11)).address


@pytest.mark.parametrize(
    "value, member",
    [
        (0x01, MessageType.USER),
        (0x02, MessageType.RESPONSE),
        (0x03, MessageType.EXCEPTION_RESPONSE),
        (0x04, MessageType.FORCE_STOP),
        (0x08, MessageType.PEACE_STOP),
    ],
)
def test_message_type_values_survive_header_packing(value, member):
    assert MessageType(value) is member
    msg = make_system_message(_address(), MessageType(value))
    raw = msg.serialize()
    assert Header.unpack(raw[4:4 + HEADER_SIZE]).m_type is member


def test_header_round_trip():
    hdr = Header(_address(), 5, 2, 9, MessageType.RESPONSE, True)
    packed = hdr.pack()
    assert len(packed) == HEADER_SIZE
    assert Header.unpack(packed) == hdr


def test_header_unpack_rejects_wrong_size():
    with pytest.raises(ValueError):
        Header.unpack(b"\x00" * (HEADER_SIZE - 1))


def test_serialize_without_payload():
    msg = make_system_message(_address(), MessageType.PEACE_STOP)
    raw = msg.serialize()
    (length,) = struct.unpack_from("<I", raw, 0)
    assert length == len(raw) - 4
    assert Header.unpack(raw[4:4 + HEADER_SIZE]) == msg.hdr
    (count,) = struct.unpack_from("<I", raw, 4 + HEADER_SIZE)
    assert count == 0
    assert len(raw) == 4 + HEADER_SIZE + 4


def test_serialize_with_payload_buffers():
    msg = make_request_message(_address(), 4, 1, 6, MessageType.USER, BytesPayload(b"ab", b"xyz"))
    raw = msg.serialize()
    (length,) = struct.unpack_from("<I", raw, 0)
    assert length == len(raw) - 4
    pos = 4 + HEADER_SIZE
    (count,) = struct.unpack_from("<I", raw, pos)
    assert count == 2
    pos += 4
    chunks = []
    for _ in range(count):
        (size,) = struct.unpack_from("<I", raw, pos)
        pos += 4
        chunks.append(raw[pos:pos + size])
        pos += size
    assert chunks == [b"ab", b"xyz"]
    assert pos == len(raw)


def test_serialize_rejects_payload_without_dump_to():
    msg = ActorMessage(Header(), data=object())
    with pytest.raises(TypeError):
        msg.serialize()


def test_serialize_rejects_non_bytes_buffers():
    msg = ActorMessage(Header(), data=BytesPayload((1, 2)))
    with pytest.raises(TypeError):
        msg.serialize()


def test_system_message_fields():
    addr = _address()
    msg = make_system_message(addr, MessageType.FORCE_STOP)
    assert msg.hdr.behavior_tid == 0
    assert msg.hdr.src_shard_id == 0
    assert msg.hdr.pr_id == 0
    assert msg.hdr.m_type is MessageType.FORCE_STOP
    assert msg.hdr.from_network is False
    assert msg.has_payload is False


def test_request_copies_address():
    addr = _address()
    msg = make_request_message(addr, 2, 1, 8)
    addr.data[0] = 99
    assert msg.hdr.addr.shard_id == 3
    assert msg.hdr.pr_id == 8
    assert msg.hdr.m_type is MessageType.USER


def test_one_way_request_has_no_promise():
    msg = make_one_way_request_message(_address(), 2, 5, data=BytesPayload(b"z"))
    assert msg.hdr.pr_id == 0
    assert msg.hdr.src_shard_id == 5
    assert msg.has_payload


def test_response_message_targets_shard():
    msg = make_response_message(12, 4)
    assert msg.hdr.addr.shard_id == 12
    assert msg.hdr.addr.length == 4
    assert msg.hdr.pr_id == 4
    assert msg.hdr.m_type is MessageType.RESPONSE
    assert msg.hdr.behavior_tid == 0


def test_method_actor_tid_survives_serialization():
    addr = Address.for_shard(1)
    addr.method_actor_tid = 321
    msg = make_system_message(addr, MessageType.USER)
    raw = msg.serialize()
    assert Header.unpack(raw[4:4 + HEADER_SIZE]).addr.method_actor_tid == 321