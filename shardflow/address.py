"""Actor addresses, machine shard layout and scope-based reference building."""

from __future__ import annotations

from dataclasses import dataclass, field

from .unaligned import load_unaligned_int, store_unaligned_int

ACTOR_TYPE_BYTES = 2
SHARD_ID_BYTES = 4
ACTOR_ID_BYTES = 4
MAX_ADDR_LAYER = 8
LOCAL_ACTOR_ADDR_LENGTH = ACTOR_TYPE_BYTES + ACTOR_ID_BYTES
MAX_ADDR_LENGTH = SHARD_ID_BYTES + MAX_ADDR_LAYER * LOCAL_ACTOR_ADDR_LENGTH


@dataclass(frozen=True)
class MachineInfo:
    """Shard layout of the cluster as seen from this machine."""

    num_shards: int = 1
    sid_anchor: int = 0
    min_sid: int = 0
    max_sid: int = 0

    @property
    def global_shard_count(self) -> int:
        return self.num_shards

    def is_local(self, shard_id: int) -> bool:
        """Whether a global shard id belongs to this machine."""
        return self.min_sid <= shard_id <= self.max_sid

    def global_shard_id(self, local_shard_id: int) -> int:
        """Translate a shard id local to this machine into a global one."""
        return self.sid_anchor + local_shard_id


@dataclass
class Address:
    """Shard id followed by up to eight (type, id) layers.

    The tail of the buffer holds the type id of the actor that owns the
    called method.
    """

    data: bytearray = field(default_factory=lambda: bytearray(MAX_ADDR_LENGTH))
    length: int = 0

    @classmethod
    def for_shard(cls, shard_id: int) -> Address:
        addr = cls()
        store_unaligned_int(addr.data, 0, shard_id, SHARD_ID_BYTES)
        addr.length = SHARD_ID_BYTES
        return addr

    @property
    def shard_id(self) -> int:
        return load_unaligned_int(self.data, 0, SHARD_ID_BYTES)

    @property
    def method_actor_tid(self) -> int:
        return load_unaligned_int(self.data, MAX_ADDR_LENGTH - ACTOR_TYPE_BYTES, ACTOR_TYPE_BYTES)

    @method_actor_tid.setter
    def method_actor_tid(self, type_id: int) -> None:
        store_unaligned_int(
            self.data, MAX_ADDR_LENGTH - ACTOR_TYPE_BYTES, type_id, ACTOR_TYPE_BYTES
        )

    def copy(self) -> Address:
        return Address(bytearray(self.data), self.length)


@dataclass(frozen=True)
class Scope:
    """An actor group layer: its group type id and its instance id."""

    type_id: int
    scope_id: int


class Reference:
    """Handle to an actor; subclasses set ``actor_type``."""

    actor_type: int = 0

    def __init__(self) -> None:
        self.addr = Address()

    def _make_address(self, src: Address, actor_id: int) -> None:
        self.addr.data[:src.length] = src.data[:src.length]
        self.addr.length = src.length
        offset = self.addr.length
        store_unaligned_int(self.addr.data, offset, self.actor_type & 0xFFFF, ACTOR_TYPE_BYTES)
        store_unaligned_int(self.addr.data, offset + ACTOR_TYPE_BYTES, actor_id, ACTOR_ID_BYTES)
        self.addr.length += LOCAL_ACTOR_ADDR_LENGTH


class ScopeBuilder:
    """Builds addresses by stacking scopes under a shard."""

    def __init__(self, shard_id: int = 0, *scopes: Scope) -> None:
        if len(scopes) >= MAX_ADDR_LAYER:
            raise ValueError(f"at most {MAX_ADDR_LAYER - 1} initial scopes are allowed")
        self._addr = Address()
        self.set_shard(shard_id)
        self._addr.length = SHARD_ID_BYTES
        for scope in scopes:
            self._push(scope)

    @property
    def address(self) -> Address:
        return self._addr.copy()

    @property
    def shard(self) -> int:
        return self._addr.shard_id

    def _push(self, scope: Scope) -> None:
        offset = self._addr.length
        store_unaligned_int(self._addr.data, offset, scope.type_id, ACTOR_TYPE_BYTES)
        store_unaligned_int(
            self._addr.data, offset + ACTOR_TYPE_BYTES, scope.scope_id, ACTOR_ID_BYTES
        )
        self._addr.length += LOCAL_ACTOR_ADDR_LENGTH

    def _require_scope(self) -> None:
        if self._addr.length < SHARD_ID_BYTES + LOCAL_ACTOR_ADDR_LENGTH:
            raise ValueError("no scope has been entered")

    def enter_sub_scope(self, scope: Scope) -> ScopeBuilder:
        if self._addr.length + LOCAL_ACTOR_ADDR_LENGTH >= MAX_ADDR_LENGTH:
            raise ValueError("address has no room for another scope")
        self._push(scope)
        return self

    def back_to_parent_scope(self) -> ScopeBuilder:
        self._require_scope()
        self._addr.length -= LOCAL_ACTOR_ADDR_LENGTH
        return self

    def current_scope_id(self) -> int:
        self._require_scope()
        return load_unaligned_int(
            self._addr.data, self._addr.length - ACTOR_ID_BYTES, ACTOR_ID_BYTES
        )

    def scope_layer_number(self) -> int:
        return (self._addr.length - SHARD_ID_BYTES) // LOCAL_ACTOR_ADDR_LENGTH

    def set_shard(self, shard_id: int) -> ScopeBuilder:
        store_unaligned_int(self._addr.data, 0, shard_id, SHARD_ID_BYTES)
        return self

    def build_ref(self, ref_type: type[Reference], actor_id: int) -> Reference:
        """Create a reference of ``ref_type`` addressed under the current scope."""
        if not (isinstance(ref_type, type) and issubclass(ref_type, Reference)):
            raise TypeError("ref_type must be a Reference subclass")
        ref = ref_type()
        ref._make_address(self._addr, actor_id)
        return ref