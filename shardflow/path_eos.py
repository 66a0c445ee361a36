"""End-of-stream markers that record the fan-out path they travelled.

Each step records how many downstream branches a stream split into and
which branch this marker followed. A check tree collects markers and
reports when every branch of the scope has finished.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .column_batch import FixedColumnBatch

MAX_EOS_STEP_NUM = 15


@dataclass(frozen=True)
class EosStep:
    """One fan-out: ``ds_num`` branches, this marker took branch ``ds_id``."""

    ds_num: int
    ds_id: int


class PathEos:
    """An end-of-stream marker carrying its fan-out path."""

    def __init__(self, steps: Optional[FixedColumnBatch] = None) -> None:
        self.steps = steps if steps is not None else FixedColumnBatch(MAX_EOS_STEP_NUM)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    def get_copy(self) -> PathEos:
        """Return an independent marker with the same steps."""
        copy = PathEos()
        for step in self.steps:
            copy.steps.append(step)
        return copy

    def back_to_prev_scope(self, prev_scope_offset: int) -> None:
        """Drop steps until at most ``prev_scope_offset`` remain."""
        while len(self.steps) > prev_scope_offset:
            self.steps.erase_tail()

    def append_step(self, ds_num: int, ds_id: int) -> None:
        """Record a further fan-out; raises IndexError when the path is full."""
        self.steps.append(EosStep(ds_num, ds_id))


@dataclass(eq=False)
class _Node:
    expect_num: int = 0
    current_num: int = 0
    next: list = field(default_factory=list)
    parent: Optional["_Node"] = None

    def set(self, expect_num: int, parent: Optional["_Node"]) -> None:
        self.expect_num = expect_num
        self.current_num = 0
        self.next = [_Node() for _ in range(expect_num)]
        self.parent = parent


class PathEosCheckTree:
    """Merges markers and tells when all branches of a scope have ended."""

    def __init__(self) -> None:
        self._head = _Node()

    def insert_and_merge(self, eos: PathEos, scope_offset: int = 0) -> bool:
        """Insert a marker; return True once every branch has been seen."""
        head = self._head
        parent: Optional[_Node] = None
        steps = list(eos.steps)
        for step in steps[scope_offset:]:
            if not head.next:
                head.set(step.ds_num, parent)
            if not 0 <= step.ds_id < len(head.next):
                raise ValueError(
                    f"branch {step.ds_id} is outside a fan-out of {len(head.next)}"
                )
            parent = head
            head = head.next[step.ds_id]
        node = parent
        while node is not None:
            node.current_num += 1
            if node.current_num != node.expect_num:
                break
            node.next.clear()
            node = node.parent
        return node is None