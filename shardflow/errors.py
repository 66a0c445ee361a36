"""Exceptions raised by actor methods, cancelled tasks and GPU work."""

from __future__ import annotations


class ActorError(Exception):
    """Base class for errors carrying a textual context."""

    def __init__(self, context: str) -> None:
        super().__init__(context)
        self.context = context

    def __str__(self) -> str:
        return self.context


class ActorMethodError(ActorError):
    """An actor method failed; the context describes why.

    When ``length`` is given only that many leading characters of
    ``context`` are kept.
    """

    def __init__(self, context: str, length: int | None = None) -> None:
        if length is not None:
            if length < 0:
                raise ValueError("length must not be negative")
            context = context[:length]
        super().__init__(context)


class TaskCanceledError(ActorError):
    """A pending task was cancelled from outside."""


class GpuError(ActorError):
    """A GPU work submission failed."""