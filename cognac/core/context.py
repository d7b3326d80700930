"""Per-item context carried through the middleware chain."""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ContextState(Enum):
    """Lifecycle of one context. Moves from ``RUNNING`` to ``DONE`` only."""

    RUNNING = "running"
    DONE = "done"


class Context(Generic[T]):
    """Mutable state for one emitted item.

    Attributes:
        payload: The item being processed. The reference is fixed at creation;
            middleware may still mutate fields inside it.
        annotations: Scratch space middleware use to pass data to later steps
            or to the source's ``on_done`` hook. Keys and values are up to the
            middleware; the engine never inspects them.
    """

    __slots__ = ("_payload", "_state", "annotations")

    def __init__(self, payload: T) -> None:
        self._payload = payload
        self._state = ContextState.RUNNING
        self.annotations: dict[Any, Any] = {}

    @property
    def payload(self) -> T:
        return self._payload

    @property
    def state(self) -> ContextState:
        return self._state

    def mark_done(self) -> None:
        """Stop the chain after the current step. Calling it again is a no-op."""
        self._state = ContextState.DONE

    def is_done(self) -> bool:
        return self._state is ContextState.DONE

    # ── Mapping helpers over annotations ─────────────────────────────

    def get(self, key: Any, default: Any = None) -> Any:
        return self.annotations.get(key, default)

    def __getitem__(self, key: Any) -> Any:
        return self.annotations[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self.annotations[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self.annotations

    def __repr__(self) -> str:
        return f"Context(payload={self._payload!r}, state={self._state.value})"
