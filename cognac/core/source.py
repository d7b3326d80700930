"""Contract between the pipeline and whatever produces its items.

A concrete source (queue consumer, socket listener, file watcher) adapts its
native protocol into calls on the single handler it receives through
``subscribe``. Only ``start`` and ``subscribe`` are required. ``stop``,
``on_context_create`` and ``on_done`` are optional and looked up at runtime;
every one of them may be a plain function or a coroutine function.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Protocol, TypeAlias, TypeVar, runtime_checkable

from loguru import logger

from cognac.core.errors import SourceNotSubscribedError, SourceSubscriptionError

T = TypeVar("T")

ItemHandler: TypeAlias = Callable[[T], Awaitable[None]]
"""Handler a source calls once per produced item. Awaiting it yields that
item's completion or raises that item's failure."""


@runtime_checkable
class Source(Protocol[T]):
    """Protocol every pipeline source satisfies.

    Optional members, detected with ``getattr``:

    - ``stop()``: cease producing items and release resources.
    - ``on_context_create(context)``: runs before any middleware. Calling
      ``context.mark_done()`` here rejects the item; neither the chain nor
      ``on_done`` runs.
    - ``on_done(context)``: runs after the chain completes without failure,
      including when a middleware stopped it early.
    """

    def start(self) -> Awaitable[Any] | None:
        """Begin producing items. May be a no-op if items already flow."""

    def subscribe(self, handler: ItemHandler[T]) -> None:
        """Register the one handler invoked for each produced item."""


class BaseSource(ABC, Generic[T]):
    """Convenience base for sources that hold exactly one handler.

    Subclasses implement ``start`` and call ``emit`` for every item they
    produce. ``emit`` returns once the pipeline has finished with the item, so
    a subclass that awaits it gets per-item backpressure for free.
    """

    name: str = "source"

    def __init__(self) -> None:
        self._handler: ItemHandler[T] | None = None

    @abstractmethod
    async def start(self) -> None:
        """Begin producing items."""

    async def stop(self) -> None:
        """Stop producing items. Default implementation does nothing."""

    def subscribe(self, handler: ItemHandler[T]) -> None:
        if self._handler is not None:
            raise SourceSubscriptionError(f"Source {self.name!r} already has a subscriber")
        self._handler = handler
        logger.debug("Source {} subscribed", self.name)

    async def emit(self, item: T) -> None:
        """Hand one item to the subscribed handler and wait for its outcome."""
        if self._handler is None:
            raise SourceNotSubscribedError(f"Source {self.name!r} has no subscriber")
        await self._handler(item)

    @property
    def is_subscribed(self) -> bool:
        return self._handler is not None
