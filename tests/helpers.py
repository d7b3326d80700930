"""Fake source and middleware builders shared by the test modules."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from cognac import BaseSource, Context


class FakeMessage:
    def __init__(self, data: Any) -> None:
        self.data = data


class FakeSource(BaseSource[FakeMessage]):
    """Source whose hooks record calls and can be overridden per test."""

    name = "fake"

    def __init__(self) -> None:
        super().__init__()
        self.started = 0
        self.stopped = 0
        self.created: list[Context[FakeMessage]] = []
        self.finished: list[Context[FakeMessage]] = []
        self.pre_hook: Callable[[Context[FakeMessage]], Any] | None = None
        self.post_hook: Callable[[Context[FakeMessage]], Any] | None = None

    async def start(self) -> None:
        self.started += 1

    async def stop(self) -> None:
        self.stopped += 1

    async def on_context_create(self, context: Context[FakeMessage]) -> None:
        self.created.append(context)
        if self.pre_hook is not None:
            self.pre_hook(context)

    async def on_done(self, context: Context[FakeMessage]) -> None:
        self.finished.append(context)
        if self.post_hook is not None:
            self.post_hook(context)

    async def receive(self, data: Any) -> None:
        await self.emit(FakeMessage(data))


def delayed(processed: list[Any], tag: Any, delay: float, *, done: bool = False, error: Exception | None = None):
    """Middleware that sleeps, records ``tag`` and optionally stops or fails."""

    async def step(ctx: Context[FakeMessage]) -> None:
        await asyncio.sleep(delay)
        processed.append(tag)
        if done:
            ctx.mark_done()
        if error is not None:
            raise error

    step.__name__ = f"step_{tag}"
    return step


