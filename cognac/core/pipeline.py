"""Sequential middleware pipeline driven by a pluggable source.

The pipeline subscribes ``process`` on its source. Each emitted item gets a
fresh ``Context`` and walks through::

    on_context_create -> middleware[0] ... middleware[n-1] -> on_done

Any middleware may call ``ctx.mark_done()`` to stop the chain; ``on_done``
still runs in that case. A pre-hook that marks the context done rejects the
item outright and skips ``on_done`` as well.

Usage::

    pipeline = Pipeline(QueueSource(...))
    pipeline.add_middleware(decode)
    pipeline.add_middleware(enrich)
    pipeline.add_terminal(store)
    pipeline.on_error(lambda err, ctx: alert(err, ctx.payload))
    await pipeline.start()
"""

from __future__ import annotations

import inspect
import time
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Literal, TypeAlias, TypeVar

from loguru import logger

from cognac.core.context import Context
from cognac.core.source import Source
from cognac.telemetry.base import TelemetryPort

T = TypeVar("T")

Middleware: TypeAlias = Callable[[Context[T]], Awaitable[Any] | Any]
"""One chain step. Plain functions and coroutine functions are both accepted."""

ErrorObserver: TypeAlias = Callable[[BaseException, Context[T]], Any]
"""Called synchronously with the failure and the context live at the time."""

FailureStage: TypeAlias = Literal["pre_hook", "middleware", "post_hook"]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class Pipeline(Generic[T]):
    """Ordered chain of middleware fed by exactly one source.

    The middleware list is append-only. Items are not serialized against each
    other: if the source calls the handler again before an earlier item
    settles, both run interleaved at their ``await`` points.
    """

    def __init__(
        self,
        source: Source[T],
        *,
        name: str = "pipeline",
        telemetry: TelemetryPort | None = None,
        report_unhandled: bool = True,
    ) -> None:
        self._source = source
        self._name = name
        self._telemetry = telemetry
        self._report_unhandled = report_unhandled
        self._middleware: list[Middleware[T]] = []
        self._error_observers: list[ErrorObserver[T]] = []
        self._in_flight = 0
        self._source.subscribe(self.process)

    # ── Registration ─────────────────────────────────────────────────

    def add_middleware(self, fn: Middleware[T]) -> None:
        """Append ``fn`` to the end of the chain."""
        self._middleware.append(fn)

    def add_terminal(self, fn: Middleware[T]) -> None:
        """Append ``fn`` as a sink: once it returns, the context is marked done."""

        async def terminal(ctx: Context[T]) -> None:
            await _maybe_await(fn(ctx))
            if not ctx.is_done():
                ctx.mark_done()

        terminal.__name__ = getattr(fn, "__name__", type(fn).__name__)
        self._middleware.append(terminal)

    def on_error(self, observer: ErrorObserver[T]) -> ErrorObserver[T]:
        """Subscribe ``observer`` to item failures. Usable as a decorator."""
        self._error_observers.append(observer)
        return observer

    def remove_error_observer(self, observer: ErrorObserver[T]) -> None:
        if observer in self._error_observers:
            self._error_observers.remove(observer)

    # ── Lifecycle ────────────────────────────────────────────────────

    async def start(self) -> Any:
        logger.info("Starting pipeline {}", self._name)
        return await _maybe_await(self._source.start())

    async def stop(self) -> Any:
        stop = getattr(self._source, "stop", None)
        if stop is None:
            return None
        logger.info("Stopping pipeline {}", self._name)
        return await _maybe_await(stop())

    # ── Execution ────────────────────────────────────────────────────

    async def process(self, item: T) -> None:
        """Run one item through the chain.

        Raises the original exception of whichever hook or middleware failed,
        after every error observer has seen it.
        """
        ctx: Context[T] = Context(item)
        started = time.monotonic()
        stage: FailureStage = "pre_hook"
        self._track_in_flight(+1)
        try:
            pre_hook = getattr(self._source, "on_context_create", None)
            if pre_hook is not None:
                await _maybe_await(pre_hook(ctx))
            if ctx.is_done():
                logger.debug("Pipeline {} rejected item at pre-hook", self._name)
                self._record_outcome("rejected", started)
                return

            stage = "middleware"
            index = 0
            while index < len(self._middleware):
                await _maybe_await(self._middleware[index](ctx))
                index += 1
                if ctx.is_done():
                    break

            stage = "post_hook"
            post_hook = getattr(self._source, "on_done", None)
            if post_hook is not None:
                await _maybe_await(post_hook(ctx))
        except Exception as err:
            self._notify_error(err, ctx, stage)
            self._record_outcome("failed", started, stage=stage)
            raise
        finally:
            self._track_in_flight(-1)

        self._record_outcome("completed", started)

    def _notify_error(self, err: Exception, ctx: Context[T], stage: FailureStage) -> None:
        if not self._error_observers:
            if self._report_unhandled:
                logger.opt(exception=err).error(
                    "Unhandled error in pipeline {} ({}): {}", self._name, stage, err
                )
            return

        for observer in list(self._error_observers):
            try:
                observer(err, ctx)
            except Exception as observer_err:
                logger.exception(
                    "Error observer {!r} failed in pipeline {}: {}",
                    observer,
                    self._name,
                    observer_err,
                )

    # ── Telemetry ────────────────────────────────────────────────────

    def _labels(self, **extra: str) -> tuple[tuple[str, str], ...]:
        return (("pipeline", self._name), *extra.items())

    # A failing backend is logged and never replaces an item's own outcome.

    def _track_in_flight(self, delta: int) -> None:
        self._in_flight += delta
        if self._telemetry is None:
            return
        try:
            self._telemetry.gauge("items_in_flight", float(self._in_flight), self._labels())
        except Exception as e:
            logger.exception("Telemetry gauge failed in pipeline {}: {}", self._name, e)

    def _record_outcome(
        self, outcome: str, started: float, *, stage: FailureStage | None = None
    ) -> None:
        if self._telemetry is None:
            return
        try:
            self._telemetry.incr("items_total", labels=self._labels(outcome=outcome))
            self._telemetry.timing(
                "item_duration_seconds", time.monotonic() - started, self._labels()
            )
            if stage is not None:
                self._telemetry.incr("item_failures_total", labels=self._labels(stage=stage))
        except Exception as e:
            logger.exception("Telemetry recording failed in pipeline {}: {}", self._name, e)

    # ── Introspection ────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def source(self) -> Source[T]:
        return self._source

    @property
    def telemetry(self) -> TelemetryPort | None:
        return self._telemetry

    @property
    def middleware(self) -> tuple[Middleware[T], ...]:
        return tuple(self._middleware)

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def __len__(self) -> int:
        return len(self._middleware)

    def __repr__(self) -> str:
        names = [getattr(m, "__name__", type(m).__name__) for m in self._middleware]
        return f"Pipeline({self._name}: {' → '.join(names)})"
