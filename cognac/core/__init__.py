"""Pipeline engine: context, source contract and the middleware runner."""

from cognac.core.context import Context, ContextState
from cognac.core.errors import CognacError, SourceNotSubscribedError, SourceSubscriptionError
from cognac.core.pipeline import ErrorObserver, Middleware, Pipeline
from cognac.core.source import BaseSource, ItemHandler, Source

__all__ = [
    "BaseSource",
    "CognacError",
    "Context",
    "ContextState",
    "ErrorObserver",
    "ItemHandler",
    "Middleware",
    "Pipeline",
    "Source",
    "SourceNotSubscribedError",
    "SourceSubscriptionError",
]
