"""cognac - sequential async middleware pipelines fed by pluggable sources."""

from cognac.core import (
    BaseSource,
    CognacError,
    Context,
    ContextState,
    ErrorObserver,
    ItemHandler,
    Middleware,
    Pipeline,
    Source,
    SourceNotSubscribedError,
    SourceSubscriptionError,
)

__version__ = "0.1.0"

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
