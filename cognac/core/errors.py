"""Exceptions raised by the pipeline engine itself.

Failures raised by hooks or middleware are never wrapped in these types; the
pipeline re-raises the original exception object to the caller.
"""

from __future__ import annotations


class CognacError(RuntimeError):
    """Base class for engine-level errors."""


class SourceSubscriptionError(CognacError):
    """A source already has a handler and cannot accept another one."""


class SourceNotSubscribedError(CognacError):
    """A source tried to emit an item before any handler subscribed."""
